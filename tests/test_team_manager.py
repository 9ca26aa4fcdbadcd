import pytest

from core.exceptions import InvalidTeamCodeError, TeamFullError, TeamNameTakenError
from core.permissions import Role
from models.team import TeamModel
from utils.team_manager import TeamManager, rank_for
from utils.user_manager import UserManager


def _leader(db, index: int):
    return UserManager(db).build_user(
        name=f"Leader {index}",
        email=f"leader{index}@example.com",
        phone=f"70000000{index:02d}",
        password="secret123",
        role=Role.LEADER,
    )


def _team(db, index: int) -> TeamModel:
    team = TeamManager(db).create_team(f"Team {index}", "COEP", _leader(db, index))
    db.commit()
    return team


def test_first_code_is_the_base_and_codes_count_up(db):
    codes = [_team(db, i).team_code for i in range(3)]
    assert codes == ["12300", "12301", "12302"]


def test_counter_continues_after_existing_codes(db):
    leader = _leader(db, 1)
    db.add(
        TeamModel(
            team_id="legacy",
            team_name="Legacy",
            team_code="12345",
            college_name="COEP",
            leader_id=leader.user_id,
            total_points=0,
            rank=0,
            created_at="2025-01-01T00:00:00+00:00",
        )
    )
    db.commit()

    assert _team(db, 2).team_code == "12346"


def test_counter_seeded_by_a_concurrent_registration_is_reused(db, monkeypatch):
    assert _team(db, 1).team_code == "12300"
    db.expunge_all()

    real_increment = TeamManager._increment_counter
    calls = []

    def lost_race(self):
        # The first UPDATE ran before the other registration created the row
        calls.append(True)
        return 0 if len(calls) == 1 else real_increment(self)

    monkeypatch.setattr(TeamManager, "_increment_counter", lost_race)
    team = _team(db, 2)

    assert team.team_code == "12301"
    assert len(calls) == 2
    assert db.query(TeamModel).count() == 2


def test_leader_is_the_only_member_of_a_new_team(db):
    team = _team(db, 1)
    assert TeamManager(db).member_count(team) == 1
    assert [m.user_id for m in team.members] == [team.leader_id]


def test_duplicate_team_name_is_rejected(db):
    _team(db, 1)
    with pytest.raises(TeamNameTakenError):
        TeamManager(db).create_team("Team 1", "COEP", _leader(db, 2))
    db.rollback()


def test_unknown_code_raises(db):
    with pytest.raises(InvalidTeamCodeError) as exc_info:
        TeamManager(db).get_team_by_code("99999")
    assert str(exc_info.value) == "Invalid Team Code"


def test_capacity_is_enforced_at_five(db):
    manager = TeamManager(db)
    team = _team(db, 1)
    for i in range(2, 6):
        manager.add_member(team, _leader(db, 10 + i))
    db.commit()

    assert manager.member_count(team) == 5
    with pytest.raises(TeamFullError) as exc_info:
        manager.add_member(team, _leader(db, 30))
    assert str(exc_info.value) == "Team is full (Max 5 members)"
    db.rollback()


def test_ties_share_a_rank():
    points = [300.0, 250.0, 250.0, 100.0]
    assert [rank_for(p, points) for p in points] == [1, 2, 2, 4]
