from datetime import timedelta

from core.permissions import Role
from utils.phase_manager import PhaseManager
from utils.stats_manager import NO_ACTIVE_PHASE, StatsManager
from utils.timestamps import utc_now


def test_stats_without_phases(db):
    stats = StatsManager(db).collect()
    assert stats.current_phase == NO_ACTIVE_PHASE
    assert stats.total_teams == 0


def test_stats_route_counts_users_and_phase(client, register_leader, register_member, staff_token, bearer, phase, db):
    leader = register_leader()
    register_member(leader["teamCode"])
    evaluator_token = staff_token(Role.EVALUATOR, index=2)
    admin = bearer(staff_token(Role.ADMIN, index=1))

    response = client.get("/api/admin/stats", headers=admin)

    assert response.status_code == 200
    assert response.json()["stats"] == {
        "totalTeams": 1,
        "totalParticipants": 2,
        "totalEvaluators": 1,
        "totalUsers": 4,
        "currentPhase": "Round 1",
    }
    assert client.get("/api/admin/stats", headers=bearer(evaluator_token)).status_code == 403


def test_current_phase_follows_activation(db, phase):
    manager = PhaseManager(db)
    finals = manager.create_phase(
        name="Finals",
        start_date=utc_now() + timedelta(days=40),
        end_date=utc_now() + timedelta(days=45),
    )
    # Both phases start out active; the earliest start wins
    assert StatsManager(db).collect().current_phase == "Round 1"

    manager.activate_phase(finals.phase_id)
    db.expire_all()
    assert StatsManager(db).collect().current_phase == "Finals"


def test_team_listing_includes_roster(client, register_leader, register_member, staff_token, bearer):
    leader = register_leader()
    register_member(leader["teamCode"], index=1)
    register_member(leader["teamCode"], index=2)
    register_leader(email="ravi@example.com", phone="9000000002", teamName="Null Pointers")

    response = client.get("/api/admin/teams", headers=bearer(staff_token()))

    assert response.status_code == 200
    teams = response.json()["teams"]
    assert [t["teamName"] for t in teams] == ["Null Pointers", "Byte Busters"]
    byte_busters = teams[1]
    assert byte_busters["leader"]["email"] == "asha@example.com"
    assert [m["name"] for m in byte_busters["members"]] == ["Asha Patil", "Member 1", "Member 2"]
