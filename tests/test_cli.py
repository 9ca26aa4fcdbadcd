import main
from config import SEED_ADMIN_PHONE
from models.phase import PhaseModel
from models.submission import SubmissionModel
from models.task import TaskModel
from models.team import TeamModel
from models.user import UserModel


def test_seed_admin_is_idempotent(db, capsys):
    assert main.main(["seed-admin"]) == 0
    assert "Super Admin Created" in capsys.readouterr().out

    assert main.main(["seed-admin"]) == 0
    assert "already exists" in capsys.readouterr().out

    admins = db.query(UserModel).filter(UserModel.phone == SEED_ADMIN_PHONE).all()
    assert [a.role for a in admins] == ["super_admin"]


def test_seed_tasks_creates_round_one_once(db):
    assert main.main(["seed-tasks"]) == 0
    assert main.main(["seed-tasks"]) == 0

    phases = db.query(PhaseModel).all()
    assert [p.name for p in phases] == ["Round 1"]
    tasks = db.query(TaskModel).all()
    assert len(tasks) == len(main.SAMPLE_TASKS)
    assert {t.max_marks for t in tasks} == {50, 100, 150}


def test_check_user(register_leader, capsys):
    register_leader()
    assert main.main(["check-user", "asha@example.com"]) == 0
    out = capsys.readouterr().out
    assert "Team: Byte Busters" in out
    assert "password" not in out.lower()

    assert main.main(["check-user", "nobody@example.com"]) == 1


def test_delete_leader_removes_team_and_detaches_members(register_leader, register_member, db):
    leader = register_leader()
    member = register_member(leader["teamCode"])

    assert main.main(["delete-user", "9000000001"]) == 0

    db.expire_all()
    assert db.query(TeamModel).count() == 0
    remaining = db.query(UserModel).one()
    assert remaining.user_id == member["user"]["id"]
    assert remaining.team_id is None


def test_sweep_removes_only_unreferenced_files(db, storage, capsys):
    kept = storage.save(b"%PDF-1.4 kept", "kept.pdf")
    orphan = storage.save(b"%PDF-1.4 orphan", "orphan.pdf")
    db.add(
        SubmissionModel(
            submission_id="s1",
            team_id="t1",
            task_id="k1",
            file_name=kept,
            file_url=storage.url_for(kept),
            submitted_at="2026-01-01T00:00:00+00:00",
            marks=0,
            remarks="",
            status="pending",
        )
    )
    db.commit()

    assert main.main(["sweep-uploads"]) == 0
    assert orphan in capsys.readouterr().out
    assert storage.list_files() == [kept]


def test_unknown_command_prints_usage(capsys):
    assert main.main(["launch-rockets"]) == 1
    assert "Commands:" in capsys.readouterr().out
