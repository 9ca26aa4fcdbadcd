"""Management command-line interface.

Maintenance jobs that run against the portal database outside the API
server:

    python main.py seed-admin
    python main.py seed-tasks
    python main.py check-user <phone_or_email>
    python main.py delete-user <phone_or_email>
    python main.py sweep-uploads
"""

import logging
import secrets
import sys
from datetime import datetime
from typing import Callable, Dict, List

from config import (
    SEED_ADMIN_EMAIL,
    SEED_ADMIN_NAME,
    SEED_ADMIN_PASSWORD,
    SEED_ADMIN_PHONE,
)
from core.database import session_scope
from core.logging_config import setup_logging
from core.permissions import Role
from models.phase import PhaseModel
from models.task import TaskModel
from models.team import TeamModel
from utils.phase_manager import PhaseManager
from utils.submission_manager import SubmissionManager
from utils.task_manager import TaskManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

DEFAULT_PHASE_NAME = "Round 1"

SAMPLE_TASKS = [
    {
        "title": "Market Research Report",
        "description": "Conduct comprehensive market research for your proposed idea. "
        "Include target audience, market size, trends, and opportunities.",
        "deadline": datetime(2026, 2, 15, 23, 59, 59),
        "max_marks": 100,
    },
    {
        "title": "Problem Statement",
        "description": "Define the core problem your startup aims to solve. "
        "Explain why this problem is important and who it affects.",
        "deadline": datetime(2026, 2, 10, 23, 59, 59),
        "max_marks": 100,
    },
    {
        "title": "Competitor Analysis",
        "description": "Identify and analyze your top 5 competitors. "
        "Compare features, pricing, strengths, and weaknesses.",
        "deadline": datetime(2026, 2, 18, 23, 59, 59),
        "max_marks": 100,
    },
    {
        "title": "Business Model Canvas",
        "description": "Create a detailed Business Model Canvas covering all 9 "
        "building blocks for your startup idea.",
        "deadline": datetime(2026, 2, 23, 23, 59, 59),
        "max_marks": 150,
    },
    {
        "title": "Idea Pitch Deck",
        "description": "Create a compelling 10-slide pitch deck presenting your "
        "startup idea, problem, solution, and team.",
        "deadline": datetime(2026, 2, 5, 23, 59, 59),
        "max_marks": 100,
    },
    {
        "title": "Team Introduction Video",
        "description": "Record a 2-3 minute video introducing your team members, "
        "their roles, and why you're passionate about this idea.",
        "deadline": datetime(2026, 2, 25, 23, 59, 59),
        "max_marks": 50,
    },
]


def seed_admin(args: List[str]) -> int:
    """Create the super admin account unless its phone is already registered."""
    with session_scope() as db:
        users = UserManager(db)
        existing = users.find_user(SEED_ADMIN_PHONE)
        if existing:
            print(f"Admin user already exists with phone: {existing.phone}")
            return 0

        password = SEED_ADMIN_PASSWORD or secrets.token_urlsafe(12)
        user = users.create_user(
            name=SEED_ADMIN_NAME,
            email=SEED_ADMIN_EMAIL,
            phone=SEED_ADMIN_PHONE,
            password=password,
            role=Role.SUPER_ADMIN,
            year="Faculty",
            branch="Admin",
        )
        print("✅ Super Admin Created!")
        print(f"Phone: {user.phone}")
        if not SEED_ADMIN_PASSWORD:
            # Generated once; never stored in plain text
            print(f"Password: {password}")
        return 0


def seed_tasks(args: List[str]) -> int:
    """Create the default phase and the sample tasks that are not there yet."""
    with session_scope() as db:
        phases = PhaseManager(db)
        phase = db.query(PhaseModel).filter(PhaseModel.name == DEFAULT_PHASE_NAME).first()
        if phase is None:
            deadlines = [task["deadline"] for task in SAMPLE_TASKS]
            phase = phases.create_phase(
                name=DEFAULT_PHASE_NAME,
                start_date=datetime(2026, 2, 1),
                end_date=max(deadlines),
                description="Idea validation round",
            )
            print(f"Created Phase: {phase.name}")

        tasks = TaskManager(db)
        created = 0
        for sample in SAMPLE_TASKS:
            exists = (
                db.query(TaskModel)
                .filter(
                    TaskModel.phase_id == phase.phase_id,
                    TaskModel.title == sample["title"],
                )
                .first()
            )
            if exists:
                continue
            tasks.create_task(phase_id=phase.phase_id, **sample)
            created += 1
        print(f"✅ {created} task(s) imported into {phase.name}")
        return 0


def check_user(args: List[str]) -> int:
    if not args:
        print("Usage: python main.py check-user <phone_or_email>")
        return 1

    with session_scope() as db:
        user = UserManager(db).find_user(args[0])
        if user is None:
            print(f"❌ No user found for: {args[0]}")
            return 1
        team = None
        if user.team_id:
            team = db.query(TeamModel).filter(TeamModel.team_id == user.team_id).first()
        print("✅ User Found:")
        print(f"ID: {user.user_id}")
        print(f"Name: {user.name}")
        print(f"Phone: '{user.phone}'")
        print(f"Email: {user.email}")
        print(f"Role: {user.role}")
        print(f"Team: {team.team_name if team else 'None'}")
        return 0


def delete_user(args: List[str]) -> int:
    """Delete a user by phone or email, with the team they lead."""
    if not args:
        print("Usage: python main.py delete-user <phone_or_email>")
        return 1

    with session_scope() as db:
        users = UserManager(db)
        user = users.find_user(args[0])
        if user is None:
            print(f"❌ No user found for: {args[0]}")
            return 1
        name = user.name
        deleted_team = users.delete_user(user.user_id)
        print(f"✅ Deleted user {name}")
        if deleted_team:
            print(f"✅ Deleted team {deleted_team}; its members were detached")
        return 0


def sweep_uploads(args: List[str]) -> int:
    """Remove stored files that no submission references."""
    with session_scope() as db:
        removed = SubmissionManager(db).sweep_orphaned_uploads()
        print(f"✅ Removed {len(removed)} orphaned file(s)")
        for name in removed:
            print(f"  - {name}")
        return 0


COMMANDS: Dict[str, Callable[[List[str]], int]] = {
    "seed-admin": seed_admin,
    "seed-tasks": seed_tasks,
    "check-user": check_user,
    "delete-user": delete_user,
    "sweep-uploads": sweep_uploads,
}


def print_usage() -> None:
    print("Usage: python main.py <command> [args]")
    print()
    print("Commands:")
    for name in COMMANDS:
        print(f"  {name}")


def main(argv: List[str] = None) -> int:
    """Main entry point."""
    setup_logging()
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        print_usage()
        return 1

    try:
        return COMMANDS[argv[0]](argv[1:])
    except KeyboardInterrupt:
        print("\n\nInterrupted.")
        return 130
    except Exception as e:
        logger.error("Command %s failed: %s", argv[0], e)
        raise


if __name__ == "__main__":
    sys.exit(main())
