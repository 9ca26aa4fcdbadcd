"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes. Each
manager gets a request-scoped database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import phase_manager
from utils import registration_manager
from utils import stats_manager
from utils import submission_manager
from utils import task_manager
from utils import team_manager
from utils import upload_storage
from utils import user_manager

# Singleton for UploadStorage (owns the uploads directory)
_upload_storage_instance: upload_storage.UploadStorage = None


def get_upload_storage() -> upload_storage.UploadStorage:
    """Get UploadStorage singleton instance.

    Returns:
        UploadStorage instance (singleton).
    """
    global _upload_storage_instance
    if _upload_storage_instance is None:
        _upload_storage_instance = upload_storage.UploadStorage()
    return _upload_storage_instance


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_team_manager(db: Session = Depends(get_db)) -> team_manager.TeamManager:
    """Get TeamManager instance with request-scoped DB session."""
    return team_manager.TeamManager(db)


def get_registration_manager(
    db: Session = Depends(get_db),
) -> registration_manager.RegistrationManager:
    """Get RegistrationManager instance with request-scoped DB session."""
    return registration_manager.RegistrationManager(db)


def get_phase_manager(db: Session = Depends(get_db)) -> phase_manager.PhaseManager:
    """Get PhaseManager instance with request-scoped DB session."""
    return phase_manager.PhaseManager(db)


def get_task_manager(db: Session = Depends(get_db)) -> task_manager.TaskManager:
    """Get TaskManager instance with request-scoped DB session."""
    return task_manager.TaskManager(db)


def get_submission_manager(
    db: Session = Depends(get_db),
    storage: upload_storage.UploadStorage = Depends(get_upload_storage),
) -> submission_manager.SubmissionManager:
    """Get SubmissionManager instance with request-scoped DB session.

    Args:
        db: Database session.
        storage: Shared upload storage.

    Returns:
        SubmissionManager instance.
    """
    return submission_manager.SubmissionManager(db, storage)


def get_stats_manager(db: Session = Depends(get_db)) -> stats_manager.StatsManager:
    return stats_manager.StatsManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
TeamManagerDep = Annotated[team_manager.TeamManager, Depends(get_team_manager)]
RegistrationManagerDep = Annotated[
    registration_manager.RegistrationManager, Depends(get_registration_manager)
]
PhaseManagerDep = Annotated[phase_manager.PhaseManager, Depends(get_phase_manager)]
TaskManagerDep = Annotated[task_manager.TaskManager, Depends(get_task_manager)]
SubmissionManagerDep = Annotated[
    submission_manager.SubmissionManager, Depends(get_submission_manager)
]
StatsManagerDep = Annotated[stats_manager.StatsManager, Depends(get_stats_manager)]
