"""Phase management utilities."""

import logging
import secrets
from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import PhaseNameTakenError, PhaseNotFoundError, ValidationError
from models.phase import PhaseModel
from utils.timestamps import parse_iso, to_utc_iso, utc_now_iso

logger = logging.getLogger(__name__)


class PhaseManager:
    """Manages challenge phases and the single active phase."""

    def __init__(self, db: Session):
        self.db = db

    def create_phase(
        self,
        name: str,
        start_date: datetime,
        end_date: datetime,
        description: Optional[str] = None,
    ) -> PhaseModel:
        """Create a new phase.

        New phases start out active, as existing deployments expect; call
        activate_phase() to make one phase the only active one.

        Raises:
            ValidationError: If the window ends before it starts.
            PhaseNameTakenError: If the name is already used.
        """
        name = name.strip()
        if parse_iso(to_utc_iso(end_date)) < parse_iso(to_utc_iso(start_date)):
            raise ValidationError("Phase end date must be after its start date")
        if self.db.query(PhaseModel).filter(PhaseModel.name == name).first():
            raise PhaseNameTakenError(name)

        model = PhaseModel(
            phase_id=secrets.token_hex(12),
            name=name,
            description=description.strip() if description else None,
            start_date=to_utc_iso(start_date),
            end_date=to_utc_iso(end_date),
            is_active=True,
            created_at=utc_now_iso(),
        )
        self.db.add(model)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise PhaseNameTakenError(name) from e
        self.db.refresh(model)
        logger.info("Created phase: %s (id=%s)", name, model.phase_id)
        return model

    def get_phase(self, phase_id: str) -> PhaseModel:
        model = self.db.query(PhaseModel).filter(PhaseModel.phase_id == phase_id).first()
        if not model:
            raise PhaseNotFoundError(phase_id)
        return model

    def list_phases(self) -> List[PhaseModel]:
        return self.db.query(PhaseModel).order_by(PhaseModel.start_date.asc()).all()

    def list_active_phases(self) -> List[PhaseModel]:
        return (
            self.db.query(PhaseModel)
            .filter(PhaseModel.is_active.is_(True))
            .order_by(PhaseModel.start_date.asc())
            .all()
        )

    def get_active_phase(self) -> Optional[PhaseModel]:
        phases = self.list_active_phases()
        return phases[0] if phases else None

    def activate_phase(self, phase_id: str) -> PhaseModel:
        """Make ``phase_id`` the only active phase.

        One UPDATE sets every row's flag from the id comparison, so no reader
        ever sees zero or two active phases in between.

        Raises:
            PhaseNotFoundError: If the phase does not exist.
        """
        model = self.get_phase(phase_id)
        self.db.execute(
            update(PhaseModel)
            .values(
                is_active=case((PhaseModel.phase_id == phase_id, True), else_=False)
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(model)
        logger.info("Activated phase: %s (id=%s)", model.name, phase_id)
        return model
