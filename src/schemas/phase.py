from datetime import datetime
from typing import Optional

from schemas.base import CamelModel


class CreatePhaseRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class PhaseInfo(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    start_date: str
    end_date: str
    is_active: bool
    is_current: bool
    created_at: str


class PhaseRef(CamelModel):
    id: str
    name: str
