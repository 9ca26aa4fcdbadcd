"""Named integer counters.

A row is read-and-incremented with a single UPDATE, which is how team codes
are issued without a check-then-retry loop.
"""

from sqlalchemy import Column, Integer, String

from .base import Base


class CounterModel(Base):
    __tablename__ = "counters"

    name = Column(String, primary_key=True)
    value = Column(Integer, nullable=False)
