"""SQLAlchemy ORM models for TimerWidget."""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Preference(Base):
    """A single key-value blob.

    The whole timer collection lives under one key as a JSON array, next
    to the first-run ``initialized`` flag.
    """

    __tablename__ = "preferences"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Preference key={self.key} size={len(self.value or '')}>"
