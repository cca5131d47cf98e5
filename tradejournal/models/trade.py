"""Trade model — immutable record of one journaled trade."""

from datetime import datetime, timezone
from enum import Enum

from sqlmodel import SQLModel, Field


class EntrySide(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class Trade(SQLModel, table=True):
    __tablename__ = "trades"

    id: int | None = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="trading_sessions.id", index=True)
    margin: float  # capital at risk, > 0
    roi: float  # percent of margin, derived from profit_loss on write
    entry_side: EntrySide
    profit_loss: float  # authoritative signed outcome
    comments: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
