"""TradingSession model — a named container of trades sharing one capital baseline."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class TradingSession(SQLModel, table=True):
    __tablename__ = "trading_sessions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str = Field(index=True)  # not unique, e.g. "BTC 5 Minute"
    initial_capital: float  # fixed at creation

    # Always initial_capital + sum(trade.profit_loss); recomputed, never edited
    current_capital: float = 0.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
