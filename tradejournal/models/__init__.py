"""Database models."""

from tradejournal.models.user import User
from tradejournal.models.trading_session import TradingSession
from tradejournal.models.trade import EntrySide, Trade

__all__ = [
    "EntrySide",
    "Trade",
    "TradingSession",
    "User",
]
