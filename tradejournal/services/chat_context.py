"""Bounded trading-history context handed to the text backend with each chat message."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from tradejournal.models.trade import EntrySide, Trade
from tradejournal.models.trading_session import TradingSession
from tradejournal.schemas.stats import SessionStats
from tradejournal.services.statistics import compute_session_stats
from tradejournal.services.store import JournalStore
from tradejournal.utils.formatting import format_currency, format_percentage


@dataclass
class ChatContext:
    total_sessions: int = 0
    total_trades: int = 0
    net_profit_loss: float = 0.0
    win_rate: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    recent_sessions: list[dict[str, Any]] = field(default_factory=list)
    recent_trades: list[dict[str, Any]] = field(default_factory=list)
    current_session: dict[str, Any] | None = None
    current_session_stats: SessionStats | None = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def render(self) -> str:
        """Plain-text block for embedding in the assistant prompt."""
        lines = [
            "User's Trading Data Summary:",
            f"- Total Sessions: {self.total_sessions}",
            f"- Total Trades: {self.total_trades}",
            f"- Total P/L: {format_currency(self.net_profit_loss)}",
            f"- Win Rate: {self.win_rate:.1f}%",
            f"- Winning Trades: {self.winning_trades}",
            f"- Losing Trades: {self.losing_trades}",
        ]
        if self.current_session is not None and self.current_session_stats is not None:
            stats = self.current_session_stats
            lines += [
                "",
                f"Currently Viewing Session: {self.current_session['name']}",
                f"- Initial Capital: {format_currency(self.current_session['initial_capital'])}",
                f"- Current Capital: {format_currency(stats.current_capital)}",
                f"- Net P/L: {format_currency(stats.net_profit_loss)} "
                f"({format_percentage(stats.net_profit_loss_percentage)})",
                f"- Trades: {stats.total_trades}, Win Rate: {stats.win_rate:.1f}%",
            ]
        lines += [
            "",
            f"Recent Sessions: {json.dumps(self.recent_sessions, indent=2)}",
            f"Recent Trades: {json.dumps(self.recent_trades, indent=2)}",
        ]
        return "\n".join(lines)


def _session_row(record: TradingSession) -> dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "initial_capital": record.initial_capital,
        "current_capital": record.current_capital,
        "created_at": record.created_at.isoformat(),
    }


def _trade_row(trade: Trade, session_name: str) -> dict[str, Any]:
    return {
        "id": trade.id,
        "session": session_name,
        "entry_side": EntrySide(trade.entry_side).value,
        "margin": trade.margin,
        "roi": round(trade.roi, 2),
        "profit_loss": trade.profit_loss,
        "comments": trade.comments,
        "created_at": trade.created_at.isoformat(),
    }


class ChatContextBuilder:
    """Summarizes a user's whole journal plus the newest few sessions and trades."""

    def __init__(self, store: JournalStore, recent_sessions: int = 5, recent_trades: int = 10):
        self.store = store
        self.recent_sessions = recent_sessions
        self.recent_trades = recent_trades

    def build(self, user_id: int, current_session_id: int | None = None) -> ChatContext:
        sessions = self.store.list_sessions(user_id)
        trade_rows = self.store.list_user_trades(user_id, limit=self.recent_trades)
        totals = self.store.user_trade_totals(user_id)

        context = ChatContext(
            total_sessions=len(sessions),
            total_trades=totals.total_trades,
            net_profit_loss=totals.net_profit_loss,
            win_rate=totals.win_rate,
            winning_trades=totals.winning_trades,
            losing_trades=totals.losing_trades,
            recent_sessions=[_session_row(s) for s in sessions[: self.recent_sessions]],
            recent_trades=[_trade_row(t, name) for t, name in trade_rows],
        )

        if current_session_id is not None:
            current = next((s for s in sessions if s.id == current_session_id), None)
            if current is not None:
                context.current_session = _session_row(current)
                context.current_session_stats = compute_session_stats(
                    self.store.list_trades(current.id), current.initial_capital
                )
        return context
