"""Trade recording and the session-capital write-through.

The statistics engine is pure, so keeping ``TradingSession.current_capital``
equal to ``initial_capital + sum(profit_loss)`` is done here, by the caller:
the capital after a trade insert or delete is computed from the session's
trades first and committed together with the trade change, so a failed write
leaves neither behind. ``sync_session_capital`` repairs capital that drifted
outside this path.
"""

import logging
from typing import Any

from pydantic import ValidationError

from tradejournal.errors import InvalidTradeInput
from tradejournal.models.trade import Trade
from tradejournal.models.trading_session import TradingSession
from tradejournal.schemas.stats import SessionStats
from tradejournal.schemas.trade import TradeCreate
from tradejournal.services.statistics import compute_session_stats
from tradejournal.services.store import JournalStore

logger = logging.getLogger(__name__)

# Capital differences below this are float noise, not drift
CAPITAL_EPSILON = 1e-9


def build_trade(session_id: int, data: TradeCreate | dict[str, Any]) -> Trade:
    """Validate raw trade input and build an unsaved Trade with a derived roi."""
    if not isinstance(data, TradeCreate):
        try:
            data = TradeCreate.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) or "trade"
            raise InvalidTradeInput(field, first["msg"]) from e
    return Trade(session_id=session_id, **data.model_dump())


def sync_session_capital(
    store: JournalStore,
    session: TradingSession,
    trades: list[Trade] | None = None,
) -> SessionStats:
    """Recompute stats for a session and persist current_capital if it differs."""
    if trades is None:
        trades = store.list_trades(session.id)
    stats = compute_session_stats(trades, session.initial_capital)
    if abs(stats.current_capital - session.current_capital) > CAPITAL_EPSILON:
        logger.info(
            f"Session {session.id} capital {session.current_capital:.2f} -> "
            f"{stats.current_capital:.2f}"
        )
        store.update_session_capital(session, stats.current_capital)
    return stats


def record_trade(
    store: JournalStore, session: TradingSession, data: TradeCreate | dict[str, Any]
) -> tuple[Trade, SessionStats]:
    """Validate and insert a trade together with the session's recomputed capital."""
    trade = build_trade(session.id, data)
    stats = compute_session_stats([trade, *store.list_trades(session.id)], session.initial_capital)
    store.add_trade(trade, session, stats.current_capital)
    logger.info(
        f"Trade {trade.id} added to session {session.id}: "
        f"{trade.entry_side.value} margin={trade.margin} pnl={trade.profit_loss}"
    )
    return trade, stats


def remove_trade(store: JournalStore, session: TradingSession, trade: Trade) -> SessionStats:
    """Delete a trade together with the session's recomputed capital."""
    trade_id = trade.id
    remaining = [t for t in store.list_trades(session.id) if t.id != trade_id]
    stats = compute_session_stats(remaining, session.initial_capital)
    store.delete_trade(trade, session, stats.current_capital)
    logger.info(f"Trade {trade_id} removed from session {session.id}")
    return stats
