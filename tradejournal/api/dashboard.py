"""Dashboard API — summary stats across all of a user's sessions."""

from fastapi import APIRouter, Depends

from tradejournal.api.deps import get_current_user, get_store
from tradejournal.models.user import User
from tradejournal.services.statistics import compute_session_stats
from tradejournal.services.store import JournalStore

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    user: User = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Aggregated stats across all sessions."""
    sessions = store.list_sessions(user.id)
    trades = [trade for trade, _ in store.list_user_trades(user.id)]

    initial_capital = sum(s.initial_capital for s in sessions)
    stats = compute_session_stats(trades, initial_capital)

    return {
        "total_sessions": len(sessions),
        "total_trades": stats.total_trades,
        "winning_trades": stats.winning_trades,
        "losing_trades": stats.losing_trades,
        "total_initial_capital": round(initial_capital, 2),
        "total_current_capital": round(stats.current_capital, 2),
        "total_pnl": round(stats.net_profit_loss, 2),
        "total_pnl_pct": round(stats.net_profit_loss_percentage, 2),
        "total_margin_used": round(stats.total_margin_used, 2),
        "win_rate": round(stats.win_rate, 1),
    }
