"""Trading sessions API — CRUD, stats, analytics, per-session trades and AI summary."""

from fastapi import APIRouter, Depends

from tradejournal.api.deps import get_current_user, get_orchestrator, get_owned_session, get_store
from tradejournal.models.trading_session import TradingSession
from tradejournal.models.user import User
from tradejournal.schemas.chat import SessionSummary
from tradejournal.schemas.stats import SessionAnalytics, SessionStats
from tradejournal.schemas.trade import TradeCreate, TradeRead
from tradejournal.schemas.trading_session import TradingSessionCreate, TradingSessionRead
from tradejournal.services.chat import ChatOrchestrator
from tradejournal.services.journal import record_trade, sync_session_capital
from tradejournal.services.statistics import compute_session_analytics
from tradejournal.services.store import JournalStore

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=list[TradingSessionRead])
def list_sessions(
    user: User = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    return store.list_sessions(user.id)


@router.post("", response_model=TradingSessionRead, status_code=201)
def create_session(
    data: TradingSessionCreate,
    user: User = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    return store.create_session(user.id, data.name, data.initial_capital)


@router.get("/{session_id}", response_model=TradingSessionRead)
def get_session(record: TradingSession = Depends(get_owned_session)):
    return record


@router.delete("/{session_id}", status_code=204)
def delete_session(
    record: TradingSession = Depends(get_owned_session),
    store: JournalStore = Depends(get_store),
):
    store.delete_session(record.id)


@router.get("/{session_id}/stats", response_model=SessionStats)
def session_stats(
    record: TradingSession = Depends(get_owned_session),
    store: JournalStore = Depends(get_store),
):
    """Recomputed stats; also corrects the stored current capital if it drifted."""
    return sync_session_capital(store, record)


@router.get("/{session_id}/analytics", response_model=SessionAnalytics)
def session_analytics(
    record: TradingSession = Depends(get_owned_session),
    store: JournalStore = Depends(get_store),
):
    trades = store.list_trades(record.id)
    sync_session_capital(store, record, trades)
    return compute_session_analytics(trades, record.initial_capital)


@router.post("/{session_id}/summary", response_model=SessionSummary)
async def session_summary(
    record: TradingSession = Depends(get_owned_session),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    summary = await orchestrator.summarize_session(record.id, record.user_id)
    return SessionSummary(session_id=record.id, summary=summary)


@router.get("/{session_id}/trades", response_model=list[TradeRead])
def list_session_trades(
    limit: int | None = None,
    offset: int = 0,
    record: TradingSession = Depends(get_owned_session),
    store: JournalStore = Depends(get_store),
):
    return store.list_trades(record.id, limit=limit, offset=offset)


@router.post("/{session_id}/trades", response_model=TradeRead, status_code=201)
def add_session_trade(
    data: TradeCreate,
    record: TradingSession = Depends(get_owned_session),
    store: JournalStore = Depends(get_store),
):
    trade, _ = record_trade(store, record, data)
    return trade
