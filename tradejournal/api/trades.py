"""Trade API — single-trade lookup and deletion."""

from fastapi import APIRouter, Depends, HTTPException

from tradejournal.api.deps import get_current_user, get_store
from tradejournal.models.trade import Trade
from tradejournal.models.trading_session import TradingSession
from tradejournal.models.user import User
from tradejournal.schemas.trade import TradeRead
from tradejournal.services.journal import remove_trade
from tradejournal.services.store import JournalStore

router = APIRouter(prefix="/api/trades", tags=["trades"])


def _owned_trade(
    trade_id: int, user: User, store: JournalStore
) -> tuple[Trade, TradingSession]:
    trade = store.get_trade(trade_id)
    if trade is not None:
        record = store.get_session(trade.session_id, user_id=user.id)
        if record is not None:
            return trade, record
    raise HTTPException(status_code=404, detail="Trade not found")


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    trade, _ = _owned_trade(trade_id, user, store)
    return trade


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    trade, record = _owned_trade(trade_id, user, store)
    remove_trade(store, record, trade)
