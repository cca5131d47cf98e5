"""Journal data store — the persistence collaborator for sessions and trades.

Wraps a SQLModel Session so that the rest of the service layer sees a small
query interface (equality filters, case-insensitive substring search, ordered
reads, insert/update/delete by id) and a uniform failure mode: any database
error surfaces as StoreReadError or StoreWriteError, and failed writes are
rolled back before raising. Nothing is retried here.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import NamedTuple

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from tradejournal.errors import StoreReadError, StoreWriteError
from tradejournal.models.trade import Trade
from tradejournal.models.trading_session import TradingSession

logger = logging.getLogger(__name__)


class TradeTotals(NamedTuple):
    total_trades: int
    winning_trades: int
    losing_trades: int
    net_profit_loss: float

    @property
    def win_rate(self) -> float:
        if self.total_trades == 0:
            return 0.0
        return self.winning_trades / self.total_trades * 100


class JournalStore:
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _reading(self, what: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store read failed ({what}): {e}")
            raise StoreReadError(f"Failed to read {what}") from e

    @contextmanager
    def _writing(self, what: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Store write failed ({what}): {e}")
            raise StoreWriteError(f"Failed to write {what}") from e

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def list_sessions(self, user_id: int) -> list[TradingSession]:
        """User's sessions, newest first."""
        stmt = (
            select(TradingSession)
            .where(TradingSession.user_id == user_id)
            .order_by(col(TradingSession.created_at).desc(), col(TradingSession.id).desc())
        )
        with self._reading("sessions"):
            return list(self.session.exec(stmt).all())

    def search_sessions(self, user_id: int, name_fragment: str) -> list[TradingSession]:
        """User's sessions whose name contains the fragment, ignoring case. Newest first."""
        stmt = (
            select(TradingSession)
            .where(TradingSession.user_id == user_id)
            .where(col(TradingSession.name).icontains(name_fragment, autoescape=True))
            .order_by(col(TradingSession.created_at).desc(), col(TradingSession.id).desc())
        )
        with self._reading("sessions"):
            return list(self.session.exec(stmt).all())

    def get_session(self, session_id: int, user_id: int | None = None) -> TradingSession | None:
        """Fetch one session; with user_id, sessions owned by someone else read as missing."""
        with self._reading("session"):
            record = self.session.get(TradingSession, session_id)
        if record is None or (user_id is not None and record.user_id != user_id):
            return None
        return record

    def create_session(self, user_id: int, name: str, initial_capital: float) -> TradingSession:
        record = TradingSession(
            user_id=user_id,
            name=name,
            initial_capital=initial_capital,
            current_capital=initial_capital,
        )
        with self._writing("session"):
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        logger.info(f"Created session {record.id} '{record.name}' for user {user_id}")
        return record

    def delete_session(self, session_id: int) -> None:
        """Delete a session together with all of its trades."""
        with self._writing("session"):
            trades = self.session.exec(select(Trade).where(Trade.session_id == session_id)).all()
            for trade in trades:
                self.session.delete(trade)
            record = self.session.get(TradingSession, session_id)
            if record is not None:
                self.session.delete(record)
            self.session.commit()
        logger.info(f"Deleted session {session_id} and its trades")

    def _set_capital(self, record: TradingSession, current_capital: float) -> None:
        record.current_capital = current_capital
        record.updated_at = datetime.now(timezone.utc)
        self.session.add(record)

    def update_session_capital(self, record: TradingSession, current_capital: float) -> TradingSession:
        with self._writing("session capital"):
            self._set_capital(record, current_capital)
            self.session.commit()
            self.session.refresh(record)
        return record

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    def list_trades(
        self, session_id: int, limit: int | None = None, offset: int = 0
    ) -> list[Trade]:
        """Session's trades, newest first."""
        stmt = (
            select(Trade)
            .where(Trade.session_id == session_id)
            .order_by(col(Trade.created_at).desc(), col(Trade.id).desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._reading("trades"):
            return list(self.session.exec(stmt).all())

    def list_user_trades(self, user_id: int, limit: int | None = None) -> list[tuple[Trade, str]]:
        """Trades across the user's sessions, newest first, paired with their session name."""
        stmt = (
            select(Trade, TradingSession.name)
            .join(TradingSession, col(Trade.session_id) == col(TradingSession.id))
            .where(TradingSession.user_id == user_id)
            .order_by(col(Trade.created_at).desc(), col(Trade.id).desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._reading("trades"):
            return [(trade, name) for trade, name in self.session.exec(stmt).all()]

    def user_trade_totals(self, user_id: int) -> TradeTotals:
        """Trade count, win/loss counts and summed P/L over all of a user's sessions."""
        pnl = col(Trade.profit_loss)
        stmt = (
            select(
                func.count(col(Trade.id)),
                func.coalesce(func.sum(case((pnl > 0, 1), else_=0)), 0),
                func.coalesce(func.sum(case((pnl < 0, 1), else_=0)), 0),
                func.coalesce(func.sum(pnl), 0.0),
            )
            .join(TradingSession, col(Trade.session_id) == col(TradingSession.id))
            .where(TradingSession.user_id == user_id)
        )
        with self._reading("trade totals"):
            count, wins, losses, net = self.session.exec(stmt).one()
        return TradeTotals(int(count), int(wins), int(losses), float(net))

    def get_trade(self, trade_id: int) -> Trade | None:
        with self._reading("trade"):
            return self.session.get(Trade, trade_id)

    def add_trade(self, trade: Trade, record: TradingSession, current_capital: float) -> Trade:
        """Insert a trade and store its session's new capital in one commit."""
        with self._writing("trade"):
            self.session.add(trade)
            self._set_capital(record, current_capital)
            self.session.commit()
            self.session.refresh(trade)
            self.session.refresh(record)
        return trade

    def delete_trade(self, trade: Trade, record: TradingSession, current_capital: float) -> None:
        """Delete a trade and store its session's new capital in one commit."""
        with self._writing("trade"):
            self.session.delete(trade)
            self._set_capital(record, current_capital)
            self.session.commit()
            self.session.refresh(record)
