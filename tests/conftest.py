"""Shared fixtures: an in-memory database, a store on top of it, and a user."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import tradejournal.models  # noqa: F401  (registers tables)
from tradejournal.models.trade import EntrySide, Trade
from tradejournal.models.trading_session import TradingSession
from tradejournal.models.user import User
from tradejournal.services.store import JournalStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(db) -> JournalStore:
    return JournalStore(db)


def _add_user(db: Session, username: str) -> User:
    user = User(username=username, hashed_password="not-a-real-hash")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db) -> User:
    return _add_user(db, "trader")


@pytest.fixture
def other_user(db) -> User:
    return _add_user(db, "someone-else")


@pytest.fixture
def add_session(db):
    """Insert a TradingSession directly, with control over created_at."""

    def _add(user_id: int, name: str, initial_capital: float = 1000.0, created_at=None):
        record = TradingSession(
            user_id=user_id,
            name=name,
            initial_capital=initial_capital,
            current_capital=initial_capital,
        )
        if created_at is not None:
            record.created_at = created_at
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _add


@pytest.fixture
def add_trade(db):
    """Insert a Trade directly; roi is derived from profit_loss and margin."""

    def _add(session_id: int, margin: float, profit_loss: float, created_at=None, side=EntrySide.LONG):
        trade = Trade(
            session_id=session_id,
            margin=margin,
            profit_loss=profit_loss,
            roi=profit_loss / margin * 100,
            entry_side=side,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.add(trade)
        db.commit()
        db.refresh(trade)
        return trade

    return _add
