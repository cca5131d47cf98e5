"""Tests for trade validation and the session-capital write-through."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from tradejournal.errors import InvalidTradeInput, StoreWriteError
from tradejournal.models.trade import EntrySide
from tradejournal.schemas.trade import TradeCreate
from tradejournal.services.journal import build_trade, record_trade, remove_trade, sync_session_capital


# ---------------------------------------------------------------------------
# 1. Trade input validation
# ---------------------------------------------------------------------------

class TestTradeCreate:
    def test_roi_is_derived_from_profit_loss(self):
        data = TradeCreate(margin=200, profit_loss=-30)
        assert data.roi == pytest.approx(-15)
        assert data.entry_side == EntrySide.LONG

    def test_consistent_client_roi_accepted(self):
        data = TradeCreate(margin=300, profit_loss=100, roi=33.33)
        assert data.roi == pytest.approx(100 / 3)

    def test_inconsistent_client_roi_rejected(self):
        with pytest.raises(ValidationError):
            TradeCreate(margin=100, profit_loss=50, roi=5)

    def test_margin_must_be_positive(self):
        with pytest.raises(ValidationError):
            TradeCreate(margin=0, profit_loss=5)

    def test_blank_comment_becomes_none(self):
        assert TradeCreate(margin=10, profit_loss=1, comments="   ").comments is None


class TestBuildTrade:
    def test_builds_unsaved_trade(self):
        trade = build_trade(7, {"margin": 100, "profit_loss": 25, "entry_side": "Short"})
        assert trade.id is None
        assert trade.session_id == 7
        assert trade.roi == pytest.approx(25)
        assert trade.entry_side == EntrySide.SHORT

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"profit_loss": 5}, "margin"),
            ({"margin": "abc", "profit_loss": 5}, "margin"),
            ({"margin": 100}, "profit_loss"),
            ({"margin": 100, "profit_loss": "lots"}, "profit_loss"),
        ],
    )
    def test_missing_or_non_numeric_amounts(self, payload, field):
        with pytest.raises(InvalidTradeInput) as exc_info:
            build_trade(1, payload)
        assert exc_info.value.field == field

    def test_inconsistent_roi_is_invalid_trade_input(self):
        with pytest.raises(InvalidTradeInput):
            build_trade(1, {"margin": 100, "profit_loss": 50, "roi": 12})


# ---------------------------------------------------------------------------
# 2. Capital write-through
# ---------------------------------------------------------------------------

def test_record_trade_updates_session_capital(store, user, add_session):
    record = add_session(user.id, "S", initial_capital=1000)

    trade, stats = record_trade(store, record, {"margin": 100, "profit_loss": 50})
    assert trade.id is not None
    assert stats.current_capital == 1050

    record_trade(store, record, TradeCreate(margin=200, profit_loss=-50))
    assert store.get_session(record.id).current_capital == 1000


def test_remove_trade_restores_capital(store, user, add_session):
    record = add_session(user.id, "S", initial_capital=500)
    keep, _ = record_trade(store, record, {"margin": 100, "profit_loss": 20})
    drop, _ = record_trade(store, record, {"margin": 100, "profit_loss": -70})
    assert store.get_session(record.id).current_capital == 450

    stats = remove_trade(store, record, drop)

    assert stats.total_trades == 1
    assert store.get_session(record.id).current_capital == 520
    assert [t.id for t in store.list_trades(record.id)] == [keep.id]


def test_sync_corrects_drifted_capital(store, user, add_session, add_trade):
    record = add_session(user.id, "S", initial_capital=1000)
    add_trade(record.id, 100, 40)
    add_trade(record.id, 100, -15)
    assert record.current_capital == 1000  # written before the trades

    stats = sync_session_capital(store, record)

    assert stats.current_capital == 1025
    assert store.get_session(record.id).current_capital == 1025


def test_sync_skips_write_when_capital_is_current(store, user, add_session):
    record = add_session(user.id, "S", initial_capital=1000)
    with patch.object(store, "update_session_capital") as update:
        sync_session_capital(store, record)
    update.assert_not_called()


def test_failed_capital_write_keeps_trade_out(store, user, add_session):
    record = add_session(user.id, "S", initial_capital=1000)

    with patch.object(store, "_set_capital", side_effect=OperationalError("UPDATE", {}, Exception("locked"))):
        with pytest.raises(StoreWriteError):
            record_trade(store, record, {"margin": 100, "profit_loss": 50})

    assert store.list_trades(record.id) == []
    assert store.get_session(record.id).current_capital == 1000


def test_failed_delete_keeps_trade_and_capital(store, db, user, add_session):
    record = add_session(user.id, "S", initial_capital=1000)
    trade, _ = record_trade(store, record, {"margin": 100, "profit_loss": 50})

    with patch.object(db, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(StoreWriteError):
            remove_trade(store, record, trade)

    assert [t.id for t in store.list_trades(record.id)] == [trade.id]
    assert store.get_session(record.id).current_capital == 1050
