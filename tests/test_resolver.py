"""Tests for fuzzy session-name resolution."""

from datetime import datetime, timedelta, timezone

import pytest

from tradejournal.services.resolver import SessionResolver

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def sessions(user, add_session):
    five_minute = add_session(user.id, "BTC 5 Minute", created_at=T0)
    scalping = add_session(user.id, "BTC Scalping", created_at=T0 + timedelta(days=1))
    return five_minute, scalping


def test_fragment_matches_ignoring_case(store, user, sessions):
    five_minute, scalping = sessions
    resolver = SessionResolver(store)

    assert resolver.resolve("btc", user.id) in {five_minute.id, scalping.id}
    assert resolver.resolve("5 MINUTE", user.id) == five_minute.id
    assert resolver.resolve("scalp", user.id) == scalping.id


def test_multiple_matches_take_first_in_store_order(store, user, sessions):
    _, scalping = sessions
    resolver = SessionResolver(store)

    # store order is newest first
    assert store.search_sessions(user.id, "btc")[0].id == scalping.id
    assert resolver.resolve("btc", user.id) == scalping.id


def test_no_match_is_none(store, user, sessions):
    resolver = SessionResolver(store)
    assert resolver.resolve("xyz", user.id) is None
    assert resolver.find("xyz", user.id) is None


def test_blank_fragment_is_none(store, user, sessions):
    assert SessionResolver(store).resolve("   ", user.id) is None


def test_other_users_sessions_are_invisible(store, user, other_user, add_session):
    add_session(other_user.id, "Gold Swing")
    assert SessionResolver(store).resolve("gold", user.id) is None


def test_like_wildcards_are_literal(store, user, sessions):
    resolver = SessionResolver(store)
    assert resolver.resolve("%", user.id) is None
    assert resolver.resolve("BTC_5", user.id) is None


def test_find_returns_record_with_stored_name(store, user, sessions):
    match = SessionResolver(store).find("  btc 5 minute ", user.id)
    assert match is not None
    assert match.name == "BTC 5 Minute"
