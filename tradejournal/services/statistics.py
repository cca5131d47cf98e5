"""Session statistics engine.

Everything here is a pure function of a trade list (plus the session's
initial capital). Callers recompute in full whenever the trade list changes;
nothing is cached and nothing is written back from this module.

Trades are duck-typed: anything with ``margin``, ``roi`` and ``profit_loss``
works for the stats, and the chart series also read ``entry_side`` and
``created_at``.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

import pandas as pd

from tradejournal.models.trade import EntrySide
from tradejournal.schemas.stats import (
    CapitalPoint,
    DailyPerformance,
    ProfitLossDistribution,
    SessionAnalytics,
    SessionStats,
    TimelinePoint,
)

__all__ = [
    "calculate_profit_loss",
    "calculate_roi",
    "capital_curve",
    "compute_session_analytics",
    "compute_session_stats",
    "daily_performance",
    "performance_timeline",
    "profit_loss_distribution",
]

DATE_FORMAT = "%Y-%m-%d"


def calculate_profit_loss(margin: float, roi: float) -> float:
    """Dollar outcome of a trade from its margin and ROI percent."""
    return margin * roi / 100


def calculate_roi(margin: float, profit_loss: float) -> float:
    """ROI percent of a trade. 0.0 when there is no margin to divide by."""
    if not margin:
        return 0.0
    return profit_loss / margin * 100


def compute_session_stats(trades: Iterable[Any], initial_capital: float) -> SessionStats:
    """Aggregate a session's trades into SessionStats.

    Zero-P/L trades count toward neither wins nor losses. With an initial
    capital of 0 the net P/L percentage is reported as 0.0.

    average_roi is the mean of the stored per-trade ROI values. It is not the
    same number as net_profit_loss / total_margin_used once margins differ
    between trades, and both are meaningful.
    """
    trades = list(trades)
    initial_capital = float(initial_capital)
    total = len(trades)

    if total == 0:
        return SessionStats(current_capital=initial_capital)

    winning = sum(1 for t in trades if t.profit_loss > 0)
    losing = sum(1 for t in trades if t.profit_loss < 0)
    net_pnl = float(sum(t.profit_loss for t in trades))
    current_capital = initial_capital + net_pnl

    if initial_capital:
        net_pnl_pct = (current_capital - initial_capital) / initial_capital * 100
    else:
        net_pnl_pct = 0.0

    return SessionStats(
        total_trades=total,
        winning_trades=winning,
        losing_trades=losing,
        win_rate=winning / total * 100,
        current_capital=current_capital,
        net_profit_loss=net_pnl,
        net_profit_loss_percentage=net_pnl_pct,
        total_margin_used=float(sum(t.margin for t in trades)),
        average_roi=float(sum(t.roi for t in trades)) / total,
    )


def _as_utc(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _chronological_frame(trades: Sequence[Any]) -> pd.DataFrame:
    """One row per trade, oldest first, with a formatted calendar date."""
    ordered = sorted(trades, key=lambda t: (_as_utc(t.created_at), t.id or 0))
    return pd.DataFrame(
        {
            "profit_loss": [float(t.profit_loss) for t in ordered],
            "margin": [float(t.margin) for t in ordered],
            "roi": [float(t.roi) for t in ordered],
            "side": [EntrySide(t.entry_side).value for t in ordered],
            "date": [_as_utc(t.created_at).strftime(DATE_FORMAT) for t in ordered],
        }
    )


def capital_curve(trades: Sequence[Any], initial_capital: float) -> list[CapitalPoint]:
    """Running capital after each trade, indexed 1..n in chronological order."""
    if not trades:
        return []
    frame = _chronological_frame(trades)
    frame["capital"] = float(initial_capital) + frame["profit_loss"].cumsum()
    return [
        CapitalPoint(
            trade=i + 1,
            capital=float(row.capital),
            profit_loss=row.profit_loss,
            roi=row.roi,
            margin=row.margin,
            side=EntrySide(row.side),
            date=row.date,
        )
        for i, row in enumerate(frame.itertuples(index=False))
    ]


def profit_loss_distribution(trades: Iterable[Any]) -> ProfitLossDistribution:
    """Profit and loss totals split by sign. Break-even trades are left out."""
    pnls = [t.profit_loss for t in trades]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    return ProfitLossDistribution(
        total_profit=float(sum(wins)),
        total_loss=abs(float(sum(losses))),
        profit_count=len(wins),
        loss_count=len(losses),
    )


def daily_performance(trades: Sequence[Any]) -> list[DailyPerformance]:
    """P/L, trade count and margin volume per UTC calendar day."""
    if not trades:
        return []
    frame = _chronological_frame(trades)
    grouped = frame.groupby("date", sort=False).agg(
        profit_loss=("profit_loss", "sum"),
        trades=("profit_loss", "size"),
        volume=("margin", "sum"),
    )
    return [
        DailyPerformance(
            date=row.Index,
            profit_loss=float(row.profit_loss),
            trades=int(row.trades),
            volume=float(row.volume),
        )
        for row in grouped.itertuples()
    ]


def performance_timeline(trades: Sequence[Any]) -> list[TimelinePoint]:
    """Cumulative profit and trailing win rate over each chronological prefix."""
    if not trades:
        return []
    frame = _chronological_frame(trades)
    frame["cumulative_profit"] = frame["profit_loss"].cumsum()
    frame["win_rate"] = (frame["profit_loss"] > 0).astype(float).expanding().mean() * 100
    return [
        TimelinePoint(
            trade=i + 1,
            profit_loss=row.profit_loss,
            cumulative_profit=float(row.cumulative_profit),
            win_rate=float(row.win_rate),
            date=row.date,
        )
        for i, row in enumerate(frame.itertuples(index=False))
    ]


def compute_session_analytics(trades: Sequence[Any], initial_capital: float) -> SessionAnalytics:
    """Stats plus every chart series for one session."""
    trades = list(trades)
    return SessionAnalytics(
        stats=compute_session_stats(trades, initial_capital),
        capital_curve=capital_curve(trades, initial_capital),
        distribution=profit_loss_distribution(trades),
        daily=daily_performance(trades),
        timeline=performance_timeline(trades),
    )
