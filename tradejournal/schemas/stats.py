"""Derived statistics and chart series. Computed on read, never persisted."""

from pydantic import BaseModel

from tradejournal.models.trade import EntrySide


class SessionStats(BaseModel):
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    current_capital: float = 0.0
    net_profit_loss: float = 0.0
    net_profit_loss_percentage: float = 0.0
    total_margin_used: float = 0.0
    average_roi: float = 0.0


class CapitalPoint(BaseModel):
    trade: int  # 1-based, chronological
    capital: float
    profit_loss: float
    roi: float
    margin: float
    side: EntrySide
    date: str


class ProfitLossDistribution(BaseModel):
    total_profit: float = 0.0
    total_loss: float = 0.0  # positive magnitude
    profit_count: int = 0
    loss_count: int = 0


class DailyPerformance(BaseModel):
    date: str
    profit_loss: float
    trades: int
    volume: float


class TimelinePoint(BaseModel):
    trade: int
    profit_loss: float
    cumulative_profit: float
    win_rate: float
    date: str


class SessionAnalytics(BaseModel):
    stats: SessionStats
    capital_curve: list[CapitalPoint]
    distribution: ProfitLossDistribution
    daily: list[DailyPerformance]
    timeline: list[TimelinePoint]
