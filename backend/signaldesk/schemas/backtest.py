from typing import Optional

from .common import CamelModel
from .signal import SignalType


class Trade(CamelModel):
    """A single simulated trade of a backtest run."""

    # ISO date, so that string order equals chronological order.
    date: str
    type: SignalType
    entry_price: float
    exit_price: float
    # Percentage result of the trade, e.g. 5.0 or -3.0.
    result: float


class BacktestResult(CamelModel):
    total_trades: int
    win_rate: float
    cumulative_return: float
    max_drawdown: float
    trades: list[Trade]


class BacktestRequest(CamelModel):
    user_id: Optional[str] = None
