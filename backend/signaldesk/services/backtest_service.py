from __future__ import annotations

import logging
import random
import time
from datetime import date, timedelta
from typing import Optional

from ..exceptions import UserNotFoundError
from ..schemas import BacktestResult, SignalType, Trade
from ..schemas.user import GUEST_USER_ID
from .backend_client import BackendClient
from .mock_store import MockStore

logger = logging.getLogger(__name__)

NUM_SIMULATED_TRADES: int = 15
WIN_RESULT_PCT: float = 5.0
LOSS_RESULT_PCT: float = -3.0

# Most recent simulated trade; the others go back one day each.
LAST_TRADE_DATE: date = date(2024, 5, 25)


def _simulate_trade(rng: random.Random, trade_date: date, win_rate: float) -> Trade:
    is_win = rng.random() * 100 < win_rate
    entry_price = rng.random() * 10000 + 50000
    result = WIN_RESULT_PCT if is_win else LOSS_RESULT_PCT
    return Trade(
        date=trade_date.isoformat(),
        type=SignalType.BUY if rng.random() > 0.5 else SignalType.SELL,
        entry_price=entry_price,
        exit_price=entry_price * (1 + result / 100),
        result=result,
    )


class BacktestService:
    """
    Demo backtest simulator.

    There is no market data behind it: every run draws fresh random numbers.

    - total_trades: uniform in [50, 150)
    - win_rate: integer percentage in [50, 90)
    - cumulative_return: [50, 250) percent
    - max_drawdown: between -20 and -5 percent
    - trades: 15 fixed-size wins (+5%) or losses (-3%), newest first
    """

    def __init__(
        self,
        store: Optional[MockStore] = None,
        delay: float = 2.0,
        rng: Optional[random.Random] = None,
        backend: Optional[BackendClient] = None,
    ):
        self.store = store
        self.backend = backend
        self.delay = delay
        self.rng = rng or random.Random()

    def _check_user(self, user_id: str) -> None:
        # Backend users carry remote uids the demo store has never seen.
        if user_id == GUEST_USER_ID or self.backend is not None or self.store is None:
            return
        if self.store.users.get(user_id) is None:
            raise UserNotFoundError(user_id)

    def run_backtest(self, user_id: Optional[str] = None) -> BacktestResult:
        """
        Raises:
            UserNotFoundError: when `user_id` is given and unknown to the demo
                store (only checked when no backend is configured).
        """
        if user_id is not None:
            self._check_user(user_id)

        if self.delay > 0:
            time.sleep(self.delay)

        rng = self.rng
        total_trades = rng.randrange(50, 150)
        win_rate = float(rng.randrange(50, 90))

        trades = [
            _simulate_trade(rng, LAST_TRADE_DATE - timedelta(days=i), win_rate)
            for i in range(NUM_SIMULATED_TRADES)
        ]
        trades.sort(key=lambda t: t.date, reverse=True)

        result = BacktestResult(
            total_trades=total_trades,
            win_rate=win_rate,
            cumulative_return=rng.random() * 200 + 50,
            max_drawdown=-(rng.random() * 15 + 5),
            trades=trades,
        )
        logger.info(
            "Backtest simulated: trades=%d win_rate=%.0f%% return=%.1f%%",
            result.total_trades,
            result.win_rate,
            result.cumulative_return,
        )
        return result
