"""
Oscillator Indicators

Implements the streaming Commodity Channel Index and the mean absolute
deviation it is built on.
"""

import numpy as np
from collections import deque
from typing import Any, Deque

from .base import Indicator, BarLike, typical_price, validate_period
from .moving_averages import SimpleMovingAverage


class MeanAbsoluteDeviation(Indicator):
    """
    Mean Absolute Deviation

    Average distance of the last `period` values from their mean. Like the
    SMA, it uses the values seen so far until the window fills.
    """

    label = 'MAD'

    def __init__(self, period: int = 9, source: str = 'close'):
        """
        Initialize MAD indicator.

        Args:
            period: Window length (default: 9)
            source: Bar column fed in by consume_frame() (default: 'close')
        """
        super().__init__({
            'period': validate_period(period),
            'source': source
        })
        self._window: Deque[float] = deque(maxlen=period)

    def consume(self, value: float) -> float:
        self._window.append(value)

        x = np.fromiter(self._window, dtype=float, count=len(self._window))
        return float(np.abs(x - x.mean()).mean())

    def reset(self) -> None:
        self._window.clear()

    def _frame_input(self, row: Any) -> float:
        return getattr(row, self.params['source'])


class CommodityChannelIndex(Indicator):
    """
    Commodity Channel Index

    Measures deviation of the typical price from its moving average, scaled
    by the mean absolute deviation. Oscillates around zero; +100 and -100
    are the usual overbought/oversold levels.
    """

    label = 'CCI'

    # Lambert's constant: puts ~75% of values inside +/-100
    SCALE = 0.015

    def __init__(self, period: int = 20):
        """
        Initialize CCI indicator.

        Args:
            period: Number of bars (default: 20)
        """
        super().__init__({'period': validate_period(period)})
        self._sma = SimpleMovingAverage(period)
        self._mad = MeanAbsoluteDeviation(period)

    def consume(self, bar: BarLike) -> float:
        """Return the CCI including this bar (0.0 while the window is flat)"""
        tp = typical_price(bar)
        mean = self._sma.consume(tp)
        mad = self._mad.consume(tp)

        if mad == 0:
            return 0.0

        return (tp - mean) / (self.SCALE * mad)

    def reset(self) -> None:
        self._sma.reset()
        self._mad.reset()
