"""
Volatility Indicators
"""

from typing import Optional

from .base import Indicator, BarLike


class TrueRange(Indicator):
    """
    True Range

    max(high - low, |high - previous close|, |low - previous close|).
    The first bar has no previous close, so its true range is high - low.
    """

    label = 'TR'

    def __init__(self):
        super().__init__()
        self._prev_close: Optional[float] = None

    def consume(self, bar: BarLike) -> float:
        """Return the true range of this bar against the previous close"""
        high_low = bar.high - bar.low

        if self._prev_close is None:
            tr = high_low
        else:
            tr = max(
                high_low,
                abs(bar.high - self._prev_close),
                abs(bar.low - self._prev_close)
            )

        self._prev_close = bar.close
        return tr

    def reset(self) -> None:
        self._prev_close = None
