"""
Moving Average Indicators

Implements the streaming SMA and the session-cumulative VWAP with its
standard deviation bands.
"""

import logging
import math
from collections import deque
from enum import Enum
from typing import Any, Deque, List

from .base import Indicator, BarLike, validate_period

logger = logging.getLogger(__name__)


class SimpleMovingAverage(Indicator):
    """
    Simple Moving Average

    Arithmetic mean of the last `period` values of a numeric stream. Until
    the window is full the mean is taken over the values seen so far.
    """

    label = 'SMA'

    def __init__(self, period: int = 9, source: str = 'close'):
        """
        Initialize SMA indicator.

        Args:
            period: Number of values to average (default: 9)
            source: Bar column fed in by consume_frame() (default: 'close')
        """
        super().__init__({
            'period': validate_period(period),
            'source': source
        })
        self._window: Deque[float] = deque(maxlen=period)

    def consume(self, value: float) -> float:
        """Add the next value and return the current mean"""
        self._window.append(value)

        # Re-summed every call, no running total
        return math.fsum(self._window) / len(self._window)

    def reset(self) -> None:
        self._window.clear()

    def _frame_input(self, row: Any) -> float:
        return getattr(row, self.params['source'])


class BandDirection(Enum):
    """Which side of the VWAP a band lies on"""

    UP = 'up'
    DOWN = 'down'


class PriceSource(Enum):
    """Representative price of a bar"""

    HLC3 = 'hlc3'


class VolumeWeightedAveragePrice(Indicator):
    """
    Volume Weighted Average Price

    Average typical price weighted by volume, with a running volume-weighted
    standard deviation for bands.

    Note: This is a cumulative (session) VWAP. Accumulation runs from
    construction or the last reset(); `period` only labels the instance and
    does not window the data. Call reset() at session boundaries.
    """

    label = 'VWAP'
    output_columns = ['value', 'std_dev']

    def __init__(self, period: int = 14, source: PriceSource = PriceSource.HLC3):
        """
        Initialize VWAP indicator.

        Args:
            period: Label period (default: 14)
            source: Price used for each bar (default: HLC3 typical price)
        """
        super().__init__({'period': validate_period(period)})
        self.source = PriceSource(source)
        self._reset_sums()
        logger.debug(f"Created {self.get_display_name()}")

    def _reset_sums(self):
        self.cumulative_price_volume = 0.0
        self.cumulative_volume = 0.0
        self.cumulative_price_squared_volume = 0.0
        self._vwap = 0.0
        self._std_dev = 0.0

    @property
    def vwap(self) -> float:
        """Most recently computed VWAP"""
        return self._vwap

    @property
    def std_dev(self) -> float:
        """Most recently computed volume-weighted standard deviation"""
        return self._std_dev

    def typical_price(self, bar: BarLike) -> float:
        """Representative price of a bar for the configured source"""
        if self.source is PriceSource.HLC3:
            return (bar.high + bar.low + bar.close) / 3.0
        raise ValueError(f"Unsupported price source: {self.source}")

    def consume(self, bar: BarLike) -> float:
        """
        Accumulate one bar.

        Args:
            bar: Next bar

        Returns:
            Current VWAP
        """
        price = self.typical_price(bar)
        volume = bar.volume

        self.cumulative_volume += volume
        self.cumulative_price_volume += price * volume
        self.cumulative_price_squared_volume += price * price * volume

        # Nothing traded yet: keep the previous values
        if self.cumulative_volume == 0:
            return self._vwap

        self._vwap = self.cumulative_price_volume / self.cumulative_volume

        # E[X^2] - E[X]^2 can come out slightly negative from cancellation
        variance = self.cumulative_price_squared_volume / self.cumulative_volume - self._vwap * self._vwap
        self._std_dev = math.sqrt(max(0.0, variance))

        return self._vwap

    def std_dev_band(self, offset: float, direction: BandDirection) -> float:
        """
        Band around the current VWAP.

        Does not change state, so it can be called with several offsets
        after each consume().

        Args:
            offset: Number of standard deviations
            direction: BandDirection.UP or BandDirection.DOWN

        Returns:
            vwap + offset * std_dev (UP) or vwap - offset * std_dev (DOWN)
        """
        if direction is BandDirection.UP:
            return self._vwap + offset * self._std_dev
        if direction is BandDirection.DOWN:
            return self._vwap - offset * self._std_dev
        raise ValueError(f"Unknown band direction: {direction}")

    def reset(self) -> None:
        self._reset_sums()
        logger.debug(f"Reset {self.get_display_name()}")

    def _frame_output(self, output: float) -> List[float]:
        return [output, self._std_dev]
