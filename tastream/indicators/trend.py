"""
Trend Indicators

Implements Trend Magic (KivancOzbilgic), a CCI-regime trailing stop built
from True Range, an SMA of True Range and the Commodity Channel Index.
"""

import logging
from dataclasses import dataclass, astuple
from typing import Any, List

from .base import Indicator, BarLike, InvalidParameter, validate_period
from .moving_averages import SimpleMovingAverage
from .oscillators import CommodityChannelIndex
from .volatility import TrueRange

logger = logging.getLogger(__name__)


def crossover(prev_value: float, prev_line: float, value: float, line: float) -> bool:
    """Value moved from at/below the line to at/above it"""
    return prev_value <= prev_line and value >= line


def crossunder(prev_value: float, prev_line: float, value: float, line: float) -> bool:
    """Value moved from at/above the line to at/below it"""
    return prev_value >= prev_line and value <= line


def cross(prev_value: float, prev_line: float, value: float, line: float) -> bool:
    """Value touched or crossed the line in either direction"""
    return (
        crossover(prev_value, prev_line, value, line)
        or crossunder(prev_value, prev_line, value, line)
    )


@dataclass(frozen=True)
class TrendMagicOutput:
    """
    One Trend Magic result.

    Attributes:
        support: low - atr * multiplier (candidate line in a bullish regime)
        resistance: high + atr * multiplier (candidate line in a bearish regime)
        trend_line: Ratcheted trend line value
        cross: Close touched or crossed the trend line
        crossover: Low crossed up through the trend line
        crossunder: High crossed down through the trend line
    """

    support: float
    resistance: float
    trend_line: float
    cross: bool
    crossover: bool
    crossunder: bool


class TrendMagic(Indicator):
    """
    Trend Magic

    A single trend line that trails price like a stop:
    - CCI >= 0: line follows low - ATR * multiplier, and never moves down
    - CCI < 0: line follows high + ATR * multiplier, and never moves up

    ATR here is an SMA of True Range rather than Wilder's smoothing.

    All previous-bar fields start at zero, so the first bar can report a
    cross against a zero trend line.
    """

    output_columns = [
        'support', 'resistance', 'trend_line',
        'cross', 'crossover', 'crossunder'
    ]

    def __init__(self, atr_period: int = 5, multiplier: float = 1.0, cci_period: int = 20):
        """
        Initialize Trend Magic.

        Args:
            atr_period: SMA period over True Range (default: 5)
            multiplier: ATR multiplier for the support/resistance offset (default: 1.0)
            cci_period: CCI period (default: 20)
        """
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)):
            raise InvalidParameter(f"Multiplier must be a number, got {type(multiplier)}")

        super().__init__({
            'atr_period': validate_period(atr_period),
            'multiplier': float(multiplier),
            'cci_period': validate_period(cci_period)
        })

        self._tr = TrueRange()
        self._atr = SimpleMovingAverage(atr_period)
        self._cci = CommodityChannelIndex(cci_period)
        self._reset_previous()

        logger.debug(f"Created {self.get_display_name()}")

    def _reset_previous(self):
        self.previous_trend_line = 0.0
        self.previous_close = 0.0
        self.previous_high = 0.0
        self.previous_low = 0.0

    @property
    def trend_line(self) -> float:
        """Trend line after the last consumed bar"""
        return self.previous_trend_line

    def get_display_name(self) -> str:
        p = self.params
        return f"{self.label}({p['atr_period']},{p['multiplier']},{p['cci_period']})"

    def consume(self, bar: BarLike) -> TrendMagicOutput:
        """
        Consume one bar.

        Args:
            bar: Next bar

        Returns:
            TrendMagicOutput for this bar
        """
        atr = self._atr.consume(self._tr.consume(bar))
        cci = self._cci.consume(bar)

        multiplier = self.params['multiplier']
        up = bar.low - atr * multiplier
        down = bar.high + atr * multiplier

        prev_line = self.previous_trend_line
        if cci >= 0:
            line = prev_line if up < prev_line else up
        else:
            line = prev_line if down > prev_line else down

        output = TrendMagicOutput(
            support=up,
            resistance=down,
            trend_line=line,
            cross=cross(self.previous_close, prev_line, bar.close, line),
            crossover=crossover(self.previous_low, prev_line, bar.low, line),
            crossunder=crossunder(self.previous_high, prev_line, bar.high, line),
        )

        self.previous_trend_line = line
        self.previous_close = bar.close
        self.previous_high = bar.high
        self.previous_low = bar.low

        return output

    def reset(self) -> None:
        self._reset_previous()
        self._tr.reset()
        self._atr.reset()
        self._cci.reset()
        logger.debug(f"Reset {self.get_display_name()}")

    def _frame_output(self, output: TrendMagicOutput) -> List[Any]:
        return list(astuple(output))
