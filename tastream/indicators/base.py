"""
Base Indicator Class

Provides the bar accessor contract and the abstract base class for all
streaming (stateful) technical indicators.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Protocol, runtime_checkable
import pandas as pd
import logging

logger = logging.getLogger(__name__)


class InvalidParameter(ValueError):
    """Raised when an indicator is constructed with an unusable parameter"""


@runtime_checkable
class BarLike(Protocol):
    """Anything exposing read access to OHLCV values"""

    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class Bar:
    """
    Single OHLCV bar.

    Validation (high >= low etc.) is left to whoever builds the bars.
    """

    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


def typical_price(bar: BarLike) -> float:
    """(high + low + close) / 3"""
    return (bar.high + bar.low + bar.close) / 3.0


class Indicator(ABC):
    """
    Base class for all streaming technical indicators.

    An indicator owns its state and is fed one input at a time, in
    chronological order.

    Subclasses must implement:
    - consume(): Take the next input, update state, return the current value
    - reset(): Return to the state right after construction
    """

    # Short name used in display names; defaults to the class name
    label: Optional[str] = None

    # Column names produced by consume_frame() for scalar outputs
    output_columns: List[str] = ['value']

    def __init__(self, params: Optional[Dict[str, Any]] = None):
        """
        Initialize indicator with parameters.

        Args:
            params: Dictionary of indicator parameters
        """
        self.params = params or {}
        self.name = self.__class__.__name__
        self.label = self.label or self.name
        self.id = f"{self.label}_{self._get_param_string()}".rstrip('_')

    def _get_param_string(self) -> str:
        """Generate parameter string for unique ID"""
        if not self.params:
            return ""

        # Create string from key params
        key_params = []
        for key in ['period', 'atr_period', 'multiplier', 'cci_period']:
            if key in self.params:
                key_params.append(str(self.params[key]))

        return "_".join(key_params) if key_params else ""

    @abstractmethod
    def consume(self, value: Any) -> Any:
        """
        Consume the next input and return the indicator's current value.

        Args:
            value: Next bar (or scalar, for indicators over a numeric stream)

        Returns:
            Current indicator value
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset all state to what it was right after construction"""
        pass

    @property
    def period(self) -> Optional[int]:
        """Primary period of the indicator, if it has one"""
        return self.params.get('period')

    def get_display_name(self) -> str:
        """Get human-readable display name"""
        if 'period' in self.params:
            return f"{self.label}({self.params['period']})"
        return self.label

    def __str__(self) -> str:
        return self.get_display_name()

    def __repr__(self) -> str:
        return f"<{self.name} {self.get_display_name()}>"

    def validate_dataframe(self, df: pd.DataFrame) -> bool:
        """
        Validate that DataFrame has required columns.

        Args:
            df: DataFrame to validate

        Returns:
            True if valid

        Raises:
            ValueError if invalid
        """
        required = ['time', 'open', 'high', 'low', 'close', 'volume']
        missing = [col for col in required if col not in df.columns]

        if missing:
            raise ValueError(f"DataFrame missing required columns: {missing}")

        if df.empty:
            raise ValueError("DataFrame is empty")

        return True

    def validate_source(self, df: pd.DataFrame) -> bool:
        """Check the source column, for indicators fed from a single column"""
        source = self.params.get('source')

        if source is not None and source not in df.columns:
            raise ValueError(f"Source column '{source}' not found in DataFrame")

        return True

    def _frame_input(self, row: Any) -> Any:
        """Pick this indicator's input out of one DataFrame row"""
        return row

    def _frame_output(self, output: Any) -> List[Any]:
        """Flatten one consume() result into the output_columns order"""
        return [output]

    def consume_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Stream every row of an OHLCV DataFrame through consume().

        Rows are fed in order, one at a time, and state carries over
        between calls: feeding two frames back to back is the same as
        feeding their concatenation.

        Args:
            df: DataFrame with OHLCV data (columns: time, open, high, low, close, volume)

        Returns:
            DataFrame with 'time' column and one column per output_columns entry
        """
        self.validate_dataframe(df)
        self.validate_source(df)

        rows = [
            self._frame_output(self.consume(self._frame_input(row)))
            for row in df.itertuples(index=False)
        ]

        result = pd.DataFrame(rows, columns=self.output_columns, index=df.index)
        result.insert(0, 'time', df['time'])
        return result

    def consume_frame_safe(self, df: pd.DataFrame) -> Optional[pd.DataFrame]:
        """
        Stream a DataFrame with error handling.

        Args:
            df: Input DataFrame

        Returns:
            Result DataFrame or None if error
        """
        try:
            return self.consume_frame(df)

        except ValueError as e:
            logger.error(f"Error consuming frame in {self.get_display_name()}: {e}")
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert indicator to dictionary representation"""
        return {
            'name': self.name,
            'id': self.id,
            'display_name': self.get_display_name(),
            'params': self.params,
        }


def validate_period(period: int, min_period: int = 1) -> int:
    """Validate period parameter"""
    if isinstance(period, bool) or not isinstance(period, int):
        raise InvalidParameter(f"Period must be integer, got {type(period)}")

    if period < min_period:
        raise InvalidParameter(f"Period must be >= {min_period}, got {period}")

    return period
