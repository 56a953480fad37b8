"""
Streaming indicator system for technical analysis
"""
from .base import (
    Indicator,
    Bar,
    BarLike,
    InvalidParameter,
    typical_price,
    validate_period
)
from .moving_averages import (
    SimpleMovingAverage,
    VolumeWeightedAveragePrice,
    BandDirection,
    PriceSource
)
from .volatility import TrueRange
from .oscillators import CommodityChannelIndex, MeanAbsoluteDeviation
from .trend import TrendMagic, TrendMagicOutput, cross, crossover, crossunder
from .registry import (
    INDICATOR_REGISTRY,
    list_available_indicators,
    create_indicator
)

__all__ = [
    # Base
    'Indicator',
    'Bar',
    'BarLike',
    'InvalidParameter',
    'typical_price',
    'validate_period',

    # Moving averages
    'SimpleMovingAverage',
    'VolumeWeightedAveragePrice',
    'BandDirection',
    'PriceSource',

    # Volatility
    'TrueRange',

    # Oscillators
    'CommodityChannelIndex',
    'MeanAbsoluteDeviation',

    # Trend
    'TrendMagic',
    'TrendMagicOutput',
    'cross',
    'crossover',
    'crossunder',

    # Registry
    'INDICATOR_REGISTRY',
    'list_available_indicators',
    'create_indicator',
]
