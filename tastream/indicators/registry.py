"""
Indicator Registry

Maps short keys to indicator classes so indicators can be created from
configuration.
"""

import logging
from typing import Dict, Type, List, Any

from .base import Indicator
from .moving_averages import SimpleMovingAverage, VolumeWeightedAveragePrice
from .oscillators import CommodityChannelIndex, MeanAbsoluteDeviation
from .trend import TrendMagic
from .volatility import TrueRange

logger = logging.getLogger(__name__)


# Global indicator registry
INDICATOR_REGISTRY: Dict[str, Type[Indicator]] = {
    # Moving Averages
    'sma': SimpleMovingAverage,
    'vwap': VolumeWeightedAveragePrice,

    # Volatility
    'tr': TrueRange,
    'true_range': TrueRange,

    # Oscillators
    'cci': CommodityChannelIndex,
    'mad': MeanAbsoluteDeviation,

    # Trend
    'trend_magic': TrendMagic,
    'trendmagic': TrendMagic,
}


def list_available_indicators() -> List[Dict[str, Any]]:
    """
    List all available indicators with metadata.

    Returns:
        List of indicator metadata dictionaries
    """
    indicators = []

    for key, indicator_class in INDICATOR_REGISTRY.items():
        # Create instance with defaults to get info
        instance = indicator_class()
        indicators.append({
            'key': key,
            'name': instance.name,
            'display_name': instance.get_display_name(),
            'default_params': instance.params,
        })

    return indicators


def create_indicator(indicator_type: str, **params) -> Indicator:
    """
    Create an indicator instance.

    Args:
        indicator_type: Registry key of the indicator
        **params: Indicator parameters

    Returns:
        Indicator instance

    Raises:
        ValueError: Unknown indicator type
        InvalidParameter: A parameter was rejected by the indicator

    Example:
        >>> vwap = create_indicator('vwap', period=14)
        >>> tm = create_indicator('trend_magic', atr_period=5, multiplier=1.0, cci_period=20)
    """
    indicator_class = INDICATOR_REGISTRY.get(indicator_type.lower())

    if not indicator_class:
        logger.error(f"Unknown indicator type: {indicator_type}")
        raise ValueError(
            f"Unknown indicator type '{indicator_type}'. "
            f"Available indicators: {list(INDICATOR_REGISTRY.keys())}"
        )

    try:
        indicator = indicator_class(**params)
    except ValueError as e:
        logger.error(f"Error creating {indicator_type} with {params}: {e}")
        raise

    logger.info(f"Created indicator: {indicator.get_display_name()} (ID: {indicator.id})")
    return indicator
