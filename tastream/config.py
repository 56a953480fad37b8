"""
Configuration loading

Reads indicator and logging settings from config.yaml and builds the
configured indicators.
"""

import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union

from tastream.indicators import Indicator, create_indicator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'config.yaml'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file path (default: config.yaml at the repo root)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: Config file does not exist
        ValueError: Config file is not a mapping or has a malformed indicators list
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    indicators = config.setdefault('indicators', [])
    if not isinstance(indicators, list):
        raise ValueError(f"'indicators' in {config_path} must be a list")

    for i, entry in enumerate(indicators):
        if not isinstance(entry, dict) or 'type' not in entry:
            raise ValueError(f"Indicator #{i} in {config_path} needs a 'type'")
        if not isinstance(entry.get('params') or {}, dict):
            raise ValueError(f"Indicator #{i} in {config_path}: 'params' must be a mapping")

    logger.info(f"Loaded configuration from {config_path} ({len(indicators)} indicators)")
    return config


def setup_logging(config: Optional[Dict[str, Any]] = None):
    """Configure root logging from the 'logging' section"""
    level_name = ((config or {}).get('logging') or {}).get('level', 'INFO')
    level = getattr(logging, str(level_name).upper(), None)

    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_indicators(config: Dict[str, Any]) -> Dict[str, Indicator]:
    """
    Create every indicator listed in the config.

    Entries may set an explicit 'id'; otherwise the indicator's generated id
    is used. Construction errors propagate so a bad config fails before any
    bar is processed.

    Args:
        config: Dictionary returned by load_config()

    Returns:
        Mapping of indicator id to fresh indicator instance
    """
    indicators: Dict[str, Indicator] = {}

    for entry in config.get('indicators', []):
        indicator = create_indicator(entry['type'], **(entry.get('params') or {}))
        ind_id = entry.get('id') or indicator.id

        if ind_id in indicators:
            raise ValueError(f"Duplicate indicator id: {ind_id}")

        indicators[ind_id] = indicator

    return indicators
