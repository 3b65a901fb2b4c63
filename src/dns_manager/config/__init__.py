"""
DNS Manager Configuration Module
"""

from .loader import ConfigLoader
from .schema import (
    DNSManagerConfig,
    LoggingConfig,
    RecordsConfig,
    StoreConfig,
    create_default_config,
)

__all__ = [
    "ConfigLoader",
    "DNSManagerConfig",
    "StoreConfig",
    "RecordsConfig",
    "LoggingConfig",
    "create_default_config",
]
