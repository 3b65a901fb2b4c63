"""
DNS Manager Configuration Schema

Configuration for the record store backend, record defaults used by the
field parsers, and logging.
"""

from dataclasses import dataclass, field
from typing import Optional

from .validators import (
    validate_file_path,
    validate_log_level,
    validate_positive_int,
    validate_ttl,
)

STORE_BACKENDS = ["file", "memory"]


@dataclass
class StoreConfig:
    """Record store configuration section."""

    backend: str = "file"
    path: str = "dns-records.yaml"

    def __post_init__(self) -> None:
        """Validate store configuration."""
        if self.backend not in STORE_BACKENDS:
            raise ValueError(f"Invalid store backend: {self.backend}")

        if self.backend == "file" and not validate_file_path(self.path):
            raise ValueError(f"Invalid store path: {self.path}")


@dataclass
class RecordsConfig:
    """Defaults applied when a record is added from fields."""

    default_ttl: int = 86400
    soa_refresh: int = 3600
    soa_retry: int = 600
    soa_expire: int = 604800
    soa_minimum: int = 3600

    def __post_init__(self) -> None:
        """Validate record defaults."""
        for name in (
            "default_ttl",
            "soa_refresh",
            "soa_retry",
            "soa_expire",
            "soa_minimum",
        ):
            value = getattr(self, name)
            if not validate_ttl(value):
                raise ValueError(f"Invalid {name.replace('_', ' ')}: {value}")


@dataclass
class LoggingConfig:
    """Logging configuration section."""

    level: str = "WARNING"
    format: str = "simple"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if not validate_log_level(self.level):
            raise ValueError(f"Invalid log level: {self.level}")

        if self.format not in ["simple", "structured"]:
            raise ValueError(f"Invalid log format: {self.format}")

        if self.file is not None and not validate_file_path(self.file):
            raise ValueError(f"Invalid log file path: {self.file}")

        if not validate_positive_int(self.max_size_mb):
            raise ValueError(f"Max size MB must be positive: {self.max_size_mb}")

        if not validate_positive_int(self.backup_count):
            raise ValueError(f"Backup count must be positive: {self.backup_count}")


@dataclass
class DNSManagerConfig:
    """Main DNS manager configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    records: RecordsConfig = field(default_factory=RecordsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def create_default_config() -> DNSManagerConfig:
    """Create a default configuration instance."""
    return DNSManagerConfig()
