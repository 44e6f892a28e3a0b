"""
Core Module Package.

This package contains the core infrastructure components
that all other modules depend on.

Components:
- config: Environment-driven indexer configuration
- exceptions: Custom exception hierarchy
- constants: Indexer-wide constants
"""

from .config import IndexerConfig
from .exceptions import (
    IndexerException,
    ConfigurationError,
    EventDecodeError,
    EntityStoreError,
    Severity,
)

__all__ = [
    "IndexerConfig",
    "IndexerException",
    "ConfigurationError",
    "EventDecodeError",
    "EntityStoreError",
    "Severity",
]
