"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Errors the indexer raises to its host.

Event handlers never raise for data anomalies (unknown
delegate, negative balance, terminal proposal): those are
logged and processing continues. What remains is:

- bad configuration, refused before anything is indexed
- raw logs the decoder cannot turn into typed events
- entity store faults, which abort the event's transaction

============================================================
EXCEPTION HIERARCHY
============================================================
IndexerException (base)
├── ConfigurationError
│   └── InvalidConfigError
├── EventDecodeError
└── EntityStoreError
    └── storage.repositories.exceptions.RepositoryException

============================================================
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class Severity(Enum):
    """How loudly the host should react."""

    MEDIUM = "medium"
    """One input was rejected; indexing can go on."""

    HIGH = "high"
    """The indexer cannot start as configured."""

    CRITICAL = "critical"
    """The store failed; the event must be redelivered."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class IndexerException(Exception):
    """
    Base exception for all indexer errors.

    Carries a severity, a context dict for structured logging,
    the underlying cause (if any) and when it was raised.
    """

    default_severity: Severity = Severity.MEDIUM

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity or self.default_severity
        self.context = dict(context or {})
        self.cause = cause
        self.raised_at = datetime.now(timezone.utc)

        if cause is not None:
            self.context.setdefault("cause_type", type(cause).__name__)
            self.context.setdefault("cause_message", str(cause))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
            "raised_at": self.raised_at.isoformat(),
        }

    def to_log_format(self) -> str:
        """One-line rendering: [SEVERITY] Type: message | k=v, ..."""
        line = f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
        if self.context:
            line += " | " + ", ".join(f"{k}={v}" for k, v in self.context.items())
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(IndexerException):
    """The indexer configuration is unusable."""

    default_severity = Severity.HIGH

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]
        super().__init__(message, context=context, **kwargs)


class InvalidConfigError(ConfigurationError):
    """A single setting has a value that cannot be used."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {reason}",
            config_key=key,
            actual_value=value,
            context={"reason": reason},
        )


# ============================================================
# EVENT ERRORS
# ============================================================

class EventDecodeError(IndexerException):
    """A raw log could not be turned into a typed event."""

    def __init__(
        self,
        message: str,
        event_name: Optional[str] = None,
        field: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if event_name:
            context["event_name"] = event_name
        if field:
            context["field"] = field
        super().__init__(message, context=context, **kwargs)


# ============================================================
# STORE ERRORS
# ============================================================

class EntityStoreError(IndexerException):
    """The entity store rejected an operation."""

    default_severity = Severity.CRITICAL

    def __init__(
        self,
        message: str,
        entity_kind: Optional[str] = None,
        entity_id: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if entity_kind:
            context["entity_kind"] = entity_kind
        if entity_id:
            context["entity_id"] = entity_id
        super().__init__(message, context=context, **kwargs)
