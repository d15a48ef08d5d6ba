"""
Alert models - structured messages raised by the monitor.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class AlertKind(Enum):
    """Severity of an alert."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Alert:
    """
    Immutable alert entry.

    Attributes:
        kind: Severity of the alert
        message: Human-readable text
        timestamp: UTC time the alert was created
    """

    kind: AlertKind
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def info(cls, message: str) -> "Alert":
        return cls(AlertKind.INFO, message)

    @classmethod
    def success(cls, message: str) -> "Alert":
        return cls(AlertKind.SUCCESS, message)

    @classmethod
    def warning(cls, message: str) -> "Alert":
        return cls(AlertKind.WARNING, message)

    @classmethod
    def error(cls, message: str) -> "Alert":
        return cls(AlertKind.ERROR, message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.kind.value.upper()}: {self.message}"
