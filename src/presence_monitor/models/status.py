"""
Session status models - violation counters, session timing and snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(frozen=True)
class ViolationCounters:
    """
    Cumulative violation counts for a session.

    Instances are immutable; the record_* methods return a new instance so
    total always equals no_person + multiple_person.
    """

    no_person: int = 0
    multiple_person: int = 0

    @property
    def total(self) -> int:
        return self.no_person + self.multiple_person

    def record_no_person(self) -> "ViolationCounters":
        return ViolationCounters(self.no_person + 1, self.multiple_person)

    def record_multiple_person(self) -> "ViolationCounters":
        return ViolationCounters(self.no_person, self.multiple_person + 1)

    def to_dict(self) -> dict[str, int]:
        return {
            "multiplePerson": self.multiple_person,
            "noPerson": self.no_person,
            "total": self.total,
        }


@dataclass
class Session:
    """Timing and activity flag of the current proctoring session."""

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    active: bool = False

    def restart_clock(self) -> None:
        self.started_at = datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Read-only view of the monitoring state at one instant.

    Attributes:
        person_count: Persons seen on the last applied tick (0 before any tick)
        violations: Counters at the time of the snapshot
        session_start_time: When proctoring last (re)started or was reset
        is_active: Whether proctoring is running
    """

    person_count: int
    violations: ViolationCounters
    session_start_time: datetime
    is_active: bool

    def session_duration(self, now: datetime | None = None) -> timedelta:
        now = now or datetime.now(timezone.utc)
        return max(now - self.session_start_time, timedelta(0))

    def format_duration(self, now: datetime | None = None) -> str:
        """Session duration as m:ss."""
        seconds = int(self.session_duration(now).total_seconds())
        return f"{seconds // 60}:{seconds % 60:02d}"

    def status_message(self) -> str:
        if self.person_count == 0:
            return "No person detected"
        if self.person_count > 1:
            return f"{self.person_count} persons detected"
        return "Single person detected"

    def to_dict(self) -> dict[str, Any]:
        return {
            "personCount": self.person_count,
            "violations": self.violations.to_dict(),
            "sessionStartTime": self.session_start_time.isoformat(),
            "isActive": self.is_active,
        }
