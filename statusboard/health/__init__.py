"""
statusboard/health — Section collectors for the status dashboard.

Each module exposes a collect_*() function that turns raw data from a
collaborator (see sources.py) into a list of StatusEntry objects.
report.py renders and prints them section by section.

Usage:
    from statusboard.health import Severity, StatusEntry
    from statusboard.health.system import collect_system_status
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union


class Severity(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


class CommunicationError(Exception):
    """The supervisor or discovery agent was unreachable or answered garbage."""


@dataclass(frozen=True)
class StatusEntry:
    label: str
    severity: Severity
    value: Optional[str] = None


@dataclass(frozen=True)
class Thresholds:
    """Inclusive upper bounds for the good and warning bands."""

    good_max: float
    warning_max: float

    def classify(self, value: float) -> Severity:
        if value <= self.good_max:
            return Severity.GOOD
        if value <= self.warning_max:
            return Severity.WARNING
        return Severity.BAD


# What the supervisor and discovery collectors hand back to the reporter.
SectionResult = Union[list[StatusEntry], CommunicationError]


def dedupe_entries(entries: Iterable[Optional[StatusEntry]]) -> list[StatusEntry]:
    """Drop missing and repeated entries, keeping first-seen order."""
    return list(dict.fromkeys(e for e in entries if e is not None))
