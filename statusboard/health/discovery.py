"""
statusboard/health/discovery.py — Discovery Checks section (Consul).

Uses the agent's local HTTP API (GET /v1/agent/checks), which answers with
an object keyed by check ID:

    {"service:web:1": {"Status": "passing", ...}, "serfHealth": {...}}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from statusboard.health import (
    CommunicationError,
    SectionResult,
    Severity,
    StatusEntry,
    dedupe_entries,
)

if TYPE_CHECKING:
    from config.settings import Settings
    from statusboard.health.sources import HealthCheckClient

logger = logging.getLogger(__name__)

TITLE = "Discovery Checks"
ERROR_PREFIX = "Discovery error"

_SEVERITY_BY_STATUS = {
    "passing": Severity.GOOD,
    "warning": Severity.WARNING,
}


def check_label(check_id: str) -> str:
    """Drop the first ':'-delimited segment; IDs without one are kept whole."""
    _, sep, rest = check_id.partition(":")
    return rest if sep else check_id


def parse_checks(payload: Any) -> list[StatusEntry]:
    if not isinstance(payload, dict):
        raise CommunicationError(f"expected a JSON object, got {type(payload).__name__}")

    entries = []
    for check_id, record in payload.items():
        if not isinstance(record, dict):
            raise CommunicationError(f"check '{check_id}' is not a JSON object")
        severity = _SEVERITY_BY_STATUS.get(record.get("Status"), Severity.BAD)
        entries.append(StatusEntry(check_label(check_id), severity))
    return dedupe_entries(entries)


def collect_discovery_status(client: HealthCheckClient, cfg: Settings) -> SectionResult:  # noqa: ARG001
    try:
        return parse_checks(client.agent_checks())
    except CommunicationError as e:
        logger.warning("discovery section failed: %s", e)
        return e
    except Exception as e:  # noqa: BLE001
        logger.warning("discovery section failed: %s", e)
        return CommunicationError(str(e))
