"""
statusboard/health/supervisor.py — Supervisor Summary section (Monit).

`monit summary` prints a header carrying the daemon uptime, then one line
per service:

    The Monit daemon 5.16 uptime: 2h 42m

    System 'web01'                      Running
    Process 'nginx'                     Running
    Filesystem 'rootfs'                 Accessible

The System line describes the host itself and is skipped.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

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

TITLE = "Supervisor Summary"
ERROR_PREFIX = "Supervisor error"
GOOD_STATES = {"Online", "Running"}

_SERVICE_RE = re.compile(r"^\s*(?P<kind>[A-Za-z][^']*?)\s+'(?P<name>[^']*)'\s+(?P<state>.*?)\s*$")


def parse_summary(output: str, marker: str = "uptime") -> list[StatusEntry]:
    if marker not in output:
        raise CommunicationError("Could not contact supervisor!")

    entries = []
    matched = 0
    for line in output.splitlines():
        m = _SERVICE_RE.match(line)
        if not m:
            continue
        matched += 1
        if m.group("kind") == "System":
            continue
        state = m.group("state")
        if "Online" in state:
            state = "Online"
        severity = Severity.GOOD if state in GOOD_STATES else Severity.BAD
        entries.append(StatusEntry(m.group("name"), severity))
    if not matched:
        logger.debug("supervisor output has %r but no service lines matched; unknown layout?", marker)
    return dedupe_entries(entries)


def collect_supervisor_status(client: HealthCheckClient, cfg: Settings) -> SectionResult:
    try:
        return parse_summary(client.supervisor_summary(), cfg.SUPERVISOR_MARKER)
    except CommunicationError as e:
        logger.warning("supervisor section failed: %s", e)
        return e
    except Exception as e:  # noqa: BLE001
        logger.warning("supervisor section failed: %s", e)
        return CommunicationError(str(e))
