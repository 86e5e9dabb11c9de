"""
statusboard/health/system.py — System Info section.

Turns the numbers a SystemMetricsSource reports (uptime, load, disk,
memory, swap, sessions) into display entries, classifying load, disk,
memory and swap usage against the configured thresholds.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from statusboard.health import Severity, StatusEntry, dedupe_entries

if TYPE_CHECKING:
    from config.settings import Settings
    from statusboard.health.sources import SystemMetricsSource

logger = logging.getLogger(__name__)

TITLE = "System Info"
TIME_FORMAT = "%d %b %y %H:%M:%S %Z"


def format_uptime(seconds: float) -> str:
    """Coarsest unit `uptime` would lead with: '3 days', '4:05' or '12 min'."""
    total_minutes = int(seconds) // 60
    days, rem = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rem, 60)
    if days:
        return f"{days} day" if days == 1 else f"{days} days"
    if hours:
        return f"{hours}:{minutes:02d}"
    return f"{minutes} min"


def format_percent(value: float) -> str:
    return f"{round(value, 1)}%"


def collect_system_status(source: SystemMetricsSource, cfg: Settings) -> list[StatusEntry]:
    """Build the System Info entries in display order.

    Missing mounts and a zero-sized swap simply produce no entry. Anything
    else that goes wrong propagates to the caller.
    """
    percent = cfg.percent_thresholds
    entries: list[Optional[StatusEntry]] = []

    # Basics
    entries.append(StatusEntry("Time", Severity.GOOD, source.now().strftime(TIME_FORMAT)))
    entries.append(StatusEntry("Uptime", Severity.GOOD, format_uptime(source.uptime_seconds())))
    entries.append(StatusEntry("Release", Severity.GOOD, source.release().strip()))
    entries.append(StatusEntry("Kernel", Severity.GOOD, source.kernel().strip()))
    entries.append(StatusEntry("Environment", Severity.GOOD, cfg.ENVIRONMENT))

    # Load average
    load = round(source.load_average(), 2)
    entries.append(StatusEntry("Load (1 min)", cfg.load_thresholds.classify(load), str(load)))

    # Disk usage
    for mount in cfg.DISK_MOUNTS:
        use = source.disk_usage_percent(mount)
        if use is None:
            logger.debug("mount %s not found, skipping", mount)
            continue
        entries.append(StatusEntry(f"Usage of {mount}", percent.classify(use), format_percent(use)))

    # Memory and swap
    ram = source.memory().percent
    entries.append(StatusEntry("Memory usage", percent.classify(ram), format_percent(ram)))

    swap = source.swap()
    if swap.total > 0:
        entries.append(StatusEntry("Swap usage", percent.classify(swap.percent), format_percent(swap.percent)))

    # Users
    entries.append(StatusEntry("Users", Severity.GOOD, str(source.user_count())))

    return dedupe_entries(entries)
