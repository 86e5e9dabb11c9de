#!/usr/bin/env python3
"""
statusboard/report.py — Print the console status dashboard once.

Sections, in order:
  1. System Info         (local OS metrics — failures here abort the run)
  2. Supervisor Summary  (Monit — failures print one red line and continue)
  3. Discovery Checks    (Consul — failures print one red line and continue)

Usage:
    statusboard                       # console script, reads .env from cwd
    python -m statusboard.report

Importable (used by tests):
    from statusboard.report import run_report
    run_report(cfg, metrics=FakeMetrics(), client=FakeClient(), stream=buf)
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from config.settings import Settings, load_settings
from statusboard.formatting import render_error, render_section
from statusboard.health import CommunicationError, SectionResult
from statusboard.health import discovery as health_discovery
from statusboard.health import supervisor as health_supervisor
from statusboard.health import system as health_system
from statusboard.health.sources import (
    HealthCheckClient,
    LocalHealthCheckClient,
    LocalMetricsSource,
    SystemMetricsSource,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "WARNING") -> None:
    """Send diagnostics to stderr so they never interleave with the report."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def use_color(cfg: Settings, stream: TextIO) -> bool:
    if cfg.COLOR == "always":
        return True
    if cfg.COLOR == "never":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _emit(lines: list[str], stream: TextIO) -> None:
    for line in lines:
        print(line, file=stream)


def _emit_result(
    title: str,
    error_prefix: str,
    result: SectionResult,
    cfg: Settings,
    stream: TextIO,
) -> None:
    color = use_color(cfg, stream)
    if isinstance(result, CommunicationError):
        _emit(render_error(error_prefix, result, color=color), stream)
    else:
        _emit(render_section(title, result, cfg, color=color), stream)


def print_system_status(cfg: Settings, metrics: SystemMetricsSource, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    entries = health_system.collect_system_status(metrics, cfg)
    _emit(render_section(health_system.TITLE, entries, cfg, color=use_color(cfg, stream)), stream)


def print_supervisor_status(cfg: Settings, client: HealthCheckClient, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    result = health_supervisor.collect_supervisor_status(client, cfg)
    _emit_result(health_supervisor.TITLE, health_supervisor.ERROR_PREFIX, result, cfg, stream)


def print_discovery_status(cfg: Settings, client: HealthCheckClient, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    result = health_discovery.collect_discovery_status(client, cfg)
    _emit_result(health_discovery.TITLE, health_discovery.ERROR_PREFIX, result, cfg, stream)


def run_report(
    cfg: Settings | None = None,
    metrics: SystemMetricsSource | None = None,
    client: HealthCheckClient | None = None,
    stream: TextIO | None = None,
) -> None:
    """Print all three sections in order. Collaborators default to the local host."""
    stream = stream or sys.stdout
    if cfg is None:
        cfg = load_settings()
    if metrics is None:
        metrics = LocalMetricsSource(cfg.HEALTH_COMMAND_TIMEOUT_SECONDS)
    if client is None:
        client = LocalHealthCheckClient(
            cfg.SUPERVISOR_COMMAND,
            cfg.DISCOVERY_URL,
            command_timeout_seconds=cfg.HEALTH_COMMAND_TIMEOUT_SECONDS,
            http_timeout_seconds=cfg.HEALTH_HTTP_TIMEOUT_SECONDS,
        )

    print_system_status(cfg, metrics, stream)
    print_supervisor_status(cfg, client, stream)
    print_discovery_status(cfg, client, stream)


def main() -> int:
    cfg = load_settings()
    configure_logging(cfg.LOG_LEVEL)
    logger.debug("settings: %s", cfg.model_dump())
    run_report(cfg)
    return 0


if __name__ == "__main__":
    sys.exit(main())
