"""Unit tests for statusboard.health.system classification and formatting."""

from __future__ import annotations

import pytest

from config.settings import Settings
from statusboard.health import Severity, StatusEntry, Thresholds
from statusboard.health import system as health_system
from statusboard.health.sources import MemoryUsage
from tests.fixtures.sample_outputs import MIB, FakeMetrics


def _by_label(entries: list[StatusEntry]) -> dict[str, StatusEntry]:
    return {e.label: e for e in entries}


def _collect(cfg, **metrics) -> dict[str, StatusEntry]:
    return _by_label(health_system.collect_system_status(FakeMetrics(**metrics), cfg))


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, Severity.GOOD),
        (80, Severity.GOOD),
        (80.1, Severity.WARNING),
        (95, Severity.WARNING),
        (95.1, Severity.BAD),
        (100, Severity.BAD),
    ],
)
def test_percent_thresholds_are_boundary_inclusive(value, expected):
    assert Thresholds(80, 95).classify(value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [(0.8, Severity.GOOD), (0.81, Severity.WARNING), (0.95, Severity.WARNING), (1.2, Severity.BAD)],
)
def test_load_thresholds(value, expected):
    assert Settings().load_thresholds.classify(value) is expected


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (3 * 86400 + 4 * 3600 + 5 * 60, "3 days"),
        (86400 + 59, "1 day"),
        (4 * 3600 + 5 * 60 + 30, "4:05"),
        (12 * 60 + 59, "12 min"),
        (0, "0 min"),
    ],
)
def test_format_uptime(seconds, expected):
    assert health_system.format_uptime(seconds) == expected


@pytest.mark.parametrize("value,expected", [(45, "45%"), (45.0, "45.0%"), (87.25, "87.2%")])
def test_format_percent(value, expected):
    assert health_system.format_percent(value) == expected


def test_memory_usage_percent():
    assert MemoryUsage(total=2000, used=1610).percent == 80.5


# ---------------------------------------------------------------------------
# collect_system_status
# ---------------------------------------------------------------------------


def test_collects_entries_in_display_order(cfg):
    entries = health_system.collect_system_status(FakeMetrics(), cfg)
    assert [e.label for e in entries] == [
        "Time",
        "Uptime",
        "Release",
        "Kernel",
        "Environment",
        "Load (1 min)",
        "Usage of /",
        "Usage of /mnt",
        "Memory usage",
        "Swap usage",
        "Users",
    ]


def test_values_and_severities(cfg):
    entries = _collect(cfg)
    assert entries["Time"].value == "05 Mar 24 14:07:09 UTC"
    assert entries["Uptime"].value == "3 days"
    assert entries["Release"].value == "Ubuntu 22.04.4 LTS"
    assert entries["Kernel"].value == "5.15.0-105-generic"
    assert entries["Environment"] == StatusEntry("Environment", Severity.GOOD, "develop")
    assert entries["Load (1 min)"] == StatusEntry("Load (1 min)", Severity.GOOD, "0.42")
    assert entries["Usage of /"] == StatusEntry("Usage of /", Severity.GOOD, "45.0%")
    assert entries["Usage of /mnt"] == StatusEntry("Usage of /mnt", Severity.WARNING, "87.0%")
    assert entries["Memory usage"] == StatusEntry("Memory usage", Severity.GOOD, "50.0%")
    assert entries["Users"].value == "3"


def test_missing_secondary_mount_is_omitted(cfg):
    entries = _collect(cfg, disks={"/": 45.0})
    assert "Usage of /" in entries
    assert "Usage of /mnt" not in entries


def test_configured_environment_and_mounts():
    cfg = Settings(COLOR="never", ENVIRONMENT="production", DISK_MOUNTS="/dev/shm")
    entries = _collect(cfg)
    assert entries["Environment"].value == "production"
    assert entries["Usage of /dev/shm"].value == "0.0%"
    assert "Usage of /" not in entries


def test_full_disk_is_bad(cfg):
    assert _collect(cfg, disks={"/": 99.5})["Usage of /"].severity is Severity.BAD


def test_high_load_is_bad(cfg):
    assert _collect(cfg, load=3.1)["Load (1 min)"].severity is Severity.BAD


def test_load_is_rounded_for_display(cfg):
    assert _collect(cfg, load=0.4166666)["Load (1 min)"].value == "0.42"


# ---------------------------------------------------------------------------
# Memory and swap
# ---------------------------------------------------------------------------


def test_swap_omitted_when_total_is_zero(cfg):
    entries = _collect(cfg, swap=MemoryUsage(total=0, used=0))
    assert "Swap usage" not in entries
    assert "Memory usage" in entries


def test_zero_swap_used_reports_zero_percent(cfg):
    entries = _collect(cfg, swap=MemoryUsage(total=1000 * MIB, used=0))
    assert entries["Swap usage"] == StatusEntry("Swap usage", Severity.GOOD, "0.0%")


@pytest.mark.parametrize(
    "swap_used,expected",
    [(800, Severity.GOOD), (900, Severity.WARNING), (990, Severity.BAD)],
)
def test_swap_severity_uses_swap_percentage(cfg, swap_used, expected):
    # Memory stays at 50%, so only the swap figure can drive the result.
    entries = _collect(cfg, swap=MemoryUsage(total=1000 * MIB, used=swap_used * MIB))
    assert entries["Swap usage"].severity is expected


def test_memory_percentage_not_truncated_before_classifying(cfg):
    # 80.5% must be a warning even though int(80.5) == 80.
    entries = _collect(cfg, memory=MemoryUsage(total=2000 * MIB, used=1610 * MIB))
    assert entries["Memory usage"] == StatusEntry("Memory usage", Severity.WARNING, "80.5%")


def test_metrics_failure_propagates(cfg):
    class Broken(FakeMetrics):
        def uptime_seconds(self) -> float:
            raise PermissionError("boot time unavailable")

    with pytest.raises(PermissionError):
        health_system.collect_system_status(Broken(), cfg)
