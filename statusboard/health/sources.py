"""
statusboard/health/sources.py — Where the dashboard's raw data comes from.

Two collaborator interfaces keep the classification and formatting logic
testable against fixed sample data:

  SystemMetricsSource — local OS metrics (psutil, plus lsb_release)
  HealthCheckClient   — the Monit summary and the Consul agent checks

Metrics come back as numbers; the supervisor summary as raw text and the
agent checks as decoded JSON, leaving interpretation to the collectors.
"""

from __future__ import annotations

import logging
import platform
import shlex
import subprocess
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import orjson
import psutil

from statusboard.health import CommunicationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryUsage:
    total: int
    used: int

    @property
    def percent(self) -> float:
        return round(self.used / self.total * 100, 1)


class SystemMetricsSource(ABC):
    @abstractmethod
    def now(self) -> datetime:
        ...

    @abstractmethod
    def uptime_seconds(self) -> float:
        ...

    @abstractmethod
    def release(self) -> str:
        """OS release description, e.g. 'Ubuntu 22.04.4 LTS'."""
        ...

    @abstractmethod
    def kernel(self) -> str:
        ...

    @abstractmethod
    def load_average(self) -> float:
        """1-minute load average."""
        ...

    @abstractmethod
    def disk_usage_percent(self, mount: str) -> Optional[float]:
        """Used percentage of the filesystem mounted at *mount*, None if not mounted."""
        ...

    @abstractmethod
    def memory(self) -> MemoryUsage:
        ...

    @abstractmethod
    def swap(self) -> MemoryUsage:
        ...

    @abstractmethod
    def user_count(self) -> int:
        """Number of login sessions."""
        ...


class HealthCheckClient(ABC):
    @abstractmethod
    def supervisor_summary(self) -> str:
        """Raw output of the supervisor summary command."""
        ...

    @abstractmethod
    def agent_checks(self) -> Any:
        """Decoded JSON body of the discovery agent's checks endpoint."""
        ...


class LocalMetricsSource(SystemMetricsSource):
    """Reads metrics from the host this process runs on.

    Errors propagate: the System Info section has no error handling of its
    own.
    """

    def __init__(self, timeout_seconds: Optional[float] = None) -> None:
        self.timeout_seconds = timeout_seconds

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def uptime_seconds(self) -> float:
        return self.now().timestamp() - psutil.boot_time()

    def release(self) -> str:
        cmd = ["lsb_release", "-s", "-d"]
        logger.debug("running %s", " ".join(cmd))
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=self.timeout_seconds,
            check=True,
        )
        return result.stdout.strip().strip('"')

    def kernel(self) -> str:
        return platform.release()

    def load_average(self) -> float:
        return psutil.getloadavg()[0]

    def disk_usage_percent(self, mount: str) -> Optional[float]:
        mounted = {p.mountpoint for p in psutil.disk_partitions(all=True)}
        if mount not in mounted:
            return None
        return psutil.disk_usage(mount).percent

    def memory(self) -> MemoryUsage:
        vm = psutil.virtual_memory()
        return MemoryUsage(total=vm.total, used=vm.used)

    def swap(self) -> MemoryUsage:
        sw = psutil.swap_memory()
        return MemoryUsage(total=sw.total, used=sw.used)

    def user_count(self) -> int:
        return len(psutil.users())


class LocalHealthCheckClient(HealthCheckClient):
    """Talks to Monit through its CLI and to Consul over HTTP."""

    def __init__(
        self,
        supervisor_command: str,
        discovery_url: str,
        command_timeout_seconds: Optional[float] = None,
        http_timeout_seconds: Optional[float] = None,
    ) -> None:
        self.supervisor_command = supervisor_command
        self.discovery_url = discovery_url
        self.command_timeout_seconds = command_timeout_seconds
        self.http_timeout_seconds = http_timeout_seconds

    def supervisor_summary(self) -> str:
        cmd = shlex.split(self.supervisor_command)
        logger.debug("running %s", " ".join(cmd))
        try:
            # Exit status is ignored; the caller looks for the marker token.
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.command_timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise CommunicationError(f"command not found: {cmd[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommunicationError(
                f"timed out after {self.command_timeout_seconds}s: {self.supervisor_command}"
            ) from exc
        return result.stdout

    def agent_checks(self) -> Any:
        logger.debug("GET %s", self.discovery_url)
        try:
            with urllib.request.urlopen(self.discovery_url, timeout=self.http_timeout_seconds) as resp:
                if not 200 <= resp.status < 300:
                    raise CommunicationError(
                        f"Could not contact discovery agent! (HTTP {resp.status})"
                    )
                body = resp.read()
        except urllib.error.URLError as exc:
            raise CommunicationError(f"Could not contact discovery agent! ({exc.reason})") from exc
        except TimeoutError as exc:
            raise CommunicationError("Could not contact discovery agent! (timed out)") from exc

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as exc:
            raise CommunicationError(f"invalid JSON from {self.discovery_url}") from exc
