"""
config/settings.py — Configuration contract for statusboard.

Uses pydantic-settings to load, validate, and type-check every knob the
dashboard reads: thresholds, column geometry, the supervisor command, the
discovery agent URL, color and log level.

Two usage modes:
  Production / CLI:
      cfg = load_settings()              # reads from .env + os.environ
      cfg = load_settings("prod.env")    # override env file path

  Tests (isolated — no env file, no os.environ bleed):
      cfg = Settings(PERCENT_GOOD_MAX=70, COLOR="never")
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re
from typing import Literal, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from statusboard.health import Thresholds


class Settings(BaseSettings):
    # Settings() reads purely from kwargs. load_settings() is the explicit
    # entry point that merges the env file with os.environ.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    # -------------------------------------------------------------------------
    # System Info section
    # -------------------------------------------------------------------------
    ENVIRONMENT: str = "develop"
    DISK_MOUNTS: list[str] = ["/", "/mnt"]

    # -------------------------------------------------------------------------
    # Thresholds (inclusive upper bounds)
    # -------------------------------------------------------------------------
    PERCENT_GOOD_MAX: float = 80.0
    PERCENT_WARNING_MAX: float = 95.0
    LOAD_GOOD_MAX: float = 0.8
    LOAD_WARNING_MAX: float = 0.95

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------
    MAX_WIDTH: int = 80
    MAX_WORD_LENGTH: int = 26
    COLOR: Literal["auto", "always", "never"] = "auto"

    # -------------------------------------------------------------------------
    # Supervisor (Monit)
    # -------------------------------------------------------------------------
    SUPERVISOR_COMMAND: str = "monit summary"
    SUPERVISOR_MARKER: str = "uptime"

    # -------------------------------------------------------------------------
    # Discovery agent (Consul)
    # -------------------------------------------------------------------------
    DISCOVERY_URL: str = "http://localhost:8500/v1/agent/checks"

    # -------------------------------------------------------------------------
    # External calls (unset: block until the OS call returns)
    # -------------------------------------------------------------------------
    HEALTH_COMMAND_TIMEOUT_SECONDS: Optional[float] = None
    HEALTH_HTTP_TIMEOUT_SECONDS: Optional[float] = None

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # -------------------------------------------------------------------------
    # Convenience properties
    # -------------------------------------------------------------------------

    @property
    def single_column_width(self) -> int:
        """Width of one of the two report columns."""
        return (self.MAX_WIDTH // 2) - 3

    @property
    def percent_thresholds(self) -> Thresholds:
        return Thresholds(self.PERCENT_GOOD_MAX, self.PERCENT_WARNING_MAX)

    @property
    def load_thresholds(self) -> Thresholds:
        return Thresholds(self.LOAD_GOOD_MAX, self.LOAD_WARNING_MAX)

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("COLOR", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace left by hand-edited env files."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("DISK_MOUNTS", mode="before")
    @classmethod
    def split_mounts(cls, v: object) -> object:
        """Accept "/,/mnt" from the environment as well as a real list."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("DISK_MOUNTS")
    @classmethod
    def mounts_are_absolute(cls, v: list[str]) -> list[str]:
        for mount in v:
            if not mount.startswith("/"):
                raise ValueError(f"mount point must be an absolute path, got '{mount}'")
        return v

    @field_validator("HEALTH_COMMAND_TIMEOUT_SECONDS", "HEALTH_HTTP_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def blank_timeout_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_layout_and_thresholds(self) -> Settings:
        """Enforce ordering between threshold pairs and sane column geometry."""
        if self.PERCENT_GOOD_MAX > self.PERCENT_WARNING_MAX:
            raise ValueError(
                f"PERCENT_GOOD_MAX ({self.PERCENT_GOOD_MAX}) must not exceed "
                f"PERCENT_WARNING_MAX ({self.PERCENT_WARNING_MAX})"
            )
        if self.LOAD_GOOD_MAX > self.LOAD_WARNING_MAX:
            raise ValueError(
                f"LOAD_GOOD_MAX ({self.LOAD_GOOD_MAX}) must not exceed "
                f"LOAD_WARNING_MAX ({self.LOAD_WARNING_MAX})"
            )
        if self.MAX_WORD_LENGTH < 2:
            raise ValueError("MAX_WORD_LENGTH must be >= 2")
        if self.single_column_width < 4:
            raise ValueError(f"MAX_WIDTH={self.MAX_WIDTH} is too narrow for two columns")
        for name in ("HEALTH_COMMAND_TIMEOUT_SECONDS", "HEALTH_HTTP_TIMEOUT_SECONDS"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0 when set")
        return self


def load_settings(env_file: str = ".env") -> Settings:
    """Load and validate settings from an env file + os.environ.

    Parses the env file by hand and merges it with os.environ (os.environ
    wins), then passes only known Settings fields as explicit kwargs. The
    pydantic-settings env and dotenv sources are disabled so that Settings()
    stays a pure validation contract.

    A missing env file is not an error; every field has a default.

    Raises:
        ValidationError: if a value has the wrong type or violates a rule
            (e.g. PERCENT_GOOD_MAX above PERCENT_WARNING_MAX).
    """
    file_vals: dict[str, str] = {}
    try:
        with open(env_file, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                k, _, v = line.partition("=")
                k = k.strip()
                # Strip inline comments: "never   # auto | always | never" → "never"
                v = re.sub(r"\s+#.*$", "", v.strip())
                if k:
                    file_vals[k] = v
    except FileNotFoundError:
        pass
    merged = {**file_vals, **os.environ}  # os.environ wins
    known = {k: v for k, v in merged.items() if k in Settings.model_fields}
    return Settings(**known)
