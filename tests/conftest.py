"""
tests/conftest.py — Shared fixtures and path setup for all tests.

Adds the project root to sys.path so unit tests can import without
installing the package:
    from config.settings import Settings
    from statusboard.health import StatusEntry
    from statusboard.formatting import format_entry
"""
import pathlib
import sys

import pytest

# Make project root importable without installing as a package
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import Settings  # noqa: E402


@pytest.fixture
def cfg() -> Settings:
    """Default settings with colors off so output is plain text."""
    return Settings(COLOR="never")
