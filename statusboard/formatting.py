"""
Terminal rendering for the dashboard — ANSI colors, fixed-width columns.

A row holds two entries side by side:

    Load (1 min) ··················· 0.42 | Usage of / ···················· 42%

Each entry is the label, a middle-dot filler and the right-aligned value,
colored by severity.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from statusboard.health import Severity, StatusEntry

if TYPE_CHECKING:
    from config.settings import Settings


# ── ANSI escape codes ────────────────────────────────────────────────

class Ansi:
    RESET = "\033[0m"
    BOLD = "1"
    UNDERLINE = "4"
    BLACK = "30"
    RED = "31"
    GREEN = "32"
    YELLOW = "33"
    WHITE = "37"
    BG_RED = "41"
    BG_DEFAULT = "49"


_ANSI_RE = re.compile(r"\033\[[0-9;]*m")


@dataclass(frozen=True)
class Theme:
    check_mark: str = "✓"
    warning_mark: str = "⚠"
    x_mark: str = "✗"
    spacer: str = "·"
    truncator: str = "…"
    separator: str = " | "
    # severity → (foreground, background)
    colors: dict[Severity, tuple[str, str]] = field(
        default_factory=lambda: {
            Severity.GOOD: (Ansi.GREEN, Ansi.BG_DEFAULT),
            Severity.WARNING: (Ansi.YELLOW, Ansi.BG_DEFAULT),
            Severity.BAD: (Ansi.BLACK, Ansi.BG_RED),
        }
    )

    def glyph(self, severity: Severity) -> str:
        return {
            Severity.GOOD: self.check_mark,
            Severity.WARNING: self.warning_mark,
            Severity.BAD: self.x_mark,
        }[severity]


DEFAULT_THEME = Theme()


# ── Helpers ──────────────────────────────────────────────────────────

def colorize(text: str, *codes: str, enabled: bool = True) -> str:
    if not enabled or not codes:
        return text
    return f"\033[{';'.join(codes)}m{text}{Ansi.RESET}"


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def truncate(text: object, length: int, truncator: str = DEFAULT_THEME.truncator) -> str:
    """Strip newlines and cut *text* to at most *length* characters."""
    s = str(text).replace("\n", "")
    if len(s) <= length:
        return s
    return f"{s[:length - len(truncator)]}{truncator}"


# ── Columns ──────────────────────────────────────────────────────────

def format_entry(
    label: str,
    severity: Severity,
    value: Optional[str] = None,
    *,
    width: int = 37,
    max_word_length: int = 26,
    theme: Theme = DEFAULT_THEME,
    color: bool = True,
) -> str:
    if value is None:
        value = theme.glyph(severity)

    label = truncate(label, max_word_length, theme.truncator)
    value = truncate(value, max_word_length, theme.truncator)

    spacers = width - (len(label) + len(value)) - 1
    spacers = max(spacers, 1)

    fg, bg = theme.colors[severity]
    return f"{label} {theme.spacer * spacers} {colorize(value, fg, bg, enabled=color)}"


def combine_columns(left: str, right: Optional[str] = None, theme: Theme = DEFAULT_THEME) -> str:
    if right is None:
        return left
    return f"{left}{theme.separator}{right}"


def render_section(
    title: str,
    entries: Iterable[StatusEntry],
    cfg: Settings,
    *,
    color: bool = True,
    theme: Theme = DEFAULT_THEME,
) -> list[str]:
    """Title, the entries two per row, then a blank line."""
    cells = [
        format_entry(
            e.label,
            e.severity,
            e.value,
            width=cfg.single_column_width,
            max_word_length=cfg.MAX_WORD_LENGTH,
            theme=theme,
            color=color,
        )
        for e in entries
    ]
    lines = [colorize(title, Ansi.WHITE, Ansi.BOLD, Ansi.UNDERLINE, enabled=color)]
    for i in range(0, len(cells), 2):
        right = cells[i + 1] if i + 1 < len(cells) else None
        lines.append(combine_columns(cells[i], right, theme))
    lines.append("")
    return lines


def render_error(prefix: str, error: Exception, *, color: bool = True) -> list[str]:
    return [colorize(f"{prefix}: {error}", Ansi.RED, Ansi.UNDERLINE, enabled=color), ""]
