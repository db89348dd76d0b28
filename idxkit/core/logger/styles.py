"""
Logging style constants for consistent visual hierarchy.

Shared formatting symbols and separators used by the fetch, decode and CLI
status lines.
"""

from __future__ import annotations

import logging


class LogStyle:
    """Unified logging style constants for consistent visual hierarchy."""

    HEADER_WIDTH = 72

    # Phase headers
    HEAVY = "━" * HEADER_WIDTH

    # Status line symbols
    ARROW = "»"
    WARNING = "⚠"
    SUCCESS = "✓"

    INDENT = "  "

    # ANSI Colors (applied by ColorFormatter to console output only)
    RESET = "\033[0m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"

    @staticmethod
    def status_line(label: str, value: object, symbol: str | None = None) -> str:
        """Format an indented ``» Label : value`` status line."""
        mark = symbol if symbol is not None else LogStyle.ARROW
        return f"{LogStyle.INDENT}{mark} {label:<18}: {value}"

    @staticmethod
    def log_phase_header(
        log: logging.Logger,
        title: str,
        style: str | None = None,
    ) -> None:
        """
        Log a centered phase header with separator lines.

        Args:
            log: Logger instance to write to.
            title: Header text (centered).
            style: Separator string (defaults to ``LogStyle.HEAVY``).
        """
        sep = style if style is not None else LogStyle.HEAVY
        log.info(sep)
        log.info(f"{title:^{LogStyle.HEADER_WIDTH}}")
        log.info(sep)
