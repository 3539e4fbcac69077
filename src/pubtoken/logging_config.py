"""Logging configuration setup."""

from __future__ import annotations

import logging
import re
from typing import Set

from rich.console import Console
from rich.logging import RichHandler

# ── Secret redaction filter ──────────────────────────────────────────────

_REDACTED = "***REDACTED***"


class SecretRedactionFilter(logging.Filter):
    """Logging filter that replaces resolved token values with a placeholder.

    The resolver registers every token it hands out; any log record that
    would contain one is scrubbed before it reaches a handler.
    """

    def __init__(self) -> None:
        super().__init__()
        self._secrets: Set[str] = set()
        self._pattern: re.Pattern[str] | None = None

    def register(self, value: str) -> None:
        """Register a secret value for redaction."""
        if value and len(value) >= 4:  # skip trivially short values
            self._secrets.add(value)
            # Longest first so overlapping secrets are fully masked
            escaped = sorted((re.escape(s) for s in self._secrets), key=len, reverse=True)
            self._pattern = re.compile("|".join(escaped))

    def clear(self) -> None:
        self._secrets.clear()
        self._pattern = None

    def filter(self, record: logging.LogRecord) -> bool:
        if self._pattern is None:
            return True
        if isinstance(record.msg, str):
            record.msg = self._pattern.sub(_REDACTED, record.msg)
        if isinstance(record.args, dict):
            record.args = {
                k: self._pattern.sub(_REDACTED, v) if isinstance(v, str) else v
                for k, v in record.args.items()
            }
        elif isinstance(record.args, tuple):
            record.args = tuple(
                self._pattern.sub(_REDACTED, a) if isinstance(a, str) else a
                for a in record.args
            )
        return True


# Module-level singleton so the resolver can register values at resolve time.
secret_redaction_filter = SecretRedactionFilter()


def setup_logging(verbose: bool = False, quiet: bool = False) -> int:
    """Send pubtoken logs to stderr through rich.  Returns the level applied."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        show_time=verbose,
        markup=False,
    )
    handler.addFilter(secret_redaction_filter)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    return level
