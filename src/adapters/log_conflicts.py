"""
Logging conflict sink.

Writes duplicate-key diagnostics from the redirect index to the standard
logger and keeps them in memory so callers (and tests) can inspect what
was skipped during the last build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.components.redirects.models import RedirectRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicateRecord:
    """A rule that collided with an already registered key."""

    existing: RedirectRule
    duplicate: RedirectRule


@dataclass
class LoggingConflictSink:
    """Implements ConflictSinkPort by logging a warning per duplicate."""

    duplicates: list[DuplicateRecord] = field(default_factory=list)
    log_level: int = logging.WARNING

    def duplicate_redirect(self, existing: RedirectRule, duplicate: RedirectRule) -> None:
        self.duplicates.append(DuplicateRecord(existing=existing, duplicate=duplicate))
        logger.log(
            self.log_level,
            "Two or more redirects set up for Old Url: %s",
            duplicate.old_url,
        )

    def clear(self) -> None:
        self.duplicates.clear()
