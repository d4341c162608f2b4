"""
Redirects component port definitions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .models import RedirectRule


class UrlStandardizerPort(Protocol):
    """Canonicalizes a URL before it is used as a lookup key."""

    def standardize(self, url: str | None) -> str | None:
        """Return the comparison form of url (None stays None)."""
        ...


class ConflictSinkPort(Protocol):
    """Receives diagnostics raised while building an index."""

    def duplicate_redirect(self, existing: RedirectRule, duplicate: RedirectRule) -> None:
        """Called when a rule's key is already registered."""
        ...


class RuleSourcePort(Protocol):
    """Supplies the configured rules, in order, at load or reload time."""

    def load_rules(self) -> Sequence[RedirectRule]:
        """Return all configured redirect rules."""
        ...
