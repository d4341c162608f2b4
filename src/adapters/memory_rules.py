"""
In-memory rule source.

Holds an ordered list of redirect rules. Used when embedding the resolver
with rules built in code, and in tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from src.components.redirects.models import RedirectRule


class InMemoryRuleSource:
    """Implements RuleSourcePort over a plain list."""

    def __init__(self, rules: Iterable[RedirectRule] | None = None) -> None:
        self._rules: list[RedirectRule] = list(rules or [])

    def load_rules(self) -> Sequence[RedirectRule]:
        return tuple(self._rules)

    def replace(self, rules: Iterable[RedirectRule]) -> None:
        """Swap the whole rule set (takes effect on the next reload)."""
        self._rules = list(rules)

    def append(self, rule: RedirectRule) -> None:
        self._rules.append(rule)
