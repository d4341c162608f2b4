"""
RedirectIndex - ordered rule sequence plus case-insensitive key lookup.

Both views are updated together by every mutating operation. Keys are
`standardize(old_url)`, folded for comparison so lookups stay
case-insensitive whatever standardizer is injected.

Key behaviors:
- First rule registered for a key owns the exact lookup
- Duplicates are reported to the conflict sink, never raised
- Under DuplicatePolicy.KEEP_IN_SCAN a duplicate still sits in the ordered
  sequence and is reachable by the prefix scan (legacy behavior)
- Under DuplicatePolicy.DROP a duplicate is not stored at all

An index is built once and then published; it is not mutated while
requests are reading it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import NamedTuple

from .models import DuplicatePolicy, RedirectRule
from .ports import ConflictSinkPort, UrlStandardizerPort


class IndexEntry(NamedTuple):
    """A rule with its precomputed lookup key."""

    key: str | None
    folded: str | None
    rule: RedirectRule


class RedirectIndex:
    """Insertion-ordered redirect rules with a case-insensitive key map."""

    def __init__(
        self,
        standardizer: UrlStandardizerPort | None = None,
        conflict_sink: ConflictSinkPort | None = None,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP_IN_SCAN,
    ) -> None:
        if standardizer is None:
            from src.adapters.url_standardizers import DefaultUrlStandardizer

            standardizer = DefaultUrlStandardizer()
        if conflict_sink is None:
            from src.adapters.log_conflicts import LoggingConflictSink

            conflict_sink = LoggingConflictSink()

        self._standardizer = standardizer
        self._conflict_sink = conflict_sink
        self._duplicate_policy = duplicate_policy
        self._entries: list[IndexEntry] = []
        self._lookup: dict[str, RedirectRule] = {}

    @classmethod
    def from_rules(
        cls,
        rules: Iterable[RedirectRule],
        standardizer: UrlStandardizerPort | None = None,
        conflict_sink: ConflictSinkPort | None = None,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP_IN_SCAN,
    ) -> RedirectIndex:
        """Build a complete index in one pass."""
        index = cls(
            standardizer=standardizer,
            conflict_sink=conflict_sink,
            duplicate_policy=duplicate_policy,
        )
        for rule in rules:
            index.add(rule)
        return index

    # --- Keys ---

    @property
    def standardizer(self) -> UrlStandardizerPort:
        return self._standardizer

    @property
    def duplicate_policy(self) -> DuplicatePolicy:
        return self._duplicate_policy

    def key_for(self, url: str | None) -> str | None:
        """Lookup key for url, as produced by the standardizer."""
        return self._standardizer.standardize(url)

    def _fold(self, url: str | None) -> str | None:
        key = self.key_for(url)
        return key.casefold() if key is not None else None

    def _entry(self, rule: RedirectRule) -> IndexEntry:
        if rule is None:
            raise ValueError("rule is required")
        key = self.key_for(rule.old_url)
        return IndexEntry(key=key, folded=key.casefold() if key is not None else None, rule=rule)

    def _register(self, entry: IndexEntry) -> bool:
        """Map entry's key to its rule. Returns False for a duplicate key."""
        if entry.folded is None:
            return False
        existing = self._lookup.get(entry.folded)
        if existing is None:
            self._lookup[entry.folded] = entry.rule
            return True
        self._conflict_sink.duplicate_redirect(existing, entry.rule)
        return False

    def _unregister(self, entry: IndexEntry) -> None:
        """Drop entry's mapping and promote the next rule sharing its key."""
        if entry.folded is None or self._lookup.get(entry.folded) is not entry.rule:
            return
        del self._lookup[entry.folded]
        for other in self._entries:
            if other.folded == entry.folded:
                self._lookup[entry.folded] = other.rule
                break

    # --- Mutation ---

    def add(self, rule: RedirectRule) -> int:
        """
        Register rule and append it to the ordered sequence.

        Returns the rule's position, or -1 when a duplicate was dropped.
        """
        entry = self._entry(rule)
        registered = self._register(entry)
        if not registered and self._duplicate_policy == DuplicatePolicy.DROP:
            return -1
        self._entries.append(entry)
        return len(self._entries) - 1

    def insert(self, index: int, rule: RedirectRule) -> None:
        """Register rule and place it at a specific position."""
        entry = self._entry(rule)
        registered = self._register(entry)
        if not registered and self._duplicate_policy == DuplicatePolicy.DROP:
            return
        self._entries.insert(index, entry)

    def remove(self, rule: RedirectRule) -> None:
        """Remove rule from both views. Raises ValueError if absent."""
        if rule is None:
            raise ValueError("rule is required")
        for position, entry in enumerate(self._entries):
            if entry.rule == rule:
                del self._entries[position]
                self._unregister(entry)
                return
        raise ValueError(f"Redirect not in index: {rule.old_url}")

    def set(self, index: int, rule: RedirectRule) -> None:
        """
        Replace the rule at a position.

        A key owned by another rule is reported as a duplicate. Under
        DuplicatePolicy.DROP the slot is then left unchanged.
        """
        entry = self._entry(rule)
        old = self._entries[index]
        existing = self._lookup.get(entry.folded) if entry.folded is not None else None
        if existing is not None and existing is not old.rule:
            self._conflict_sink.duplicate_redirect(existing, entry.rule)
            if self._duplicate_policy == DuplicatePolicy.DROP:
                return

        self._entries[index] = entry
        if existing is not None and existing is old.rule:
            self._lookup[entry.folded] = entry.rule  # type: ignore[index]
            return
        self._unregister(old)
        if entry.folded is not None:
            self._lookup.setdefault(entry.folded, entry.rule)

    def clear(self) -> None:
        self._entries.clear()
        self._lookup.clear()

    # --- Queries ---

    def get(self, index: int) -> RedirectRule:
        return self._entries[index].rule

    def contains(self, old_url: str | None) -> bool:
        """True when old_url's key is registered."""
        folded = self._fold(old_url)
        return folded is not None and folded in self._lookup

    def lookup(self, url: str | None) -> RedirectRule | None:
        """Exact (standardized, case-insensitive) lookup."""
        folded = self._fold(url)
        if folded is None:
            return None
        return self._lookup.get(folded)

    def prefix_entries(self) -> Iterator[IndexEntry]:
        """Entries eligible for prefix matching, in sequence order."""
        for entry in self._entries:
            if entry.rule.exact_match or entry.folded is None:
                continue
            yield entry

    def __getitem__(self, index: int) -> RedirectRule:
        return self.get(index)

    def __setitem__(self, index: int, rule: RedirectRule) -> None:
        self.set(index, rule)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RedirectRule]:
        return (entry.rule for entry in self._entries)

    def __repr__(self) -> str:
        return f"RedirectIndex(rules={len(self._entries)}, keys={len(self._lookup)})"
