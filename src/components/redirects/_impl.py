"""
RedirectHandlerService - the long-lived, reloadable redirect resolver.

Owns the currently published RedirectIndex. Reloads build a complete new
index off to the side and publish it with one reference assignment, so a
request sees either the old rule set or the new one, never a mix.

Key behaviors:
- Readers never take a lock; writers are serialized
- Settings choose the standardizer and the duplicate policy
- Disabled settings turn every lookup into "no redirect"
- find() is the caller contract: final url or None
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ._index import RedirectIndex
from ._resolver import MatchResolver
from ._rewriter import UrlRewriter
from .models import RedirectRule, RequestedUrl, ResolvedRedirect
from .ports import ConflictSinkPort, RuleSourcePort, UrlStandardizerPort

if TYPE_CHECKING:
    from src.rules.models import RedirectSettings

logger = logging.getLogger(__name__)


class RedirectHandlerService:
    """
    Not-found redirect service.

    Resolves requests against the published index and swaps in new
    indexes on reload.
    """

    def __init__(
        self,
        source: RuleSourcePort | None = None,
        standardizer: UrlStandardizerPort | None = None,
        conflict_sink: ConflictSinkPort | None = None,
        settings: RedirectSettings | None = None,
        rewriter: UrlRewriter | None = None,
    ) -> None:
        """Initialize service with an empty index; call reload() to populate."""
        if settings is None:
            from src.rules.models import RedirectSettings

            settings = RedirectSettings()
        if standardizer is None:
            from src.adapters.url_standardizers import build_standardizer

            standardizer = build_standardizer(settings.standardizer)
        if conflict_sink is None:
            from src.adapters.log_conflicts import LoggingConflictSink

            conflict_sink = LoggingConflictSink()

        self._source = source
        self._standardizer = standardizer
        self._conflict_sink = conflict_sink
        self._settings = settings
        self._rewriter = rewriter or UrlRewriter()
        self._reload_lock = threading.Lock()
        self._resolver = MatchResolver(self.build_index(()), rewriter=self._rewriter)

    @property
    def settings(self) -> RedirectSettings:
        return self._settings

    @property
    def conflict_sink(self) -> ConflictSinkPort:
        return self._conflict_sink

    @property
    def index(self) -> RedirectIndex:
        """The currently published index."""
        return self._resolver.index

    def build_index(self, rules: Iterable[RedirectRule]) -> RedirectIndex:
        """Build an unpublished index with this service's configuration."""
        return RedirectIndex.from_rules(
            rules,
            standardizer=self._standardizer,
            conflict_sink=self._conflict_sink,
            duplicate_policy=self._settings.duplicate_policy,
        )

    def publish(self, index: RedirectIndex) -> None:
        """Make index the one every new request reads."""
        if index is None:
            raise ValueError("index is required")
        # Single assignment: concurrent readers keep whichever resolver
        # they already fetched.
        self._resolver = MatchResolver(index, rewriter=self._rewriter)

    def reload(self, source: RuleSourcePort | None = None) -> int:
        """
        Rebuild the index from the rule source and publish it.

        Returns:
            Number of rules in the new index.
        """
        if source is None:
            source = self._source
        if source is None:
            raise ValueError("No rule source configured")

        with self._reload_lock:
            index = self.build_index(source.load_rules())
            self.publish(index)
            if source is not self._source:
                self._source = source

        logger.info("Loaded %d redirects", len(index))
        return len(index)

    def resolve(
        self,
        requested_url: str | RequestedUrl,
        *,
        legacy: bool | None = None,
    ) -> ResolvedRedirect | None:
        """Matching rule and final target for a not-found request."""
        if requested_url is None:
            raise ValueError("requested url is required")
        if not self._settings.enabled:
            return None
        if legacy is None:
            legacy = self._settings.legacy_lookup
        resolver = self._resolver
        return resolver.resolve(requested_url, legacy=legacy)

    def find(self, requested_url: str | RequestedUrl) -> str | None:
        """Final redirect url for a not-found request, or None."""
        resolved = self.resolve(requested_url)
        return resolved.new_url if resolved is not None else None

    def find_old(self, requested_url: str | RequestedUrl) -> str | None:
        """Final redirect url using the legacy lookup, or None."""
        resolved = self.resolve(requested_url, legacy=True)
        return resolved.new_url if resolved is not None else None

    def contains(self, old_url: str) -> bool:
        return self.index.contains(old_url)


# --- Factory ---


def create_redirect_handler(
    source: RuleSourcePort | None = None,
    settings: RedirectSettings | None = None,
    conflict_sink: ConflictSinkPort | None = None,
) -> RedirectHandlerService:
    """Create a RedirectHandlerService and load its rules if a source is given."""
    service = RedirectHandlerService(
        source=source,
        conflict_sink=conflict_sink,
        settings=settings,
    )
    if source is not None:
        service.reload()
    return service

