"""
MatchResolver - finds the rule for a not-found request.

A request is tried in several spellings so that rules stored in older
formats (absolute, scheme-less, HTML-encoded) still match.

Resolution order:
1. Exact lookup of every candidate spelling, in cascade order
2. Prefix scan: for each candidate in turn, the first non-exact rule (in
   index order) whose key starts the candidate
3. An IGNORED rule reached by either step ends the search with no redirect
"""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable
from urllib.parse import unquote, unquote_plus

from ._index import RedirectIndex
from ._rewriter import UrlRewriter, remove_protocol, remove_query
from .models import RedirectRule, RequestedUrl, ResolvedRedirect

logger = logging.getLogger(__name__)


def html_encode(value: str) -> str:
    """HTML-entity encode the way legacy rows were stored."""
    return html.escape(value, quote=True).replace("&#x27;", "&#39;")


def distinct(candidates: Iterable[str]) -> list[str]:
    """Drop case-insensitive repeats, keeping first occurrences in order."""
    seen: set[str] = set()
    result: list[str] = []
    for candidate in candidates:
        folded = candidate.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        result.append(candidate)
    return result


def request_candidates(requested: RequestedUrl) -> list[str]:
    """All spellings of a request, most specific first."""
    urls: list[str] = []

    if requested.absolute_uri is not None:
        absolute = requested.absolute_uri
        urls += [
            absolute,
            remove_protocol(absolute),
            remove_query(absolute),
            remove_protocol(remove_query(absolute)),
        ]

    path_and_query = requested.path_and_query
    urls += [
        path_and_query,
        remove_query(path_and_query),
        # Legacy databases with encoded values
        html_encode(path_and_query),
        html_encode(remove_query(path_and_query)),
    ]
    return distinct(urls)


def legacy_candidates(requested: RequestedUrl) -> list[str]:
    """Reduced spellings used by the legacy lookup (absolute requests only)."""
    if requested.absolute_uri is None:
        return []
    return distinct(
        [
            unquote(requested.path_and_query),
            requested.path,
            unquote_plus(requested.absolute_uri),
            unquote_plus(remove_query(requested.absolute_uri)),
        ]
    )


class MatchResolver:
    """
    Resolves request URLs against a published RedirectIndex.

    Stateless apart from the index it reads, so one resolver can serve
    concurrent requests.
    """

    def __init__(self, index: RedirectIndex, rewriter: UrlRewriter | None = None) -> None:
        if index is None:
            raise ValueError("index is required")
        self._index = index
        self._rewriter = rewriter or UrlRewriter()

    @property
    def index(self) -> RedirectIndex:
        return self._index

    def find(self, requested_url: str | RequestedUrl) -> RedirectRule | None:
        """Matching rule for the request, or None."""
        requested = RequestedUrl.parse(requested_url)
        return self._search(request_candidates(requested))

    def find_old(self, requested_url: str | RequestedUrl) -> RedirectRule | None:
        """Legacy lookup: absolute URLs only, reduced candidate list."""
        requested = RequestedUrl.parse(requested_url)
        return self._search(legacy_candidates(requested))

    def resolve(
        self,
        requested_url: str | RequestedUrl,
        *,
        legacy: bool = False,
    ) -> ResolvedRedirect | None:
        """Matching rule plus the rewritten target URL, or None."""
        requested = RequestedUrl.parse(requested_url)
        rule = self.find_old(requested) if legacy else self.find(requested)
        if rule is None:
            return None

        new_url = self._rewriter.build(rule, requested)
        logger.debug("Redirecting %s to %s", requested.original, new_url)
        return ResolvedRedirect(rule=rule, new_url=new_url)

    def _search(self, candidates: list[str]) -> RedirectRule | None:
        rule = self._exact(candidates) or self._prefix(candidates)
        if rule is None:
            return None
        if rule.is_ignored:
            logger.debug("Redirect for %s is ignored", rule.old_url)
            return None
        return rule

    def _exact(self, candidates: list[str]) -> RedirectRule | None:
        for candidate in candidates:
            rule = self._index.lookup(candidate)
            if rule is not None:
                logger.debug("Exact redirect match on %s", candidate)
                return rule
        return None

    def _prefix(self, candidates: list[str]) -> RedirectRule | None:
        # No exact match could be made, so check whether the request starts
        # with one of the configured old urls. With append_match_to_new_url
        # the rest of the request is carried over to the new url.
        for candidate in candidates:
            folded = candidate.casefold()
            for entry in self._index.prefix_entries():
                if entry.folded is not None and folded.startswith(entry.folded):
                    logger.debug("Prefix redirect match on %s for %s", entry.key, candidate)
                    return entry.rule
        return None
