"""
UrlRewriter - computes the final target URL for a matched rule.

Key behaviors:
- append_match_to_new_url: the part of the request beyond the rule's old
  URL is appended to the target, with exactly one "/" at the join
- An empty or "/" tail leaves the target untouched
- The target's own query string survives the append
- include_query_string: request parameters are added to the target unless
  the target already carries the same key (target always wins)
- Absolute targets are recognised only by "//", "http://" or "https://"

The stored rule is never modified; callers get a fresh string.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .models import RedirectRule, RequestedUrl

_ABSOLUTE_PREFIXES = ("//", "http://", "https://")


def is_absolute_url(url: str) -> bool:
    """
    Heuristic absolute-URL check.

    Only protocol-relative and http(s) URLs count; "ftp://x" and
    "mailto:x" are treated as relative paths.
    """
    if url is None:
        raise ValueError("url is required")
    return url.lower().startswith(_ABSOLUTE_PREFIXES)


def remove_query(url: str) -> str:
    """Everything before the first "?"."""
    if url is None:
        raise ValueError("url is required")
    return url.split("?", 1)[0]


def remove_protocol(url: str) -> str:
    """Strip a leading "http:" or "https:" so only "//host/..." remains."""
    if url is None:
        raise ValueError("url is required")
    for scheme in ("http:", "https:"):
        if url.startswith(scheme):
            return url[len(scheme) :]
    return url


def split_target(url: str) -> tuple[str, str]:
    """Split a target URL into (url without query, query)."""
    if is_absolute_url(url):
        parts = urlsplit(url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", "")), parts.query
    base, _, query = url.partition("?")
    return base, query


def combine_path(base: str, tail: str) -> str:
    """Join two path segments with exactly one "/" between them."""
    return base.rstrip("/") + "/" + tail.lstrip("/")


def merge_query_string(url: str, query: str) -> str:
    """
    Add request parameters to url.

    Keys already present on url (compared case-insensitively) are left as
    they are; the remaining request parameters are appended re-encoded.
    """
    query = query[1:] if query.startswith("?") else query
    if not query:
        return url

    _, separator, target_query = url.partition("?")
    target_keys = {key.casefold() for key, _ in parse_qsl(target_query, keep_blank_values=True)}

    additions = [
        (key, value)
        for key, value in parse_qsl(query, keep_blank_values=True)
        if key.casefold() not in target_keys
    ]
    if not additions:
        return url

    appended = urlencode(additions)
    if not separator:
        return f"{url}?{appended}"
    if url.endswith(("?", "&")):
        return url + appended
    return f"{url}&{appended}"


class UrlRewriter:
    """Builds the redirect target for a rule and the request it matched."""

    def build(self, rule: RedirectRule, requested_url: str | RequestedUrl) -> str:
        if rule is None:
            raise ValueError("rule is required")
        requested = RequestedUrl.parse(requested_url)

        new_url = rule.new_url
        if rule.append_match_to_new_url:
            new_url = self.append_match(rule, requested)

        if rule.include_query_string and requested.query:
            new_url = merge_query_string(new_url, requested.query)

        return new_url

    def append_match(self, rule: RedirectRule, requested: RequestedUrl) -> str:
        tail = self.tail_for(rule, requested)
        if not tail or tail == "/":
            return rule.new_url

        base, query = split_target(rule.new_url)
        combined = combine_path(base, tail)
        return f"{combined}?{query}" if query else combined

    def tail_for(self, rule: RedirectRule, requested: RequestedUrl) -> str:
        """
        The part of the request not covered by the rule's old URL.

        Measured against the request path, or against the request's absolute
        URL (without query) when the old URL is itself absolute.
        """
        subject = self._match_subject(rule, requested)
        old_url = rule.old_url
        folded = subject.casefold()

        # "/news/" configured, "/news" requested: nothing left to append
        for prefix in (old_url, old_url.rstrip("/")):
            if folded.startswith(prefix.casefold()):
                return subject[len(prefix) :]

        if len(subject) < len(old_url):
            return requested.path
        return subject[len(old_url) :]

    def _match_subject(self, rule: RedirectRule, requested: RequestedUrl) -> str:
        if requested.absolute_uri is not None and is_absolute_url(rule.old_url):
            subject = remove_query(requested.absolute_uri)
            if rule.old_url.startswith("//"):
                subject = remove_protocol(subject)
            return subject
        return requested.path
