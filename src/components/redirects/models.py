"""
Redirects component input/output models.

Rules are immutable once built. Resolution never edits a stored rule; it
derives a ResolvedRedirect carrying the final target instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit, urlunsplit

# --- Validation Error ---


@dataclass(frozen=True)
class RedirectValidationError:
    """Redirect validation error."""

    code: str
    message: str
    field: str | None = None


# --- Rule Model ---


class RedirectState(str, Enum):
    """Administrative state of a redirect rule."""

    SAVED = "saved"
    SUGGESTION = "suggestion"
    IGNORED = "ignored"
    DELETED = "deleted"


class DuplicatePolicy(str, Enum):
    """What the index does with a rule whose key is already registered."""

    # Duplicate stays in the ordered sequence (reachable by prefix scan only)
    KEEP_IN_SCAN = "keep_in_scan"
    # Duplicate is not stored at all
    DROP = "drop"


@dataclass(frozen=True)
class RedirectRule:
    """One configured not-found redirect."""

    old_url: str  # e.g. "/news" or "http://example.com/news"
    new_url: str  # e.g. "/press" or "//cdn.example.com/press"
    exact_match: bool = False
    append_match_to_new_url: bool = False
    include_query_string: bool = False
    state: RedirectState = RedirectState.SAVED

    def __post_init__(self) -> None:
        if self.old_url is None:
            raise TypeError("old_url is required")
        if self.new_url is None:
            raise TypeError("new_url is required")

    @property
    def is_ignored(self) -> bool:
        return self.state == RedirectState.IGNORED


@dataclass(frozen=True)
class ResolvedRedirect:
    """Final target computed for one request."""

    rule: RedirectRule
    new_url: str


# --- Requested URL ---

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class RequestedUrl:
    """
    A parsed not-found request URL.

    `absolute_uri` is None for relative requests. Scheme and host are
    lower-cased and default ports dropped; path and query are kept as sent.
    """

    original: str
    absolute_uri: str | None
    path: str
    query: str  # without the leading "?"

    @classmethod
    def parse(cls, url: str | RequestedUrl) -> RequestedUrl:
        if url is None:
            raise ValueError("requested url is required")
        if isinstance(url, RequestedUrl):
            return url
        if not url:
            raise ValueError("requested url must not be empty")

        parts = urlsplit(url)

        if parts.scheme and parts.netloc:
            scheme = parts.scheme.lower()
            host = (parts.hostname or "").lower()
            if ":" in host:
                host = f"[{host}]"
            netloc = host
            if parts.username:
                userinfo = parts.username
                if parts.password:
                    userinfo += ":" + parts.password
                netloc = f"{userinfo}@{host}"
            port = parts.port
            if port is not None and _DEFAULT_PORTS.get(scheme) != port:
                netloc += f":{port}"
            path = parts.path or "/"
            absolute = urlunsplit((scheme, netloc, path, parts.query, ""))
            return cls(original=url, absolute_uri=absolute, path=path, query=parts.query)

        path = parts.path
        if not path.startswith("/"):
            path = "/" + path
        return cls(original=url, absolute_uri=None, path=path, query=parts.query)

    @property
    def is_absolute(self) -> bool:
        return self.absolute_uri is not None

    @property
    def path_and_query(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path


# --- Input Models ---


@dataclass(frozen=True)
class FindRedirectInput:
    """Input for resolving a not-found URL."""

    url: str | None
    # Use the reduced legacy lookup (absolute URLs only)
    legacy: bool = False


@dataclass(frozen=True)
class ContainsRedirectInput:
    """Input for checking whether an old URL is registered."""

    old_url: str | None


# --- Output Models ---


@dataclass(frozen=True)
class FindRedirectOutput:
    """Output for find operation."""

    new_url: str | None
    redirect: ResolvedRedirect | None = None
    errors: list[RedirectValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContainsRedirectOutput:
    """Output for contains operation."""

    contains: bool
    errors: list[RedirectValidationError] = field(default_factory=list)
    success: bool = True
