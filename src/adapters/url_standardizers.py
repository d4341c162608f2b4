"""
URL standardizer adapters.

Pluggable policies for turning a URL into its lookup-key form. The
redirect index receives one of these explicitly; nothing looks them up
globally.
"""

from __future__ import annotations


class DefaultUrlStandardizer:
    """Lower-case, and drop trailing slashes from URLs without a query."""

    def standardize(self, url: str | None) -> str | None:
        if url is None:
            return None
        if url.endswith("/") and "?" not in url:
            url = url.rstrip("/")
        return url.lower()


class LowercaseUrlStandardizer:
    """Lower-case only."""

    def standardize(self, url: str | None) -> str | None:
        return url.lower() if url is not None else None


class IdentityUrlStandardizer:
    def standardize(self, url: str | None) -> str | None:
        return url


STANDARDIZERS = {
    "default": DefaultUrlStandardizer,
    "lowercase": LowercaseUrlStandardizer,
    "identity": IdentityUrlStandardizer,
}


def build_standardizer(
    name: str,
) -> DefaultUrlStandardizer | LowercaseUrlStandardizer | IdentityUrlStandardizer:
    """Create the standardizer registered under name."""
    try:
        factory = STANDARDIZERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown URL standardizer: {name!r} (expected one of {sorted(STANDARDIZERS)})"
        ) from None
    return factory()


# Default adapter instance
default_standardizer = DefaultUrlStandardizer()
