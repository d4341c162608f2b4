"""
Redirects component - not-found URL redirect resolution.

Resolves a request that produced a 404 to the target of the best matching
configured redirect.

Invariants:
- I1: Exact matches win over prefix matches
- I2: A matched IGNORED rule means no redirect
- I3: Lookups are case-insensitive
- I4: The first rule registered for an old url owns its exact lookup
- I5: Resolution never modifies a stored rule
"""

from __future__ import annotations

from ._index import RedirectIndex
from ._resolver import MatchResolver
from ._rewriter import UrlRewriter
from .models import (
    ContainsRedirectInput,
    ContainsRedirectOutput,
    FindRedirectInput,
    FindRedirectOutput,
    RedirectValidationError,
)


def _invalid(code: str, message: str, field: str) -> list[RedirectValidationError]:
    return [RedirectValidationError(code=code, message=message, field=field)]


# --- Component Entry Points ---


def run_find(
    inp: FindRedirectInput,
    *,
    index: RedirectIndex,
    rewriter: UrlRewriter | None = None,
) -> FindRedirectOutput:
    """
    Resolve a not-found url to its redirect target.

    Args:
        inp: Input containing the requested url.
        index: Published redirect index to search.
        rewriter: Optional rewriter override.

    Returns:
        FindRedirectOutput with the new url, or new_url=None when no
        redirect applies.
    """
    if not inp.url:
        return FindRedirectOutput(
            new_url=None,
            errors=_invalid("url_required", "Requested url is required", "url"),
            success=False,
        )

    resolver = MatchResolver(index, rewriter=rewriter)
    try:
        resolved = resolver.resolve(inp.url, legacy=inp.legacy)
    except ValueError as e:
        return FindRedirectOutput(
            new_url=None,
            errors=_invalid("invalid_url", str(e), "url"),
            success=False,
        )

    if resolved is None:
        return FindRedirectOutput(new_url=None)

    return FindRedirectOutput(new_url=resolved.new_url, redirect=resolved)


def run_contains(
    inp: ContainsRedirectInput,
    *,
    index: RedirectIndex,
) -> ContainsRedirectOutput:
    """
    Check whether an old url is registered.

    Args:
        inp: Input containing the old url.
        index: Redirect index to check.

    Returns:
        ContainsRedirectOutput with the membership flag.
    """
    if inp.old_url is None:
        return ContainsRedirectOutput(
            contains=False,
            errors=_invalid("old_url_required", "Old url is required", "old_url"),
            success=False,
        )

    return ContainsRedirectOutput(contains=index.contains(inp.old_url))


def run(
    inp: FindRedirectInput | ContainsRedirectInput,
    *,
    index: RedirectIndex,
    rewriter: UrlRewriter | None = None,
) -> FindRedirectOutput | ContainsRedirectOutput:
    """
    Main entry point for the redirects component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, FindRedirectInput):
        return run_find(inp, index=index, rewriter=rewriter)
    elif isinstance(inp, ContainsRedirectInput):
        return run_contains(inp, index=index)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
