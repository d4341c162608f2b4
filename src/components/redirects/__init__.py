"""
Redirects component - not-found URL redirect resolution.
"""

from ._impl import RedirectHandlerService, create_redirect_handler
from ._index import IndexEntry, RedirectIndex
from ._resolver import (
    MatchResolver,
    distinct,
    html_encode,
    legacy_candidates,
    request_candidates,
)
from ._rewriter import (
    UrlRewriter,
    combine_path,
    is_absolute_url,
    merge_query_string,
    remove_protocol,
    remove_query,
    split_target,
)
from .component import run, run_contains, run_find
from .models import (
    ContainsRedirectInput,
    ContainsRedirectOutput,
    DuplicatePolicy,
    FindRedirectInput,
    FindRedirectOutput,
    RedirectRule,
    RedirectState,
    RedirectValidationError,
    RequestedUrl,
    ResolvedRedirect,
)
from .ports import ConflictSinkPort, RuleSourcePort, UrlStandardizerPort

__all__ = [
    # Entry points
    "run",
    "run_contains",
    "run_find",
    # Input models
    "ContainsRedirectInput",
    "FindRedirectInput",
    # Output models
    "ContainsRedirectOutput",
    "FindRedirectOutput",
    "RedirectValidationError",
    "ResolvedRedirect",
    # Rules
    "DuplicatePolicy",
    "RedirectRule",
    "RedirectState",
    "RequestedUrl",
    # Ports
    "ConflictSinkPort",
    "RuleSourcePort",
    "UrlStandardizerPort",
    # Core
    "IndexEntry",
    "MatchResolver",
    "RedirectIndex",
    "UrlRewriter",
    # Service
    "RedirectHandlerService",
    "create_redirect_handler",
    # Helpers
    "combine_path",
    "distinct",
    "html_encode",
    "is_absolute_url",
    "legacy_candidates",
    "merge_query_string",
    "remove_protocol",
    "remove_query",
    "request_candidates",
    "split_target",
]
