from collections.abc import Callable

import pytest

from src.adapters.log_conflicts import LoggingConflictSink
from src.adapters.url_standardizers import DefaultUrlStandardizer
from src.components.redirects import MatchResolver, RedirectIndex, RedirectRule


@pytest.fixture
def conflict_sink() -> LoggingConflictSink:
    return LoggingConflictSink()


@pytest.fixture
def index(conflict_sink: LoggingConflictSink) -> RedirectIndex:
    """Empty index with the default standardizer and a recording sink."""
    return RedirectIndex(standardizer=DefaultUrlStandardizer(), conflict_sink=conflict_sink)


@pytest.fixture
def resolver_for(
    conflict_sink: LoggingConflictSink,
) -> Callable[..., MatchResolver]:
    """Build a resolver over the given rules."""

    def _build(*rules: RedirectRule) -> MatchResolver:
        index = RedirectIndex.from_rules(
            rules,
            standardizer=DefaultUrlStandardizer(),
            conflict_sink=conflict_sink,
        )
        return MatchResolver(index)

    return _build
