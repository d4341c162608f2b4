"""
Tests for UrlRewriter and its helpers.
"""

from __future__ import annotations

import pytest

from src.components.redirects import (
    RedirectRule,
    RequestedUrl,
    UrlRewriter,
    combine_path,
    is_absolute_url,
    merge_query_string,
    remove_protocol,
    remove_query,
    split_target,
)


@pytest.fixture
def rewriter() -> UrlRewriter:
    return UrlRewriter()


class TestIsAbsoluteUrl:
    """Heuristic absolute-URL detection."""

    @pytest.mark.parametrize(
        "url",
        ["//cdn.example.com/x", "http://example.com", "HTTPS://Example.com/x"],
    )
    def test_absolute(self, url: str) -> None:
        assert is_absolute_url(url) is True

    @pytest.mark.parametrize("url", ["/local/x", "local/x", "ftp://x", "mailto:a@b.c"])
    def test_relative(self, url: str) -> None:
        assert is_absolute_url(url) is False

    def test_none_rejected(self) -> None:
        with pytest.raises(ValueError):
            is_absolute_url(None)  # type: ignore[arg-type]


class TestHelpers:
    """String surgery helpers."""

    def test_remove_query(self) -> None:
        assert remove_query("/a?b=1?c") == "/a"
        assert remove_query("/a") == "/a"

    def test_remove_protocol(self) -> None:
        assert remove_protocol("http://x.com/a") == "//x.com/a"
        assert remove_protocol("https://x.com/a") == "//x.com/a"
        assert remove_protocol("/a") == "/a"

    def test_split_relative_target(self) -> None:
        assert split_target("/press?lang=en") == ("/press", "lang=en")

    def test_split_absolute_target_drops_fragment(self) -> None:
        assert split_target("https://x.com/p?a=1#top") == ("https://x.com/p", "a=1")

    def test_split_relative_keeps_everything_after_question_mark(self) -> None:
        assert split_target("/p?a=1#top") == ("/p", "a=1#top")

    @pytest.mark.parametrize(
        ("base", "tail", "expected"),
        [
            ("/press", "/story", "/press/story"),
            ("/press/", "/story", "/press/story"),
            ("/press/", "story", "/press/story"),
            ("/press", "story", "/press/story"),
            ("/", "/story", "/story"),
            ("http://x.com", "/a", "http://x.com/a"),
        ],
    )
    def test_combine_path_single_separator(self, base: str, tail: str, expected: str) -> None:
        assert combine_path(base, tail) == expected


class TestMergeQueryString:
    """Request parameters never override target parameters."""

    def test_target_wins(self) -> None:
        assert merge_query_string("/press?lang=en", "lang=fr&ref=x") == "/press?lang=en&ref=x"

    def test_no_target_query(self) -> None:
        assert merge_query_string("/press", "?ref=x") == "/press?ref=x"

    def test_key_comparison_ignores_case(self) -> None:
        assert merge_query_string("/press?Lang=en", "lang=fr") == "/press?Lang=en"

    def test_values_re_encoded(self) -> None:
        assert merge_query_string("/p", "q=a%20b&x=%2F") == "/p?q=a+b&x=%2F"

    def test_empty_query(self) -> None:
        assert merge_query_string("/p", "") == "/p"
        assert merge_query_string("/p", "?") == "/p"

    def test_trailing_question_mark(self) -> None:
        assert merge_query_string("/p?", "a=1") == "/p?a=1"

    def test_blank_values_kept(self) -> None:
        assert merge_query_string("/p", "flag=") == "/p?flag="


class TestBuild:
    """Final target computation."""

    def test_plain_target(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/old", new_url="/new")
        assert rewriter.build(r, "/old/anything?x=1") == "/new"

    def test_tail_append(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press", append_match_to_new_url=True)
        assert rewriter.build(r, "/news/story1") == "/press/story1"

    def test_exact_request_appends_nothing(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press", append_match_to_new_url=True)
        assert rewriter.build(r, "/news") == "/press"

    def test_slash_tail_appends_nothing(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press", append_match_to_new_url=True)
        assert rewriter.build(r, "/news/") == "/press"

    def test_configured_trailing_slash(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news/", new_url="/press/", append_match_to_new_url=True)
        assert rewriter.build(r, "/news") == "/press/"
        assert rewriter.build(r, "/news/a/b") == "/press/a/b"

    def test_tail_is_case_insensitive(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press", append_match_to_new_url=True)
        assert rewriter.build(r, "/NEWS/Story") == "/press/Story"

    def test_target_query_preserved(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press?lang=en", append_match_to_new_url=True)
        assert rewriter.build(r, "/news/story1") == "/press/story1?lang=en"

    def test_absolute_target(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="/news",
            new_url="https://example.org/press/",
            append_match_to_new_url=True,
        )
        assert rewriter.build(r, "/news/a") == "https://example.org/press/a"

    def test_protocol_relative_target(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="/img",
            new_url="//cdn.example.com/static?v=2",
            append_match_to_new_url=True,
        )
        assert rewriter.build(r, "/img/logo.png") == "//cdn.example.com/static/logo.png?v=2"

    def test_request_query_excluded_from_tail(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press", append_match_to_new_url=True)
        assert rewriter.build(r, "/news/a?page=2") == "/press/a"

    def test_short_request_appends_whole_path(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="/very/long/old/url",
            new_url="/new",
            append_match_to_new_url=True,
        )
        assert rewriter.build(r, "/other") == "/new/other"

    def test_absolute_old_url(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="http://example.com/news",
            new_url="/press",
            append_match_to_new_url=True,
        )
        assert rewriter.build(r, "http://example.com/news/a") == "/press/a"

    def test_protocol_relative_old_url(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="//example.com/news",
            new_url="/press",
            append_match_to_new_url=True,
        )
        assert rewriter.build(r, "https://example.com/news/a") == "/press/a"

    def test_include_query_string(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press?lang=en", include_query_string=True)
        assert rewriter.build(r, "/news?lang=fr&ref=x") == "/press?lang=en&ref=x"

    def test_append_and_query(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="/news",
            new_url="/press?lang=en",
            append_match_to_new_url=True,
            include_query_string=True,
        )
        assert rewriter.build(r, "/news/a?ref=x") == "/press/a?lang=en&ref=x"

    def test_query_ignored_without_flag(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press")
        assert rewriter.build(r, "/news?ref=x") == "/press"

    def test_rule_not_mutated(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(
            old_url="/news",
            new_url="/press",
            append_match_to_new_url=True,
            include_query_string=True,
        )
        rewriter.build(r, "/news/a?b=1")
        assert r.new_url == "/press"

    def test_accepts_parsed_request(self, rewriter: UrlRewriter) -> None:
        r = RedirectRule(old_url="/news", new_url="/press", append_match_to_new_url=True)
        assert rewriter.build(r, RequestedUrl.parse("/news/x")) == "/press/x"
