# File: tests/test_utils.py
import re

import pytest

from site2pdf.errors import PatternInvalid
from site2pdf.utils import canonicalize_url, compile_pattern, default_pattern, generate_slug, remove_duplicates


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://x.com/docs/", "https://x.com/docs"),
        ("https://x.com/docs///", "https://x.com/docs"),
        ("https://x.com/docs#section", "https://x.com/docs"),
        ("https://x.com/docs/#top", "https://x.com/docs"),
        ("https://x.com/docs/?lang=en#top", "https://x.com/docs?lang=en"),
        ("https://x.com/a/b/c", "https://x.com/a/b/c"),
        ("https://x.com/", "https://x.com"),
        ("https://x.com/a/start()", "https://x.com/a/start()"),
        ("/relative/path/#frag", "/relative/path"),
        ("http://[::1/broken/#x", "http://[::1/broken"),
        ("", ""),
    ],
)
def test_canonicalize_url(raw, expected):
    assert canonicalize_url(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "https://developer.apple.com/documentation/virtualization/",
        "https://x.com/a?q=1/#frag",
        "https://x.com//",
        "HTTPS://X.com/Path/",
        "x/#/",
        "http://[bad/",
        "#only-fragment",
        "mailto:someone@example.com/",
    ],
)
def test_canonicalize_is_idempotent(raw):
    once = canonicalize_url(raw)
    assert canonicalize_url(once) == once


def test_canonicalize_keeps_query_and_host():
    assert canonicalize_url("https://Docs.Example.com/a/?b=1&c=2") == "https://Docs.Example.com/a?b=1&c=2"


def test_generate_slug():
    assert (
        generate_slug("https://developer.apple.com/documentation/virtualization")
        == "developer-apple-com-documentation-virtualization"
    )
    assert generate_slug("https://x.com/a/start()") == "x-com-a-start"
    assert generate_slug("http://X.com/State.Enum") == "x-com-state-enum"


def test_default_pattern_escapes_metacharacters():
    source = default_pattern("https://x.com/a/.*/")
    assert source == "^" + re.escape("https://x.com/a/.*") + ".*"
    pattern = re.compile(source)
    assert pattern.search("https://x.com/a/.*/child")
    assert not pattern.search("https://x.com/a/zz/child")


def test_compile_pattern_default_from_main_url():
    pattern = compile_pattern(None, "https://x.com/docs")
    assert pattern.search("https://x.com/docs/page")
    assert not pattern.search("https://other.com/docs/page")


def test_compile_pattern_accepts_regex_literal():
    pattern = compile_pattern("https://x.com/a/.*", "https://x.com/a")
    assert pattern.search("https://x.com/a/b")


@pytest.mark.parametrize("bad", ["https://x.com/(unclosed", "[a-", "*start"])
def test_compile_pattern_reports_invalid(bad):
    with pytest.raises(PatternInvalid) as excinfo:
        compile_pattern(bad, "https://x.com")
    assert excinfo.value.pattern == bad


def test_remove_duplicates_keeps_order():
    assert remove_duplicates(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
