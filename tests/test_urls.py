import pytest

from core.domain.errors import InvalidURL
from core.domain.urls import validate_url


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("bar.com", "https://bar.com"),
        ("//bar.com", "https://bar.com"),
        ("  bar.com  ", "https://bar.com"),
        ("bar.com/a/b?x=1", "https://bar.com/a/b?x=1"),
        ("bar.com/a b", "https://bar.com/a%20b"),
        ("bar com", "https://bar%20com"),
        ("bar.com?", "https://bar.com?"),
        ("bar.com?#top", "https://bar.com?#top"),
    ],
)
def test_missing_scheme_defaults_to_https(raw, expected):
    assert validate_url(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "http://other.com",
        "https://bar.com",
        "https://bar.com/path?q=1#frag",
        "https://bar.com?",
        "http://other.com/?#frag",
        "ftp://files.example.org/pub",
    ],
)
def test_explicit_scheme_is_preserved(raw):
    assert validate_url(raw) == raw


def test_scheme_is_lowercased():
    assert validate_url("HTTP://other.com") == "http://other.com"


def test_custom_default_scheme():
    assert validate_url("bar.com", default_scheme="http") == "http://bar.com"


@pytest.mark.parametrize(
    "raw",
    [
        "::::not a url",
        ":bar.com",
        "",
        "   ",
        "1foo:bar",
        "http://bar.com:abc",
        "http://[::1",
        "bar.com/%zz",
        "bar\x00.com",
        "http://bar com/",
        "//bar com",
    ],
)
def test_malformed_input_raises_invalid_url(raw):
    with pytest.raises(InvalidURL):
        validate_url(raw)


def test_invalid_url_keeps_raw_and_reason():
    with pytest.raises(InvalidURL) as info:
        validate_url("::::not a url")

    assert info.value.raw == "::::not a url"
    assert "scheme" in info.value.reason
