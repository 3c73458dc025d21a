from __future__ import annotations

import urllib.error

import pytest

from propshape import sources
from propshape.common import InvalidJsonError, QueryError, SourceFetchError


class _Headers:
    def __init__(self, charset=None):
        self._charset = charset

    def get_content_charset(self):
        return self._charset


class _Response:
    def __init__(self, body: bytes, charset=None):
        self._body = body
        self.headers = _Headers(charset)

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


@pytest.fixture
def urlopen_calls(monkeypatch: pytest.MonkeyPatch):
    calls = []

    def _install(result):
        def _urlopen(request, timeout=None):
            calls.append((request, timeout))
            if isinstance(result, Exception):
                raise result
            return result

        monkeypatch.setattr(sources.urllib.request, "urlopen", _urlopen)
        return calls

    return _install


def test_parse_json_preserves_key_order() -> None:
    assert list(sources.parse_json('{"b": 1, "a": 2}')) == ["b", "a"]


def test_parse_json_tolerates_comments() -> None:
    assert sources.parse_json('{\n  // user id\n  "id": 1\n}') == {"id": 1}


@pytest.mark.parametrize("text", ["{bad", "", "   ", None])
def test_parse_json_rejects_malformed_text(text) -> None:
    with pytest.raises(InvalidJsonError):
        sources.parse_json(text)


def test_validate_json() -> None:
    assert sources.validate_json('[1, 2]') is True
    assert sources.validate_json('[1, 2') == 'Please enter a valid JSON string'


@pytest.mark.parametrize(
    ("resource", "expected"),
    [
        ("https://example.com/data.json", True),
        ("http://localhost:8080/x", True),
        ("ftp://example.com/x", False),
        ("example.com/x", False),
        ("", False),
    ],
)
def test_is_url(resource, expected) -> None:
    assert sources.is_url(resource) is expected


def test_fetch_json_gets_and_parses(urlopen_calls) -> None:
    calls = urlopen_calls(_Response(b'{"items": [1, 2]}'))
    assert sources.fetch_json(" https://example.com/data ", timeout=5) == {"items": [1, 2]}

    (request, timeout), = calls
    assert request.full_url == "https://example.com/data"
    assert request.get_method() == "GET"
    assert request.data is None
    assert not request.has_header("Authorization")
    assert timeout == 5


def test_fetch_json_defaults_to_no_timeout(urlopen_calls) -> None:
    calls = urlopen_calls(_Response(b'[]'))
    sources.fetch_json("https://example.com/data")
    assert calls[0][1] is None


def test_fetch_json_uses_response_charset(urlopen_calls) -> None:
    urlopen_calls(_Response('{"name": "Zoë"}'.encode('latin-1'), charset='latin-1'))
    assert sources.fetch_json("https://example.com/data") == {"name": "Zoë"}


def test_fetch_json_rejects_invalid_url(urlopen_calls) -> None:
    calls = urlopen_calls(_Response(b'{}'))
    with pytest.raises(SourceFetchError):
        sources.fetch_json("not a url")
    assert calls == []


def test_fetch_json_http_error(urlopen_calls) -> None:
    urlopen_calls(urllib.error.HTTPError("https://example.com/x", 404, "Not Found", None, None))
    with pytest.raises(SourceFetchError, match="HTTP 404"):
        sources.fetch_json("https://example.com/x")


def test_fetch_json_connection_error(urlopen_calls) -> None:
    urlopen_calls(urllib.error.URLError("connection refused"))
    with pytest.raises(SourceFetchError, match="connection refused"):
        sources.fetch_json("https://example.com/x")


def test_fetch_json_non_json_body(urlopen_calls) -> None:
    urlopen_calls(_Response(b'<html></html>'))
    with pytest.raises(SourceFetchError, match="not JSON"):
        sources.fetch_json("https://example.com/x")


def test_select_without_query_returns_data() -> None:
    data = {"a": 1}
    assert sources.select(data) is data
    assert sources.select(data, "") is data
    assert sources.select(data, " . ") is data


def test_select_with_jq() -> None:
    data = {"data": {"items": [{"id": 1}, {"id": 2}]}}
    assert sources.select(data, ".data.items") == [{"id": 1}, {"id": 2}]
    assert sources.select(data, ".data.items[]") == {"id": 1}


def test_select_invalid_query() -> None:
    with pytest.raises(QueryError):
        sources.select({"a": 1}, ".a[")


def test_select_nothing_selected() -> None:
    with pytest.raises(QueryError, match="selected nothing"):
        sources.select({"a": 1}, "empty")
