from typing import Any, Optional
import urllib.error
import urllib.parse
import urllib.request

import jq

from .common import InvalidJsonError, QueryError, SourceFetchError, loads, logger

SOURCE_URL = "URL"
SOURCE_JSON = "JSON"
SOURCES = (SOURCE_URL, SOURCE_JSON)


def parse_json(text: str) -> Any:
    """Parse example data typed or pasted by the user"""
    if text is None or not text.strip():
        raise InvalidJsonError("Invalid JSON: no data given")
    return loads(text)


def validate_json(text: str):
    """Prompt validator: True when `text` parses, otherwise the message to show"""
    try:
        parse_json(text)
        return True
    except InvalidJsonError:
        return 'Please enter a valid JSON string'


def is_url(resource: str) -> bool:
    result = urllib.parse.urlparse(resource)
    return result.scheme in ('http', 'https') and bool(result.netloc)


def fetch_json(url: str, timeout: Optional[float] = None) -> Any:
    """
    GET `url` without authentication and parse the body as JSON.

    Any failure (bad URL, connection error, non-2xx status, unparseable body)
    raises SourceFetchError; there are no retries.
    """
    if not url or not is_url(url.strip()):
        raise SourceFetchError(f"Invalid or missing URL: {url}")
    url = url.strip()

    logger().info(f"Fetching {url}")
    request = urllib.request.Request(url, headers={'Accept': 'application/json'}, method='GET')
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read()
            charset = response.headers.get_content_charset() or 'utf-8'
    except urllib.error.HTTPError as e:
        raise SourceFetchError(f"HTTP {e.code}: {e.reason} ({url})") from e
    except urllib.error.URLError as e:
        raise SourceFetchError(f"Connection error: {e.reason} ({url})") from e
    except OSError as e:
        raise SourceFetchError(f"Request failed: {e} ({url})") from e

    logger().debug(f"Received {len(body)} bytes from {url}")
    try:
        return loads(body.decode(charset, errors='replace'))
    except InvalidJsonError as e:
        raise SourceFetchError(f"Response from {url} is not JSON: {e}") from e


def select(data: Any, query: Optional[str] = None) -> Any:
    """
    Narrow `data` with a jq expression, e.g. ".results" or ".data.items".

    The first value the program produces is used. No query, an empty
    query or "." returns `data` unchanged.
    """
    query = query.strip() if query else "."
    if query == ".":
        return data

    try:
        program = jq.compile(query)
    except ValueError as e:
        raise QueryError(f"Invalid jq query {query!r}: {e}") from e

    try:
        results = iter(program.input_value(data))
        first = next(results)
    except StopIteration:
        raise QueryError(f"jq query {query!r} selected nothing") from None
    except ValueError as e:
        raise QueryError(f"jq query {query!r} failed: {e}") from e

    logger().debug(f"jq query {query!r} selected a {type(first).__name__}")
    return first
