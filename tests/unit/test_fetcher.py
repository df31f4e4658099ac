"""
Test fetching feed documents
"""

import httpx
import pytest

from feedsync.core.exceptions import FetchError
from feedsync.services.fetcher import DocumentFetcher


URL = "https://feeds.example.com/catalog.xml"


def fetcher_for(handler) -> DocumentFetcher:
    return DocumentFetcher(timeout=2.0, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_returns_body():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content="<shop/>".encode(), headers={"content-type": "application/xml"})

    body = await fetcher_for(handler).fetch(URL)

    assert body == "<shop/>"
    assert str(seen[0].url) == URL
    assert "Feedsync" in seen[0].headers["user-agent"]


@pytest.mark.asyncio
async def test_fetch_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.xml":
            return httpx.Response(301, headers={"location": URL})
        return httpx.Response(200, content=b"<shop/>")

    assert await fetcher_for(handler).fetch("https://feeds.example.com/old.xml") == "<shop/>"


@pytest.mark.asyncio
async def test_fetch_decodes_declared_encoding():
    content = '<?xml version="1.0" encoding="windows-1251"?><shop><name>Чайник</name></shop>'.encode("cp1251")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=content, headers={"content-type": "application/xml"})

    body = await fetcher_for(handler).fetch(URL)

    assert "Чайник" in body


@pytest.mark.asyncio
async def test_fetch_prefers_charset_header():
    content = "<shop><name>Чайник</name></shop>".encode("utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=content, headers={"content-type": "text/xml; charset=utf-8"})

    assert "Чайник" in await fetcher_for(handler).fetch(URL)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 500, 503])
async def test_non_success_status_is_a_fetch_error(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text="nope")

    with pytest.raises(FetchError) as exc_info:
        await fetcher_for(handler).fetch(URL)

    assert str(exc_info.value) == f"HTTP {status}"
    assert exc_info.value.context["status"] == status


@pytest.mark.asyncio
async def test_timeout_is_a_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(FetchError) as exc_info:
        await fetcher_for(handler).fetch(URL)

    assert "Timed out after 2s" in str(exc_info.value)


@pytest.mark.asyncio
async def test_connection_failure_is_a_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as exc_info:
        await fetcher_for(handler).fetch(URL)

    assert "ConnectError" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_url_is_a_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(FetchError):
        await fetcher_for(handler).fetch("")
