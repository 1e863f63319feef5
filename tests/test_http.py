"""Tests for randwall.httpclient."""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from aiohttp import test_utils, web

from randwall.adapters import deliver, get_adapter
from randwall.httpclient import HttpClient, HttpResponse

HTTP_OK = 200


def _mock_session(mocker, body="ok", status=HTTP_OK, url="https://example.com/final"):
    """Patch aiohttp.ClientSession with a session answering every GET."""
    response = MagicMock()
    response.status = status
    response.url = url
    response.text = AsyncMock(return_value=body)

    request_ctx = MagicMock()
    request_ctx.__aenter__ = AsyncMock(return_value=response)
    request_ctx.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.closed = False
    session.get.return_value = request_ctx
    session.close = AsyncMock()
    factory = mocker.patch("randwall.httpclient.aiohttp.ClientSession", return_value=session)
    return factory, session


@pytest.mark.asyncio
async def test_get_reads_body(mocker):
    _, session = _mock_session(mocker, body='{"a": 1}')
    client = HttpClient()

    response = await client.get("https://example.com/api?q=blue%20sky")

    assert response == HttpResponse(status=HTTP_OK, url="https://example.com/final", body='{"a": 1}')
    requested = session.get.call_args.args[0]
    assert str(requested) == "https://example.com/api?q=blue%20sky"


@pytest.mark.asyncio
async def test_session_is_reused(mocker):
    factory, _ = _mock_session(mocker)
    client = HttpClient()

    await client.get("https://example.com/1")
    await client.get("https://example.com/2")

    assert factory.call_count == 1


@pytest.mark.asyncio
async def test_default_headers(mocker):
    factory, _ = _mock_session(mocker)
    client = HttpClient(headers={"X-Custom": "value"})

    await client.get("https://example.com")

    headers = factory.call_args.kwargs["headers"]
    assert headers["User-Agent"].startswith("randwall")
    assert headers["X-Custom"] == "value"


@pytest.mark.asyncio
async def test_context_manager_closes_session(mocker):
    _, session = _mock_session(mocker)

    async with HttpClient() as client:
        await client.get("https://example.com")

    session.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_without_session():
    client = HttpClient()
    await client.close()


@pytest.mark.asyncio
async def test_invalid_bytes_are_replaced():
    async def page(request):
        return web.Response(body=b"<html>\xff\xfe broken</html>", content_type="text/html", charset="utf-8")

    app = web.Application()
    app.router.add_get("/", page)
    async with test_utils.TestServer(app) as server, HttpClient() as client:
        response = await client.get(str(server.make_url("/")))

    assert response.status == HTTP_OK
    assert response.body.startswith("<html>\ufffd\ufffd")


@pytest.mark.asyncio
async def test_scrape_of_invalid_utf8_page_completes():
    async def page(request):
        return web.Response(body=b"<html>\xff no results</html>", content_type="text/html", charset="utf-8")

    app = web.Application()
    app.router.add_get("/search", page)
    callback = Mock()
    async with test_utils.TestServer(app) as server, HttpClient() as client:
        adapter = get_adapter("wallhaven", {}, client)
        adapter.base_url = str(server.make_url("/search"))
        await deliver(adapter, callback)

    callback.assert_called_once()
    record, error = callback.call_args.args
    assert record is None
    assert "No wallpaper found" in error.message
