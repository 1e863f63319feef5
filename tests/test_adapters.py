"""Tests for the adapter registry and the retrieval contract."""

from unittest.mock import Mock

import pytest

from randwall.adapters import NullAdapter, SourceAdapter, deliver, get_adapter, get_available_adapters
from randwall.adapters.base import check_url, fetch, make_record
from randwall.httpclient import HttpResponse
from randwall.models import AdapterError, ImageRecord, NetworkError, ParseError, RequestConstructionError

GENERIC_SETTINGS = {
    "generic-json-request-url": "https://example.com/api",
    "generic-json-response-path": "$.url",
}


def test_available_adapters():
    assert set(get_available_adapters()) == {"desktoppr", "unsplash", "wallhaven", "genericjson"}


@pytest.mark.parametrize("name", ["desktoppr", "unsplash", "wallhaven", "genericjson"])
def test_adapters_satisfy_contract(fake_client, name):
    adapter = get_adapter(name, {}, fake_client())
    assert isinstance(adapter, SourceAdapter)
    assert adapter.name == name


def test_unknown_adapter(fake_client):
    with pytest.raises(KeyError, match="Unknown adapter 'flickr'"):
        get_adapter("flickr", {}, fake_client())


def test_adapter_needs_client():
    with pytest.raises(ValueError, match="needs an HTTP client"):
        get_adapter("desktoppr", {})


@pytest.mark.asyncio
async def test_null_adapter_always_fails(test_logger):
    with pytest.raises(AdapterError, match="not implemented"):
        await NullAdapter(log=test_logger).request_random_image()


@pytest.mark.asyncio
async def test_deliver_failure_once(test_logger):
    callback = Mock()
    await deliver(NullAdapter(log=test_logger), callback)
    callback.assert_called_once()
    record, error = callback.call_args.args
    assert record is None
    assert error.message == "request_random_image not implemented"


@pytest.mark.asyncio
async def test_deliver_success_once(fake_client):
    callback = Mock()
    client = fake_client({"response": {"image": {"url": "http://x/y.jpg"}}})
    await deliver(get_adapter("desktoppr", {}, client), callback)
    callback.assert_called_once()
    record, error = callback.call_args.args
    assert isinstance(record, ImageRecord)
    assert error is None


@pytest.mark.parametrize("url", ["", "ftp://x.org/a", "/relative/path", "http://"])
def test_check_url_rejects(url):
    with pytest.raises(RequestConstructionError):
        check_url(url)


@pytest.mark.asyncio
async def test_fetch_rejects_error_status(fake_client):
    client = fake_client(HttpResponse(status=404, url="https://x.org", body="nope"))
    with pytest.raises(NetworkError, match="HTTP 404"):
        await fetch(client, "https://x.org")


@pytest.mark.asyncio
async def test_fetch_timeout(fake_client):
    client = fake_client(TimeoutError())
    with pytest.raises(NetworkError, match="timed out"):
        await fetch(client, "https://x.org")


def test_make_record_requires_absolute_urls():
    with pytest.raises(ParseError, match="not absolute"):
        make_record(source_name="s", image_download_url="/a.png", source_url="https://x.org")
    with pytest.raises(ParseError, match="not absolute"):
        make_record(source_name="s", image_download_url="https://x.org/a.png", source_url="x.org")


def test_record_is_immutable():
    record = make_record(source_name="s", image_download_url="https://x.org/a.png", source_url="https://x.org")
    with pytest.raises(AttributeError):
        record.source_name = "other"


@pytest.mark.asyncio
async def test_deliver_deeply_nested_json(fake_client):
    callback = Mock()
    client = fake_client("[" * 100000 + "]" * 100000)
    await deliver(get_adapter("desktoppr", {}, client), callback)
    callback.assert_called_once()
    record, error = callback.call_args.args
    assert record is None
    assert isinstance(error.cause, ParseError)
    assert "nested too deeply" in error.message


@pytest.mark.asyncio
async def test_deliver_unencodable_url(fake_client):
    callback = Mock()
    client = fake_client('{"response": {"image": {"url": "http://x/\\ud800.jpg"}}}')
    await deliver(get_adapter("desktoppr", {}, client), callback)
    callback.assert_called_once()
    record, error = callback.call_args.args
    assert record is None
    assert isinstance(error.cause, ParseError)


@pytest.mark.asyncio
async def test_deliver_undecodable_body(fake_client):
    callback = Mock()
    client = fake_client(UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"))
    await deliver(get_adapter("wallhaven", {}, client), callback)
    callback.assert_called_once()
    record, error = callback.call_args.args
    assert record is None
    assert isinstance(error.cause, ParseError)
    assert "Undecodable response" in error.message


@pytest.mark.asyncio
async def test_deliver_unexpected_exception(fake_client):
    callback = Mock()
    client = fake_client(RuntimeError("boom"))
    await deliver(get_adapter("genericjson", GENERIC_SETTINGS, client), callback)
    callback.assert_called_once()
    record, error = callback.call_args.args
    assert record is None
    assert isinstance(error.cause, RuntimeError)
    assert error.message == "genericjson: RuntimeError: boom"


def test_unknown_settings_are_reported(fake_client, test_logger, mocker):
    warning = mocker.spy(test_logger, "warning")
    get_adapter("desktoppr", {"allow-unsafes": True}, fake_client(), log=test_logger)
    warning.assert_called_once()
    assert "did you mean 'allow-unsafe'" in warning.call_args.args[0]
