"""Tests for the Wallhaven scraping adapter."""

from unittest.mock import Mock, patch

import pytest

from randwall.adapters import deliver, get_adapter, scrape
from randwall.models import AdapterError, ParseError

SEARCH_PAGE = """
<ul>
  <li><a class="preview" href="https://alpha.wallhaven.cc/wallpaper/111">one</a></li>
  <li><a class="preview" href="https://alpha.wallhaven.cc/wallpaper/222">two</a></li>
  <li><a class="jsAnchor" href="https://alpha.wallhaven.cc/wallpaper/111" target="_blank">again</a></li>
</ul>
"""
DETAIL_PAGE = """
<img id="wallpaper" src="//wallpapers.wallhaven.cc/wallpapers/full/wallhaven-111.jpg" alt="x">
"""
IMAGE_URL = "http://wallpapers.wallhaven.cc/wallpapers/full/wallhaven-111.jpg"


def test_find_detail_urls_keeps_duplicates():
    assert scrape.find_detail_urls(SEARCH_PAGE) == [
        "https://alpha.wallhaven.cc/wallpaper/111",
        "https://alpha.wallhaven.cc/wallpaper/222",
        "https://alpha.wallhaven.cc/wallpaper/111",
    ]


def test_unique_urls_preserves_first_seen_order():
    raw = scrape.find_detail_urls(SEARCH_PAGE)
    unique = scrape.unique_urls(raw)
    assert unique == ["https://alpha.wallhaven.cc/wallpaper/111", "https://alpha.wallhaven.cc/wallpaper/222"]
    assert len(unique) <= len(raw)


def test_pick_detail_url_draws_from_unique_set():
    with patch("random.choice", side_effect=lambda seq: seq[-1]) as choice:
        picked = scrape.pick_detail_url(SEARCH_PAGE)
    choice.assert_called_once_with(["https://alpha.wallhaven.cc/wallpaper/111", "https://alpha.wallhaven.cc/wallpaper/222"])
    assert picked == "https://alpha.wallhaven.cc/wallpaper/222"


def test_pick_detail_url_without_results():
    with pytest.raises(ParseError, match="No wallpaper found"):
        scrape.pick_detail_url("<html>no results</html>")


def test_find_full_image_url():
    assert scrape.find_full_image_url(DETAIL_PAGE) == IMAGE_URL


def test_find_full_image_url_missing():
    with pytest.raises(ParseError, match="No full resolution image"):
        scrape.find_full_image_url('<img src="//elsewhere/x.jpg">')


@pytest.mark.asyncio
async def test_two_stage_scrape(fake_client):
    client = fake_client(SEARCH_PAGE, DETAIL_PAGE)
    record = await get_adapter("wallhaven", {}, client).request_random_image()

    assert client.requested[0] == (
        "http://alpha.wallhaven.cc/search?purity=100&sorting=random&categories=111&resolutions=1920x1200,2560x1440"
    )
    assert client.requested[1] in {"https://alpha.wallhaven.cc/wallpaper/111", "https://alpha.wallhaven.cc/wallpaper/222"}
    assert record.image_download_url == IMAGE_URL
    assert record.source_name == "wallhaven.cc"
    assert record.source.source_url == "https://alpha.wallhaven.cc/"
    assert record.source.image_link_url == client.requested[1]


@pytest.mark.asyncio
async def test_configured_search(fake_client):
    settings = {
        "wallhaven-keyword": "city night",
        "resolutions": "3840x2160",
        "category-anime": False,
        "allow-sketchy": True,
    }
    client = fake_client(SEARCH_PAGE, DETAIL_PAGE)
    await get_adapter("wallhaven", settings, client).request_random_image()
    assert client.requested[0] == (
        "http://alpha.wallhaven.cc/search?q=city%20night&purity=110&sorting=random&categories=101&resolutions=3840x2160"
    )


@pytest.mark.asyncio
async def test_empty_search_fails_without_second_request(fake_client):
    callback = Mock()
    client = fake_client("<html></html>")

    await deliver(get_adapter("wallhaven", {}, client), callback)

    callback.assert_called_once()
    assert callback.call_args.args[0] is None
    assert len(client.requested) == 1


@pytest.mark.asyncio
async def test_detail_page_without_image_fails(fake_client):
    client = fake_client(SEARCH_PAGE, "<html>removed</html>")

    with pytest.raises(AdapterError) as excinfo:
        await get_adapter("wallhaven", {}, client).request_random_image()

    assert isinstance(excinfo.value.cause, ParseError)
    assert len(client.requested) == 2
