"""Wallhaven backend: search page scrape, then detail page scrape."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from randwall.urlutils import build_query, encode_uri
from randwall.validation import ConfigField, ConfigItems

from . import register_adapter, scrape
from .base import check_config, fetch, guarded, make_record

if TYPE_CHECKING:
    from randwall.config import ConfigurationProvider
    from randwall.httpclient import HttpGetter
    from randwall.models import ImageRecord

_log = logging.getLogger(__name__)


def _flags(*values: bool) -> str:
    """Render booleans as a digit string, e.g. (True, False) -> "10"."""
    return "".join(str(int(v)) for v in values)


@dataclass(frozen=True, slots=True)
class WallhavenOptions:
    """Search options, in query order."""

    q: str = ""
    purity: str = "110"  # sfw, sketchy, nsfw
    sorting: str = "random"
    categories: str = "111"  # general, anime, people
    resolutions: tuple[str, ...] = ("1920x1200", "2560x1440")

    @classmethod
    def from_config(cls, config: ConfigurationProvider) -> WallhavenOptions:
        resolutions = tuple(r.strip() for r in config.get_str("resolutions").split(",") if r.strip())
        return cls(
            q=config.get_str("wallhaven-keyword"),
            # nsfw stays off: the last digit is always 0
            purity=_flags(config.get_bool("allow-sfw"), config.get_bool("allow-sketchy"), False),
            categories=_flags(
                config.get_bool("category-general"),
                config.get_bool("category-anime"),
                config.get_bool("category-people"),
            ),
            resolutions=resolutions,
        )


@register_adapter
class WallhavenAdapter:
    """Adapter scraping Wallhaven's random search results.

    See: https://alpha.wallhaven.cc/
    """

    name: ClassVar[str] = "wallhaven"
    source_name: ClassVar[str] = "wallhaven.cc"
    source_url: ClassVar[str] = "https://alpha.wallhaven.cc/"
    base_url: ClassVar[str] = "http://alpha.wallhaven.cc/search"
    config_schema: ClassVar[ConfigItems] = ConfigItems(
        ConfigField("wallhaven-keyword", str, default="", description="Search terms"),
        ConfigField("resolutions", str, default="1920x1200, 2560x1440", description="Comma separated resolutions"),
        ConfigField("category-general", bool, default=True),
        ConfigField("category-anime", bool, default=True),
        ConfigField("category-people", bool, default=True),
        ConfigField("allow-sfw", bool, default=True),
        ConfigField("allow-sketchy", bool, default=False),
    )

    def __init__(self, config: ConfigurationProvider, client: HttpGetter, log: logging.Logger | None = None) -> None:
        self.config = config
        self.client = client
        self.log = log or _log

    async def request_random_image(self) -> ImageRecord:
        """Retrieve a random wallpaper from Wallhaven's search results."""
        return await guarded(self.name, self.log, self._retrieve())

    async def _retrieve(self) -> ImageRecord:
        check_config(self.config, self.config_schema, self.name, self.log)
        options = WallhavenOptions.from_config(self.config)
        url = encode_uri(f"{self.base_url}?{build_query(options)}")

        search = await fetch(self.client, url)
        detail_url = scrape.pick_detail_url(search.body)
        self.log.debug("Picked %s", detail_url)

        detail = await fetch(self.client, detail_url)
        image_url = scrape.find_full_image_url(detail.body)

        return make_record(
            source_name=self.source_name,
            image_download_url=image_url,
            source_url=self.source_url,
            image_link_url=detail_url,
        )
