"""Desktoppr backend: one JSON request per image."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from randwall.urlutils import build_query, encode_uri
from randwall.validation import ConfigField, ConfigItems

from . import register_adapter
from .base import check_config, fetch, guarded, make_record, parse_json, string_at

if TYPE_CHECKING:
    from randwall.config import ConfigurationProvider
    from randwall.httpclient import HttpGetter
    from randwall.models import ImageRecord

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DesktopprOptions:
    """Query options of one Desktoppr request."""

    safe_filter: str = "safe"

    @classmethod
    def from_config(cls, config: ConfigurationProvider) -> DesktopprOptions:
        return cls(safe_filter="all" if config.get_bool("allow-unsafe") else "safe")


@register_adapter
class DesktopprAdapter:
    """Adapter for Desktoppr's random wallpaper endpoint.

    See: https://www.desktoppr.co/api
    """

    name: ClassVar[str] = "desktoppr"
    source_name: ClassVar[str] = "desktopper.co"
    source_url: ClassVar[str] = "https://www.desktoppr.co/"
    base_url: ClassVar[str] = "https://api.desktoppr.co/1/wallpapers/random"
    config_schema: ClassVar[ConfigItems] = ConfigItems(
        ConfigField("allow-unsafe", bool, default=False, description="Include NSFW wallpapers"),
    )

    def __init__(self, config: ConfigurationProvider, client: HttpGetter, log: logging.Logger | None = None) -> None:
        self.config = config
        self.client = client
        self.log = log or _log

    async def request_random_image(self) -> ImageRecord:
        """Retrieve a random wallpaper from Desktoppr."""
        return await guarded(self.name, self.log, self._retrieve())

    async def _retrieve(self) -> ImageRecord:
        check_config(self.config, self.config_schema, self.name, self.log)
        options = DesktopprOptions.from_config(self.config)
        url = encode_uri(f"{self.base_url}?{build_query(options)}")

        response = await fetch(self.client, url)
        data = parse_json(response.body)
        image_url = string_at(data, "$.response.image.url")

        return make_record(
            source_name=self.source_name,
            image_download_url=encode_uri(image_url),
            source_url=self.source_url,
        )
