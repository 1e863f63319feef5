"""Unsplash API backend: random photo, then the download ping.

Unsplash's API guidelines require hitting the photo's download location
whenever an image is used. That second request also returns the final
asset URL, so the record is only built once both requests succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from randwall.constants import DEFAULT_IMAGE_HEIGHT, DEFAULT_IMAGE_WIDTH
from randwall.jsonpath import evaluate
from randwall.models import JSONPathError
from randwall.urlutils import append_query, build_query, encode_uri
from randwall.validation import ConfigField, ConfigItems

from . import register_adapter
from .base import check_config, fetch, guarded, make_record, parse_json, string_at

if TYPE_CHECKING:
    from randwall.config import ConfigurationProvider
    from randwall.httpclient import HttpGetter
    from randwall.models import ImageRecord

_log = logging.getLogger(__name__)

CLIENT_ID = "64daf439e9b579dd566620c0b07022706522d87b255d06dd01d5470b7f193b8d"
UTM_PARAMETERS = "utm_source=randwall&utm_medium=referral&utm_campaign=api-credit"


@dataclass(frozen=True, slots=True)
class UnsplashOptions:
    """Query options of one random photo request, in query order."""

    username: str = ""
    query: str = ""
    collections: tuple[str, ...] = ()
    w: int = DEFAULT_IMAGE_WIDTH
    h: int = DEFAULT_IMAGE_HEIGHT
    featured: bool = False

    @classmethod
    def from_config(cls, config: ConfigurationProvider) -> UnsplashOptions:
        username = config.get_str("unsplash-username").strip()
        if username.startswith("@"):
            username = username[1:]
        collections = tuple(c.strip() for c in config.get_str("unsplash-collections").split(",") if c.strip())
        return cls(
            username=username,
            query=config.get_str("unsplash-keyword"),
            collections=collections,
            w=config.get_int("image-width", DEFAULT_IMAGE_WIDTH),
            h=config.get_int("image-height", DEFAULT_IMAGE_HEIGHT),
            featured=config.get_bool("featured-only"),
        )


@dataclass(frozen=True, slots=True)
class _PhotoInfo:
    """Fields of the first response needed to finish the retrieval."""

    author_name: str | None
    author_url: str
    image_link_url: str
    download_location: str


@register_adapter
class UnsplashAdapter:
    """Adapter for the Unsplash API random photo endpoint.

    See: https://unsplash.com/documentation#get-a-random-photo
    """

    name: ClassVar[str] = "unsplash"
    source_name: ClassVar[str] = "Unsplash"
    source_url: ClassVar[str] = "https://unsplash.com/"
    base_url: ClassVar[str] = "https://api.unsplash.com/photos/random"
    config_schema: ClassVar[ConfigItems] = ConfigItems(
        ConfigField("unsplash-keyword", str, default="", description="Search terms"),
        ConfigField("unsplash-username", str, default="", description="Restrict to one photographer"),
        ConfigField("unsplash-collections", str, default="", description="Comma separated collection ids"),
        ConfigField("image-width", int, default=DEFAULT_IMAGE_WIDTH, description="Requested width in pixels"),
        ConfigField("image-height", int, default=DEFAULT_IMAGE_HEIGHT, description="Requested height in pixels"),
        ConfigField("featured-only", bool, default=False, description="Only featured photos"),
    )

    def __init__(self, config: ConfigurationProvider, client: HttpGetter, log: logging.Logger | None = None) -> None:
        self.config = config
        self.client = client
        self.log = log or _log

    async def request_random_image(self) -> ImageRecord:
        """Retrieve a random photo and send the required download ping."""
        return await guarded(self.name, self.log, self._retrieve())

    def build_url(self, options: UnsplashOptions) -> str:
        """Return the encoded random photo URL for a snapshot of options."""
        query = "&".join(filter(None, (build_query(options), f"client_id={CLIENT_ID}")))
        return encode_uri(f"{self.base_url}?{query}")

    async def _retrieve(self) -> ImageRecord:
        check_config(self.config, self.config_schema, self.name, self.log)
        options = UnsplashOptions.from_config(self.config)

        response = await fetch(self.client, self.build_url(options))
        photo = self._parse_photo(parse_json(response.body))

        # Only issued once the first response yielded its download location
        ping_url = append_query(photo.download_location, f"client_id={CLIENT_ID}")
        self.log.debug("Download ping for %s", photo.image_link_url)
        download = await fetch(self.client, ping_url)
        image_url = string_at(parse_json(download.body), "$.url")

        return make_record(
            author_name=photo.author_name,
            source_name=self.source_name,
            image_download_url=encode_uri(image_url),
            source_url=encode_uri(f"{self.source_url}?{UTM_PARAMETERS}"),
            author_url=encode_uri(append_query(photo.author_url, UTM_PARAMETERS)),
            image_link_url=photo.image_link_url,
        )

    @staticmethod
    def _parse_photo(data: object) -> _PhotoInfo:
        """Extract attribution and the download location from a random photo."""
        try:
            name = evaluate(data, "$.user.name")
        except JSONPathError:
            name = None
        raw_url = string_at(data, "$.urls.raw")
        return _PhotoInfo(
            author_name=str(name) if name is not None else None,
            author_url=string_at(data, "$.user.links.html"),
            image_link_url=encode_uri(append_query(raw_url, UTM_PARAMETERS)),
            download_location=string_at(data, "$.links.download_location"),
        )
