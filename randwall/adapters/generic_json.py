"""Generic JSON backend: any API answering one GET with the image URL in its JSON.

Example settings for an API returning ``{"data": [{"path": "/img/1.jpg"}]}``::

    [genericjson]
    generic-json-request-url = "https://example.com/api/random"
    generic-json-response-path = "$.data[0].path"
    generic-json-url-prefix = "https://example.com"
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from randwall.jsonpath import evaluate
from randwall.models import ParseError
from randwall.urlutils import encode_uri
from randwall.validation import ConfigField, ConfigItems

from . import register_adapter
from .base import check_config, fetch, guarded, make_record, parse_json

if TYPE_CHECKING:
    from randwall.config import ConfigurationProvider
    from randwall.httpclient import HttpGetter
    from randwall.models import ImageRecord

_log = logging.getLogger(__name__)


@register_adapter
class GenericJsonAdapter:
    """Adapter driven entirely by configuration."""

    name: ClassVar[str] = "genericjson"
    source_name: ClassVar[str] = "Generic JSON Source"
    source_url: ClassVar[str] = ""
    config_schema: ClassVar[ConfigItems] = ConfigItems(
        ConfigField("generic-json-request-url", str, required=True, description="URL returning JSON"),
        ConfigField("generic-json-response-path", str, required=True, description="Path to the image URL, e.g. $.data[0].url"),
        ConfigField("generic-json-url-prefix", str, default="", description="Prepended to the extracted value"),
    )

    def __init__(self, config: ConfigurationProvider, client: HttpGetter, log: logging.Logger | None = None) -> None:
        self.config = config
        self.client = client
        self.log = log or _log

    async def request_random_image(self) -> ImageRecord:
        """Retrieve an image URL from the configured JSON API."""
        return await guarded(self.name, self.log, self._retrieve())

    async def _retrieve(self) -> ImageRecord:
        check_config(self.config, self.config_schema, self.name, self.log)
        url = encode_uri(self.config.get_str("generic-json-request-url"))
        path = self.config.get_str("generic-json-response-path")
        prefix = self.config.get_str("generic-json-url-prefix")

        response = await fetch(self.client, url)
        value = evaluate(parse_json(response.body), path)
        if isinstance(value, (dict, list, bool)) or value is None:
            msg = f"{path} selects {type(value).__name__}, not a URL"
            raise ParseError(msg)

        image_url = f"{prefix}{value}"
        return make_record(
            source_name=self.source_name,
            image_download_url=image_url,
            source_url=image_url,
        )
