"""HTTP client that forwards RequestSpecs to the Wix REST API.

This module provides the WixClient class which builds the outbound URL and
headers, performs exactly one aiohttp round trip per call, and normalizes the
response into a ResponseEnvelope.
"""

import asyncio
import json
import logging
from typing import Any, Mapping, Optional

import aiohttp
from multidict import CIMultiDict
from yarl import URL

from .config import WixConfig
from .exceptions import TransportError
from .models import HTTPMethod, RequestSpec, ResponseEnvelope, parse_body

SITE_ID_HEADER = "wix-site-id"


def stringify_query_value(value: Any) -> str:
    """Coerce a query value the way the Wix API expects to read it"""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


class WixClient:
    """Forwards requests to the Wix REST API with uniform auth and tenant headers

    The client holds no mutable state; concurrent calls share only the frozen
    configuration. Each call opens its own ClientSession.

    Args:
        config: Frozen process configuration
    """

    def __init__(self, config: WixConfig):
        self.config = config

    def build_url(self, path: str, query: Optional[Mapping[str, Any]] = None) -> URL:
        url = URL(self.config.base_url + path)
        if query:
            url = url.update_query([(str(k), stringify_query_value(v)) for k, v in query.items()])
        return url

    def build_headers(
        self,
        headers: Optional[Mapping[str, str]] = None,
        site_id: Optional[str] = None,
    ) -> CIMultiDict:
        """Merge default, caller and tenant headers

        Caller headers replace defaults case-insensitively. The tenant header
        is only injected when the caller did not send one under any casing.
        """
        final = CIMultiDict({
            "Authorization": f"Bearer {self.config.access_token}",
            "Content-Type": "application/json",
        })
        caller = headers or {}
        for name, value in caller.items():
            final[name] = value

        effective_site_id = site_id or self.config.default_site_id
        if effective_site_id and SITE_ID_HEADER not in final:
            final[SITE_ID_HEADER] = effective_site_id
        return final

    async def request(self, spec: RequestSpec) -> ResponseEnvelope:
        """Perform one HTTP call described by spec

        Returns:
            ResponseEnvelope with the upstream status and normalized body,
            whatever the status code

        Raises:
            TransportError: If the call fails before a response is received
        """
        url = self.build_url(spec.path, spec.query)
        headers = self.build_headers(spec.headers, spec.site_id)

        data = None
        if spec.method.sends_body and spec.body is not None:
            data = json.dumps(spec.body).encode("utf-8")

        logging.info(f"[WixClient] {spec.method.value} {url}")
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(spec.method.value, url, headers=headers, data=data) as response:
                    text = await response.text(errors="replace")
                    status = response.status
        except asyncio.TimeoutError:
            logging.error(f"[WixClient] {spec.method.value} {url} timed out after {self.config.timeout} seconds")
            raise TransportError(spec.method.value, str(url),
                                 f"timed out after {self.config.timeout} seconds",
                                 timeout=self.config.timeout)
        except aiohttp.ClientError as e:
            logging.error(f"[WixClient] {spec.method.value} {url} failed: {e}")
            raise TransportError(spec.method.value, str(url), str(e) or type(e).__name__)

        envelope = ResponseEnvelope(status=status, data=parse_body(text))
        if envelope.ok:
            logging.info(f"[WixClient] {spec.method.value} {url.path} returned {status}")
        else:
            logging.warning(f"[WixClient] {spec.method.value} {url.path} returned {status}")
        return envelope

    async def patch_item_data(self, path: str, patch: Any) -> ResponseEnvelope:
        """PATCH a Content Manager item, wrapping the patch as {"data": patch}

        Only the fixed headers and the configured default tenant are sent.
        """
        spec = RequestSpec(method=HTTPMethod.PATCH, path=path, body={"data": patch})
        return await self.request(spec)


__all__ = [
    "WixClient",
    "SITE_ID_HEADER",
    "stringify_query_value",
]
