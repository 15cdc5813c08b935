"""Tool declarations and handlers exposed by the Wix MCP server.

Each entry of TOOLS pairs an MCP tool declaration with the coroutine that
runs it. Handlers take the shared WixClient and the tool arguments and
return a CallToolResult.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping
from urllib.parse import quote

from mcp import types as mcp_types

from .client import WixClient
from .exceptions import InvalidRequestError
from .models import HTTPMethod, RequestSpec

SITE_CONFIG_PATH = "/content/v4/collections/SiteConfig/items/main"
COLLECTION_ITEM_PATH = "/content/v4/collections/{collection_id}/items/{item_id}"

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "!~*'()"

Handler = Callable[[WixClient, Mapping[str, Any]], Awaitable[mcp_types.CallToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    tool: mcp_types.Tool
    handler: Handler

    @property
    def name(self) -> str:
        return self.tool.name


def collection_item_path(collection_id: str, item_id: str) -> str:
    return COLLECTION_ITEM_PATH.format(
        collection_id=quote(collection_id, safe=_URI_COMPONENT_SAFE),
        item_id=quote(item_id, safe=_URI_COMPONENT_SAFE),
    )


def _require_object(arguments: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = arguments.get(key)
    if not isinstance(value, Mapping):
        raise InvalidRequestError(f"`{key}` is required and must be an object.")
    return dict(value)


def _require_string(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidRequestError(f"`{key}` is required and must be a non-empty string.")
    return value


def _require_segment(arguments: Mapping[str, Any], key: str) -> str:
    value = _require_string(arguments, key)
    # dot segments would be collapsed out of the URL path
    if value in (".", ".."):
        raise InvalidRequestError(f"`{key}` must not be '.' or '..'.")
    return value


# ▸▸▸ TOOL 1 – Generic REST call
async def wix_request(client: WixClient, arguments: Mapping[str, Any]) -> mcp_types.CallToolResult:
    """Call any Wix REST endpoint described by a RequestSpec."""
    spec = RequestSpec.from_arguments(arguments)
    envelope = await client.request(spec)
    return envelope.to_tool_result()


# ▸▸▸ TOOL 2 – SiteConfig/main patch
async def update_site_config(client: WixClient, arguments: Mapping[str, Any]) -> mcp_types.CallToolResult:
    patch = _require_object(arguments, "data")
    envelope = await client.patch_item_data(SITE_CONFIG_PATH, patch)
    return envelope.to_tool_result()


# ▸▸▸ TOOL 3 – Any collection item patch
async def update_collection_item(client: WixClient, arguments: Mapping[str, Any]) -> mcp_types.CallToolResult:
    collection_id = _require_segment(arguments, "collectionId")
    item_id = _require_segment(arguments, "itemId")
    patch = _require_object(arguments, "data")
    path = collection_item_path(collection_id, item_id)
    logging.info(f"[Tool] update_collection_item collection={collection_id} item={item_id}")
    envelope = await client.patch_item_data(path, patch)
    return envelope.to_tool_result()


_OBJECT = {"type": "object", "additionalProperties": True}

TOOLS: List[ToolSpec] = [
    ToolSpec(
        tool=mcp_types.Tool(
            name="wix_request",
            description=(
                "Call Wix REST API. Provide method, path (e.g. /site-properties/v4/sites/{siteId}), "
                "optional query/body/headers. Adds Authorization automatically."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "method": {"type": "string", "enum": [m.value for m in HTTPMethod]},
                    "path": {"type": "string", "description": "Path starting with / under wixapis.com"},
                    "query": dict(_OBJECT),
                    "body": dict(_OBJECT),
                    "headers": dict(_OBJECT),
                    "siteId": {"type": "string", "description": "Overrides default WIX_SITE_ID"},
                },
                "required": ["method", "path"],
            },
        ),
        handler=wix_request,
    ),
    ToolSpec(
        tool=mcp_types.Tool(
            name="update_site_config",
            description="Patch Content Manager SiteConfig/main with provided fields.",
            inputSchema={
                "type": "object",
                "properties": {"data": dict(_OBJECT)},
                "required": ["data"],
            },
        ),
        handler=update_site_config,
    ),
    ToolSpec(
        tool=mcp_types.Tool(
            name="update_collection_item",
            description="Patch any Content Manager item by collectionId and itemId.",
            inputSchema={
                "type": "object",
                "properties": {
                    "collectionId": {"type": "string"},
                    "itemId": {"type": "string"},
                    "data": dict(_OBJECT),
                },
                "required": ["collectionId", "itemId", "data"],
            },
        ),
        handler=update_collection_item,
    ),
]

TOOLS_BY_NAME: Dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}


__all__ = [
    "ToolSpec",
    "TOOLS",
    "TOOLS_BY_NAME",
    "SITE_CONFIG_PATH",
    "collection_item_path",
    "wix_request",
    "update_site_config",
    "update_collection_item",
]
