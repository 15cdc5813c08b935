"""Data models for Wix REST requests and their normalized responses.

This module contains the request description passed to the client and the
envelope every tool call returns, success or failure.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from mcp import types as mcp_types

from .exceptions import InvalidRequestError


class HTTPMethod(Enum):
    """Supported HTTP methods for Wix API calls"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @property
    def sends_body(self) -> bool:
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


@dataclass(frozen=True)
class RequestSpec:
    """One outbound Wix API call

    Args:
        method: HTTP method to use
        path: Path under the API host, must start with "/"
        query: Query parameters appended in insertion order
        body: JSON body, only sent for POST/PUT/PATCH
        headers: Caller headers overlaid on the defaults
        site_id: Tenant id overriding the configured default
    """
    method: HTTPMethod
    path: str
    query: Dict[str, Any] = field(default_factory=dict)
    body: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=dict)
    site_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.path, str) or not self.path.startswith("/"):
            raise InvalidRequestError("path must start with '/' (relative to wixapis.com)")

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "RequestSpec":
        """Create a RequestSpec from wix_request tool arguments

        Raises:
            InvalidRequestError: If a field is missing or has the wrong type
        """
        raw_method = arguments.get("method")
        try:
            method = HTTPMethod(raw_method)
        except ValueError:
            allowed = ", ".join(m.value for m in HTTPMethod)
            raise InvalidRequestError(f"method must be one of {allowed}, got {raw_method!r}")

        path = arguments.get("path")
        if not isinstance(path, str):
            raise InvalidRequestError("`path` is required and must be a string.")

        query = arguments.get("query") or {}
        if not isinstance(query, Mapping):
            raise InvalidRequestError("`query` must be an object.")

        headers = arguments.get("headers") or {}
        if not isinstance(headers, Mapping):
            raise InvalidRequestError("`headers` must be an object.")

        site_id = arguments.get("siteId")
        if site_id is not None and not isinstance(site_id, str):
            raise InvalidRequestError("`siteId` must be a string.")

        return cls(
            method=method,
            path=path,
            query=dict(query),
            body=arguments.get("body"),
            headers={str(k): str(v) for k, v in headers.items()},
            site_id=site_id or None,
        )


@dataclass(frozen=True)
class StructuredValue:
    """Response body that parsed as JSON"""
    value: Any


@dataclass(frozen=True)
class RawText:
    """Response body that was not valid JSON, kept verbatim"""
    text: str


ResponseData = Union[StructuredValue, RawText]


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_body(text: str) -> ResponseData:
    try:
        return StructuredValue(json.loads(text, parse_constant=_reject_constant))
    except ValueError:
        return RawText(text)


@dataclass(frozen=True)
class ResponseEnvelope:
    """Upstream status plus normalized body"""
    status: int
    data: ResponseData

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def to_dict(self) -> dict:
        if isinstance(self.data, StructuredValue):
            payload = self.data.value
        else:
            payload = self.data.text
        return {"status": self.status, "data": payload}

    def to_text(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def to_tool_result(self) -> mcp_types.CallToolResult:
        return mcp_types.CallToolResult(
            content=[mcp_types.TextContent(type="text", text=self.to_text())],
            isError=not self.ok,
        )


__all__ = [
    "HTTPMethod",
    "RequestSpec",
    "StructuredValue",
    "RawText",
    "ResponseData",
    "ResponseEnvelope",
    "parse_body",
]
