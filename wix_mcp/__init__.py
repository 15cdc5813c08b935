"""MCP server forwarding typed tool calls to the Wix REST API."""

from .client import WixClient
from .config import WixConfig, load_config
from .exceptions import ConfigurationError, InvalidRequestError, TransportError, WixMcpError
from .models import HTTPMethod, RawText, RequestSpec, ResponseEnvelope, StructuredValue

__all__ = [
    "WixClient",
    "WixConfig",
    "load_config",
    "WixMcpError",
    "ConfigurationError",
    "InvalidRequestError",
    "TransportError",
    "HTTPMethod",
    "RequestSpec",
    "ResponseEnvelope",
    "StructuredValue",
    "RawText",
]
