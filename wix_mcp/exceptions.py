"""Exceptions raised by the Wix MCP server.

Upstream HTTP errors are not exceptions: a non-2xx response is returned as a
normal envelope with ``isError`` set. Only configuration problems, bad caller
input and transport failures raise.
"""

from typing import Optional


class WixMcpError(Exception):
    """Base class for all wix-mcp errors"""


class ConfigurationError(WixMcpError):
    """Raised at start-up when the environment is missing or invalid"""


class InvalidRequestError(WixMcpError):
    """Raised before any network activity when tool arguments are malformed"""


class TransportError(WixMcpError):
    """Raised when the HTTP call itself fails (DNS, refused connection, timeout)

    Args:
        method: HTTP method of the failed call
        url: Target URL of the failed call
        reason: Human readable description of the failure
    """

    def __init__(self, method: str, url: str, reason: str, timeout: Optional[float] = None):
        self.method = method
        self.url = url
        self.reason = reason
        self.timeout = timeout
        super().__init__(f"{method} {url} failed: {reason}")


__all__ = [
    "WixMcpError",
    "ConfigurationError",
    "InvalidRequestError",
    "TransportError",
]
