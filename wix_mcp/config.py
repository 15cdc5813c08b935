"""Process configuration read once from the environment at start-up."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://www.wixapis.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"

TOKEN_ENV = "WIX_ACCESS_TOKEN"
SITE_ID_ENV = "WIX_SITE_ID"
BASE_URL_ENV = "WIX_API_BASE_URL"
TIMEOUT_ENV = "WIX_REQUEST_TIMEOUT"
LOG_LEVEL_ENV = "WIX_MCP_LOG_LEVEL"


@dataclass(frozen=True)
class WixConfig:
    """Credential and connection settings shared by every tool call

    Args:
        access_token: Bearer token sent on every outbound request
        default_site_id: Tenant id used when a call does not name one
        base_url: API host, without trailing slash
        timeout: Total timeout for one HTTP round trip, in seconds
    """
    access_token: str
    default_site_id: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    def describe(self) -> str:
        """One-line summary safe for logs (token masked)"""
        masked = self.access_token[:4] + "..." if len(self.access_token) > 8 else "***"
        return (f"base_url={self.base_url} site_id={self.default_site_id or '-'} "
                f"timeout={self.timeout}s token={masked}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> WixConfig:
    """Build a WixConfig from environment variables

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        The frozen configuration

    Raises:
        ConfigurationError: If the token is missing or the timeout is invalid
    """
    env = os.environ if environ is None else environ

    token = (env.get(TOKEN_ENV) or "").strip()
    if not token:
        raise ConfigurationError(f"{TOKEN_ENV} is required.")

    raw_timeout = env.get(TIMEOUT_ENV)
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"{TIMEOUT_ENV} must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ConfigurationError(f"{TIMEOUT_ENV} must be positive, got {raw_timeout!r}")

    base_url = (env.get(BASE_URL_ENV) or DEFAULT_BASE_URL).rstrip("/")

    return WixConfig(
        access_token=token,
        default_site_id=env.get(SITE_ID_ENV) or None,
        base_url=base_url,
        timeout=timeout,
    )


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    env = os.environ if environ is None else environ
    level_name = (env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.getLogger().setLevel(level)


__all__ = [
    "WixConfig",
    "load_config",
    "configure_logging",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
]
