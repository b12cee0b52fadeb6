"""Base class and transport factory for HTTP clients."""

import logging
import ssl
from typing import Dict, Optional

import httpx

from ..application.exceptions import ConfigurationError, TrustViolationError

_USER_AGENT = "udevg-termux"


def _require_https(request: httpx.Request):
    """Refuse any request, including redirects, that is not HTTPS."""
    if request.url.scheme != "https":
        raise TrustViolationError(f"Refusing non-HTTPS request: {request.url}")


def build_http_client(
    timeout: float, transport: Optional[httpx.BaseTransport] = None
) -> httpx.Client:
    """
    Create the shared client: HTTPS only, TLS 1.2 or newer, redirects
    followed (release downloads redirect to a CDN host).
    """
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return httpx.Client(
        verify=context,
        transport=transport,
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": _USER_AGENT},
        event_hooks={"request": [_require_https]},
    )


class BaseClient:
    """A base client that handles an HTTP client and token configuration."""

    def __init__(self, client: httpx.Client, token: Optional[str] = None):
        """
        Initializes the base client.

        Args:
            client: An instance of httpx.Client.
            token: An optional GitHub token, used to lift API rate limits.

        Raises:
            ConfigurationError: If the token appears to be a placeholder.
        """

        if token and "YOUR_" in token.upper():
            raise ConfigurationError(
                f"Authentication token for {self.__class__.__name__} is a "
                f"placeholder. Please check your config files."
            )

        self.client = client
        self.token = token or None
        self.logger = logging.getLogger(self.__class__.__name__)

    def _auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
