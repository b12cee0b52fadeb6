"""HTTP implementation of the ReleaseSource port."""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..application.domain import Asset, Release, ReleaseSource
from ..application.exceptions import APIError, FetchError

from .api_models import AssetDetails, ReleaseResponse
from .base_client import BaseClient
from .decorators import retry_on_network_error

_GITHUB_ACCEPT = "application/vnd.github+json"


class HttpReleaseSource(BaseClient, ReleaseSource):
    """A release source that reads the GitHub "latest release" endpoint."""

    def __init__(
        self,
        client: httpx.Client,
        api_url: str,
        timeout: float,
        token: Optional[str] = None,
    ):
        """Initializes the release source adapter."""
        super().__init__(client, token)
        self.endpoint = api_url
        self.timeout = timeout

    def _map_to_domain(self, dto: AssetDetails) -> Asset:
        """Maps a single API DTO to a domain model."""
        return Asset(url=dto.browser_download_url, digest=dto.digest)

    @retry_on_network_error
    def _execute_fetch(self) -> Any:
        """Executes the raw HTTP GET request."""
        headers = {"Accept": _GITHUB_ACCEPT, **self._auth_headers()}
        response = self.client.get(
            self.endpoint,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def _validate_and_extract(self, json_data: Any) -> ReleaseResponse:
        """Validates raw response data against the release contract."""
        try:
            return ReleaseResponse.model_validate(json_data)
        except ValidationError as e:
            raise APIError(f"Unexpected release metadata format: {e}") from e

    def get_latest_release(self) -> Release:
        """
        Orchestrates fetching, validating, and mapping release information.

        Returns:
            The latest release with the assets that carry a download URL.

        Raises:
            FetchError: If the endpoint cannot be reached after retries.
            APIError: If the response is not a valid release document.
        """

        self.logger.debug(f"Requesting {self.endpoint}")
        try:
            raw_data = self._execute_fetch()
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch release metadata: {e}") from e
        except ValueError as e:
            raise APIError(f"Release metadata is not valid JSON: {e}") from e

        response = self._validate_and_extract(raw_data)
        assets = tuple(
            self._map_to_domain(dto)
            for dto in response.assets
            if dto.browser_download_url
        )

        self.logger.info(
            f"Release {response.tag_name or '(untagged)'} lists "
            f"{len(assets)} assets."
        )

        return Release(tag=response.tag_name, assets=assets)
