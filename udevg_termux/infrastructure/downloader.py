"""HTTP implementation of the Downloader port."""

from pathlib import Path
from typing import Iterator, Optional

import httpx
from tqdm import tqdm

from ..application.domain import Downloader
from ..application.exceptions import FetchError

from .base_client import BaseClient
from .decorators import retry_on_network_error


class HttpDownloader(BaseClient, Downloader):
    """A downloader that streams files via HTTP with a progress bar."""

    def __init__(
        self,
        client: httpx.Client,
        timeout: float,
        chunk_size: int,
        token: Optional[str] = None,
    ):
        """Initializes the downloader adapter."""
        super().__init__(client, token)
        self.timeout = timeout
        self.chunk_size = chunk_size

    def _stream_chunks(
        self, response: httpx.Response, target_file: Path
    ) -> Iterator[int]:
        """Produce byte counts while writing the response body to a file."""
        with open(target_file, "wb") as f:
            for chunk in response.iter_bytes(self.chunk_size):
                f.write(chunk)
                yield len(chunk)

    def _consume_stream_with_progress(
        self, stream: Iterator[int], total_size: int, desc: str
    ):
        """Consume the byte stream to update a TQDM progress bar."""

        with tqdm(
            total=total_size or None, unit="B", unit_scale=True, desc=desc
        ) as progress_bar:
            for progress in stream:
                progress_bar.update(progress)

        if total_size != 0 and progress_bar.n != total_size:
            raise FetchError(
                f"Size mismatch for {desc}: {progress_bar.n} != {total_size}"
            )

    @retry_on_network_error
    def _execute_download(self, url: str, destination: Path):
        """Manage the network request and the streaming process."""
        with self.client.stream(
            "GET", url, timeout=self.timeout, headers=self._auth_headers()
        ) as response:
            response.raise_for_status()
            total_size = 0
            if "Content-Encoding" not in response.headers:
                total_size = int(response.headers.get("Content-Length", 0))
            stream = self._stream_chunks(response, destination)
            self._consume_stream_with_progress(
                stream, total_size, destination.name
            )

    def download(self, url: str, destination: Path) -> Path:
        """
        Download ``url`` into ``destination``, replacing any existing file.

        This is the public method that fulfills the Downloader port contract.
        Transient network failures are retried; the caller owns the
        destination path and its cleanup.

        Args:
            url: The HTTPS URL to fetch.
            destination: The path to write the body to.

        Returns:
            The destination path.

        Raises:
            FetchError: If the download fails after retries.
        """

        self.logger.info(f"Downloading: {url}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._execute_download(url, destination)
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to download {url}: {e}") from e
        self.logger.info(f"Finished downloading {destination.name}")
        return destination
