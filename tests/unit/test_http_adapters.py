"""Tests for the HTTP release source and downloader over a mock transport."""

import httpx
import pytest

from helpers import NF_URL
from udevg_termux.application.exceptions import (
    APIError,
    ConfigurationError,
    FetchError,
    TrustViolationError,
)
from udevg_termux.infrastructure.api_client import HttpReleaseSource
from udevg_termux.infrastructure.base_client import build_http_client
from udevg_termux.infrastructure.downloader import HttpDownloader

API_URL = "https://api.github.com/repos/yuru7/udev-gothic/releases/latest"


def _client(handler):
    return build_http_client(timeout=5, transport=httpx.MockTransport(handler))


class TestHttpReleaseSource:
    """Test fetching and validating release metadata."""

    def test_maps_assets(self, release_json):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=release_json)

        source = HttpReleaseSource(_client(handler), api_url=API_URL, timeout=5)
        release = source.get_latest_release()

        assert release.tag == "v2.1.0"
        assert len(release.assets) == 4
        assert release.assets[1].url == NF_URL
        assert seen[0].headers["Accept"] == "application/vnd.github+json"
        assert "Authorization" not in seen[0].headers

    def test_token_is_sent(self, release_json):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=release_json)

        source = HttpReleaseSource(
            _client(handler), api_url=API_URL, timeout=5, token="ghp_real"
        )
        source.get_latest_release()

        assert seen[0].headers["Authorization"] == "Bearer ghp_real"

    def test_placeholder_token_is_rejected(self):
        with pytest.raises(ConfigurationError, match="placeholder"):
            HttpReleaseSource(
                _client(lambda r: httpx.Response(200)),
                api_url=API_URL,
                timeout=5,
                token="YOUR_GITHUB_TOKEN",
            )

    def test_assets_without_url_are_skipped(self):
        payload = {"tag_name": "v1", "assets": [{"name": "x.zip"}, {"browser_download_url": NF_URL}]}
        source = HttpReleaseSource(
            _client(lambda r: httpx.Response(200, json=payload)), api_url=API_URL, timeout=5
        )
        assert [a.url for a in source.get_latest_release().assets] == [NF_URL]

    def test_transient_errors_are_retried(self, release_json):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=release_json)

        source = HttpReleaseSource(_client(handler), api_url=API_URL, timeout=5)
        assert source.get_latest_release().tag == "v2.1.0"
        assert len(attempts) == 3

    def test_retries_are_bounded(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("unreachable", request=request)

        source = HttpReleaseSource(_client(handler), api_url=API_URL, timeout=5)
        with pytest.raises(FetchError):
            source.get_latest_release()
        assert len(attempts) == 4

    def test_not_found_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(404)

        source = HttpReleaseSource(_client(handler), api_url=API_URL, timeout=5)
        with pytest.raises(FetchError):
            source.get_latest_release()
        assert len(attempts) == 1

    def test_invalid_documents(self):
        source = HttpReleaseSource(
            _client(lambda r: httpx.Response(200, json={"assets": "nope"})),
            api_url=API_URL,
            timeout=5,
        )
        with pytest.raises(APIError):
            source.get_latest_release()

        source = HttpReleaseSource(
            _client(lambda r: httpx.Response(200, content=b"<html>")),
            api_url=API_URL,
            timeout=5,
        )
        with pytest.raises(APIError):
            source.get_latest_release()

    def test_plain_http_endpoint_is_refused(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        source = HttpReleaseSource(
            _client(handler), api_url=API_URL.replace("https", "http"), timeout=5
        )
        with pytest.raises(TrustViolationError):
            source.get_latest_release()
        assert calls == []


class TestHttpDownloader:
    """Test streaming downloads."""

    def test_download_follows_redirect(self, tmp_path):
        cdn = "https://objects.githubusercontent.com/blob"

        def handler(request):
            if str(request.url) == NF_URL:
                return httpx.Response(302, headers={"Location": cdn})
            return httpx.Response(200, content=b"zip-bytes" * 100)

        downloader = HttpDownloader(_client(handler), timeout=5, chunk_size=64)
        target = downloader.download(NF_URL, tmp_path / "sub" / "a.zip")

        assert target.read_bytes() == b"zip-bytes" * 100

    def test_redirect_to_plain_http_is_refused(self, tmp_path):
        def handler(request):
            if request.url.scheme == "https":
                return httpx.Response(302, headers={"Location": "http://mirror.example/a.zip"})
            return httpx.Response(200, content=b"x")

        downloader = HttpDownloader(_client(handler), timeout=5, chunk_size=64)
        with pytest.raises(TrustViolationError):
            downloader.download(NF_URL, tmp_path / "a.zip")

    def test_server_errors_exhaust_retries(self, tmp_path):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(500)

        downloader = HttpDownloader(_client(handler), timeout=5, chunk_size=64)
        with pytest.raises(FetchError, match="Failed to download"):
            downloader.download(NF_URL, tmp_path / "a.zip")
        assert len(attempts) == 4

    def test_connection_reset_mid_body_is_retried(self, tmp_path):
        attempts = []

        class ResetStream(httpx.SyncByteStream):
            def __iter__(self):
                yield b"zip-"
                raise httpx.ReadError("connection reset")

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(200, stream=ResetStream())
            return httpx.Response(200, content=b"zip-bytes")

        downloader = HttpDownloader(_client(handler), timeout=5, chunk_size=64)
        target = downloader.download(NF_URL, tmp_path / "a.zip")

        assert target.read_bytes() == b"zip-bytes"
        assert len(attempts) == 2

    def test_truncated_body_is_detected(self, tmp_path):
        def handler(request):
            return httpx.Response(
                200, content=b"short", headers={"Content-Length": "100"}
            )

        downloader = HttpDownloader(_client(handler), timeout=5, chunk_size=64)
        with pytest.raises((FetchError, httpx.HTTPError)):
            downloader.download(NF_URL, tmp_path / "a.zip")
