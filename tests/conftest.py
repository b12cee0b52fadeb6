"""
Pytest configuration and fixtures for installer tests.
"""

import hashlib
import time
import zipfile
from pathlib import Path
from typing import Dict

import pytest

from helpers import HS_URL, NF_URL, STANDARD_URL, TRUSTED_PREFIX, font_names_for
from udevg_termux.application.release import ReleaseResolver
from udevg_termux.application.selector import FontSelector


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    """Make tenacity's fixed backoff instantaneous."""
    monkeypatch.setattr(time, "sleep", lambda seconds: None)


@pytest.fixture
def make_zip(tmp_path):
    """Factory that writes a zip archive from a mapping of entry -> bytes."""

    def _make_zip(name: str, entries: Dict[str, bytes]) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry, data in entries.items():
                zf.writestr(entry, data)
        return path

    return _make_zip


@pytest.fixture
def nf_archive_bytes(make_zip):
    """Bytes of a release-like NF archive with every variant."""
    entries = {
        f"UDEVGothicNF_v2.1.0/{name}": name.encode()
        for name in font_names_for("NF")
    }
    return make_zip("nf-source.zip", entries).read_bytes()


@pytest.fixture
def sha256_of():
    return lambda data: hashlib.sha256(data).hexdigest()


@pytest.fixture
def release_json():
    """A trimmed GitHub "latest release" document."""
    return {
        "tag_name": "v2.1.0",
        "assets": [
            {
                "name": "UDEVGothic_v2.1.0.zip",
                "browser_download_url": STANDARD_URL,
                "digest": None,
            },
            {
                "name": "UDEVGothic_NF_v2.1.0.zip",
                "browser_download_url": NF_URL,
                "digest": None,
            },
            {
                "name": "UDEVGothic_HS_v2.1.0.zip",
                "browser_download_url": HS_URL,
                "digest": None,
            },
            {
                "name": "README.txt",
                "browser_download_url": TRUSTED_PREFIX + "v2.1.0/README.txt",
            },
        ],
    }


@pytest.fixture
def resolver():
    return ReleaseResolver(
        product="UDEVGothic",
        trusted_prefix=TRUSTED_PREFIX,
        archive_extension=".zip",
    )


@pytest.fixture
def selector():
    return FontSelector(
        product="UDEVGothic", default_font_name="UDEVGothicNF-Regular.ttf"
    )


@pytest.fixture
def archives(make_zip):
    """Release-like archives for the three bundles, keyed by download URL."""
    payloads = {}
    for url, token, folder in (
        (STANDARD_URL, "", "UDEVGothic_v2.1.0"),
        (NF_URL, "NF", "UDEVGothic_NF_v2.1.0"),
        (HS_URL, "HS", "UDEVGothic_HS_v2.1.0"),
    ):
        entries = {f"{folder}/{name}": name.encode() for name in font_names_for(token)}
        entries[f"{folder}/LICENSE"] = b"OFL"
        payloads[url] = make_zip(f"{folder}.zip", entries).read_bytes()
    return payloads
