"""Local, integrity-checked cache of downloaded release archives."""

import contextlib
import logging
import os
import shutil
from pathlib import Path
from typing import Generator, Optional

from ..application.domain import (
    ArchiveInspector,
    ArchiveStore,
    CachedArchive,
    Downloader,
    Hasher,
)
from ..application.exceptions import IntegrityError


class ArchiveCache(ArchiveStore):
    """
    Keeps one copy of each archive under the cache directory.

    Entries are keyed by the archive's file name only. Two different archives
    published under the same name are told apart solely by the zip check or
    by a digest, when the release provides one.
    """

    def __init__(
        self,
        downloader: Downloader,
        hasher: Hasher,
        inspector: ArchiveInspector,
        cache_dir: Path,
    ):
        """Initializes the cache."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.downloader = downloader
        self.hasher = hasher
        self.inspector = inspector
        self.cache_dir = Path(cache_dir)

    @staticmethod
    def key_for(url: str) -> str:
        return url.rsplit("/", 1)[-1]

    def _ensure_dir(self):
        self.cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        os.chmod(self.cache_dir, 0o700)

    @contextlib.contextmanager
    def _staging_path(self, slot: Path) -> Generator[Path, None, None]:
        """Provides a per-process temporary path and ensures cleanup."""
        part_path = slot.with_name(f"{slot.name}.tmp.{os.getpid()}")
        try:
            yield part_path
        finally:
            part_path.unlink(missing_ok=True)

    def _reusable(self, slot: Path, expected_sha256: Optional[str]) -> bool:
        """Check a cached blob, purging it when it is corrupt or stale."""
        if not slot.is_file() or slot.stat().st_size == 0:
            return False

        if not self.inspector.is_valid_archive(slot):
            self.logger.warning(f"Invalid cache detected. Re-downloading: {slot}")
            slot.unlink()
            return False

        if expected_sha256 and not self.hasher.matches(slot, expected_sha256):
            self.logger.warning(f"Cache SHA256 mismatch. Re-downloading: {slot}")
            slot.unlink()
            return False

        return True

    def _download_into(
        self, url: str, slot: Path, expected_sha256: Optional[str]
    ):
        """Download, validate and atomically publish a cache entry."""
        with self._staging_path(slot) as part_path:
            self.downloader.download(url, part_path)

            if not self.inspector.is_valid_archive(part_path):
                raise IntegrityError(
                    f"Downloaded file is not a valid zip archive: {url}"
                )
            if expected_sha256:
                self.hasher.verify(part_path, expected_sha256)

            os.replace(part_path, slot)
        os.chmod(slot, 0o600)

    def fetch(
        self, url: str, destination: Path, expected_sha256: Optional[str] = None
    ) -> CachedArchive:
        """
        Guarantee ``destination`` holds the archive, downloading if necessary.

        This public method fulfills the ArchiveStore port contract. A valid
        cached copy is reused; a corrupt one is purged and fetched again.

        Args:
            url: Download URL of the archive.
            destination: Where the caller wants its working copy.
            expected_sha256: Digest to check, or None to skip the check.

        Returns:
            The cache entry that was copied to ``destination``.

        Raises:
            FetchError: If the download fails.
            IntegrityError: If a fresh download is corrupt or mismatched.
        """

        self._ensure_dir()
        key = self.key_for(url)
        slot = self.cache_dir / key

        from_cache = self._reusable(slot, expected_sha256)
        if from_cache:
            self.logger.info(f"Using cache: {slot}")
        else:
            self._download_into(url, slot, expected_sha256)

        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(slot, destination)

        return CachedArchive(
            key=key, path=slot, sha256=expected_sha256, from_cache=from_cache
        )
