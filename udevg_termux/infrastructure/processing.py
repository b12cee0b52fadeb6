"""
Infrastructure adapters for hashing and archive processing tasks.
"""

import hashlib
import logging
import re
import zipfile
import zlib
from pathlib import Path
from typing import List, Optional, Sequence

from ..application.domain import ArchiveInspector, Hasher
from ..application.exceptions import (
    ArchiveTooLargeError,
    FontNotFoundError,
    IntegrityError,
    UnsafeArchiveEntryError,
)

# Absolute paths, backslashes and ".." segments could escape the target dir.
_UNSAFE_ENTRY = re.compile(r"(^/|\\|(^|/)\.\.(/|$))")
_FONT_SUFFIXES = {".ttf", ".otf"}


class Sha256Hasher(Hasher):
    """An adapter that implements the Hasher port using SHA256."""

    def __init__(self, chunk_size: int = 65536):
        """Initializes the hasher."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.chunk_size = chunk_size

    def compute(self, file_path: Path) -> str:
        """Return the lowercase hex SHA256 of a file, read in chunks."""
        hasher = hashlib.sha256()
        with open(file_path, "rb") as f:
            while chunk := f.read(self.chunk_size):
                hasher.update(chunk)
        return hasher.hexdigest()

    def matches(self, file_path: Path, expected: str) -> bool:
        return self.compute(file_path) == expected.lower()

    def verify(self, file_path: Path, expected: str):
        """
        Check a file against its expected checksum.

        Args:
            file_path: The file to hash.
            expected: Hex SHA256 in any case.

        Raises:
            IntegrityError: If the checksum does not match.
        """

        self.logger.info(f"Computing checksum for {file_path.name}...")
        calculated_hash = self.compute(file_path)

        if calculated_hash != expected.lower():
            raise IntegrityError(
                f"Checksum mismatch for {file_path.name}. "
                f"Expected {expected.lower()}, got {calculated_hash}"
            )

        self.logger.info(f"Checksum for {file_path.name} verified successfully.")


class ZipArchiveInspector(ArchiveInspector):
    """
    An adapter that implements the ArchiveInspector port for zip files.

    The size ceiling is checked against the sizes the archive declares for
    its entries; a crafted archive that lies about them is not caught here.
    """

    def __init__(self, max_uncompressed_bytes: int):
        """Initializes the inspector."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.max_uncompressed_bytes = max_uncompressed_bytes

    def is_valid_archive(self, path: Path) -> bool:
        """Return True when ``path`` is a zip whose entries all decompress cleanly."""
        try:
            with zipfile.ZipFile(path) as zf:
                return zf.testzip() is None
        except (
            zipfile.BadZipFile,
            zlib.error,
            NotImplementedError,
            OSError,
            EOFError,
            RuntimeError,
        ):
            return False

    def list_entries(self, path: Path) -> List[str]:
        with zipfile.ZipFile(path) as zf:
            return zf.namelist()

    @staticmethod
    def validate_entries(entries: Sequence[str]):
        """
        Reject archives whose entries could land outside the target directory.

        Raises:
            UnsafeArchiveEntryError: Naming the first unsafe entry.
        """
        for entry in entries:
            if _UNSAFE_ENTRY.search(entry):
                raise UnsafeArchiveEntryError(entry)

    def uncompressed_size(self, path: Path) -> int:
        with zipfile.ZipFile(path) as zf:
            return sum(info.file_size for info in zf.infolist())

    def enforce_limit(self, path: Path, max_bytes: Optional[int] = None):
        """
        Raises:
            ArchiveTooLargeError: If the declared size exceeds the ceiling.
        """
        limit = self.max_uncompressed_bytes if max_bytes is None else max_bytes
        size = self.uncompressed_size(path)
        if size > limit:
            raise ArchiveTooLargeError(size, limit)

    def extract(self, path: Path, destination: Path):
        """
        Extract an archive after its entries and size have been checked.

        Nothing is written to ``destination`` unless both checks pass.

        Raises:
            UnsafeArchiveEntryError: If an entry has an unsafe path.
            ArchiveTooLargeError: If the archive is over the size ceiling.
        """
        self.validate_entries(self.list_entries(path))
        self.enforce_limit(path)

        destination.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path) as zf:
            zf.extractall(destination)
        self.logger.debug(f"Extracted {path.name} into {destination}")

    def collect_font_names(self, directory: Path) -> List[str]:
        """Sorted, unique base names of the font files under ``directory``."""
        return sorted({
            p.name
            for p in directory.rglob("*")
            if p.is_file() and p.suffix.lower() in _FONT_SUFFIXES
        })

    def locate_font(self, directory: Path, name: str) -> Path:
        """
        Find the extracted file called ``name``, ignoring case as a fallback.

        Raises:
            FontNotFoundError: If no such file exists.
        """
        files = sorted(p for p in directory.rglob("*") if p.is_file())
        for p in files:
            if p.name == name:
                return p
        for p in files:
            if p.name.lower() == name.lower():
                return p

        raise FontNotFoundError(
            f"Font file not found in archive: {name}. "
            f"Hint: use --list / --preset / --font"
        )
