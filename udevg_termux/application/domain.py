"""
This module defines the core domain models for the application.

These classes represent the pure, technology-agnostic entities and data
structures that the installer's business logic operates on, together with
the ports that infrastructure adapters implement.
"""

import dataclasses
import enum
from pathlib import Path

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple


# --- Domain Models ---

class BundleKey(str, enum.Enum):
    """The font family groupings published by the upstream release."""

    STANDARD = "standard"
    NF = "nf"
    HS = "hs"

    @property
    def label(self) -> str:
        return "standard" if self is BundleKey.STANDARD else self.value.upper()


@dataclasses.dataclass(frozen=True)
class Asset:
    """A downloadable file attached to a release."""

    url: str
    digest: Optional[str] = None

    @property
    def file_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]


@dataclasses.dataclass(frozen=True)
class Release:
    """A transient data object for the latest upstream release."""

    tag: Optional[str]
    assets: Tuple[Asset, ...]


@dataclasses.dataclass(frozen=True)
class CachedArchive:
    """
    A domain model representing an archive held in the local cache,
    defined by its cache key, location and verified checksum.
    """

    key: str
    path: Path
    sha256: Optional[str] = None
    from_cache: bool = False


@dataclasses.dataclass(frozen=True)
class FontRecord:
    """The structured attributes encoded in a font file name."""

    file_name: str
    base: str
    size: str
    width: str
    style: str

    def field(self, axis: str) -> str:
        return getattr(self, axis)


@dataclasses.dataclass(frozen=True)
class SelectionCriteria:
    """Requested font attributes; ``None`` means any value."""

    bundle: Optional[str] = None
    size: Optional[str] = None
    width: Optional[str] = None
    style: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class InstallOptions:
    """The decisions a user supplies on the command line."""

    font_name: Optional[str] = None
    preset: Optional[str] = None
    list_only: bool = False
    assume_yes: bool = False


@dataclasses.dataclass(frozen=True)
class InstallResult:
    """Outcome of one installer run."""

    font_name: Optional[str]
    target: Path
    installed: bool
    reloaded: bool = False


# --- Ports (Interfaces) ---

class ReleaseSource(ABC):
    """A port for the upstream release metadata."""

    @abstractmethod
    def get_latest_release(self) -> Release:
        """Fetches metadata for the latest release."""
        pass


class Downloader(ABC):
    """A port for any file downloader."""

    @abstractmethod
    def download(self, url: str, destination: Path) -> Path:
        """Downloads a single file to a destination path."""
        pass


class Hasher(ABC):
    """A port for hashing file contents."""

    @abstractmethod
    def matches(self, path: Path, expected: str) -> bool:
        """Returns True when the file's digest equals ``expected``."""
        pass

    @abstractmethod
    def verify(self, path: Path, expected: str):
        """
        Verifies the integrity of a file.
        Raises IntegrityError on mismatch.
        """
        pass


class ArchiveInspector(ABC):
    """A port for checking and unpacking font archives."""

    @abstractmethod
    def is_valid_archive(self, path: Path) -> bool:
        pass

    @abstractmethod
    def extract(self, path: Path, destination: Path):
        """Validates and extracts an archive into ``destination``."""
        pass

    @abstractmethod
    def collect_font_names(self, directory: Path) -> Sequence[str]:
        pass

    @abstractmethod
    def locate_font(self, directory: Path, name: str) -> Path:
        pass


class ArchiveStore(ABC):
    """A port for a local store of downloaded archives."""

    @abstractmethod
    def fetch(
        self, url: str, destination: Path, expected_sha256: Optional[str] = None
    ) -> CachedArchive:
        """Places the archive for ``url`` at ``destination``."""
        pass


class Prompter(ABC):
    """A port for asking the user questions."""

    @abstractmethod
    def is_interactive(self) -> bool:
        pass

    @abstractmethod
    def ask(
        self, question: str, choices: Sequence[str], default_index: int
    ) -> str:
        """Shows numbered ``choices`` and returns the raw answer."""
        pass

    @abstractmethod
    def confirm(self, question: str) -> bool:
        pass


class SettingsReloader(ABC):
    """A port for telling the terminal application to reload its settings."""

    @abstractmethod
    def reload(self) -> bool:
        """Returns True when the settings were reloaded."""
        pass
