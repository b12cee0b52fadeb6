"""
Core business exceptions for the font installer.

This module defines a hierarchy of custom exceptions to allow for granular
error handling and clear separation of failure domains.
"""

from typing import Sequence


class InstallerError(Exception):
    """Base exception for all installer errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(InstallerError):
    """Raised for errors related to application configuration."""
    pass


class ConfigurationConflictError(ConfigurationError):
    """Raised when command-line flags contradict each other."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(InstallerError):
    """Base class for errors related to external systems (network, API, etc.)."""
    pass


class APIError(InfrastructureError):
    """Raised when the release metadata cannot be fetched or understood."""
    pass


class FetchError(InfrastructureError):
    """Raised when a file download fails after exhausting retries."""
    pass


# --- Domain/Business Logic Errors ---

class DomainError(InstallerError):
    """Base class for errors related to business logic failures."""
    pass


class TrustViolationError(DomainError):
    """Raised when a URL lies outside the trusted release namespace."""
    pass


class IntegrityError(DomainError):
    """Raised when an archive is corrupt or its checksum does not match."""
    pass


class DigestUnavailableError(IntegrityError):
    """Raised when strict verification is requested but no digest exists."""
    pass


class UnsafeArchiveEntryError(DomainError):
    """Raised when an archive entry would escape the extraction directory."""

    def __init__(self, entry: str):
        super().__init__(f"Archive contains unsafe path: {entry}")
        self.entry = entry


class ArchiveTooLargeError(DomainError):
    """Raised when an archive's declared uncompressed size is over the limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Archive is too large when uncompressed ({size} bytes). "
            f"Limit: {limit} bytes."
        )
        self.size = size
        self.limit = limit


class NoArchiveAssetError(DomainError):
    """Raised when the latest release carries no zip archive."""
    pass


class SelectionError(DomainError):
    """Base class for failures while choosing a font."""
    pass


class AmbiguousSelectionError(SelectionError):
    """Raised when an explicit font name matches zero or several fonts."""

    def __init__(self, requested: str, candidates: Sequence[str]):
        self.requested = requested
        self.candidates = list(candidates)
        listing = "\n".join(f"  {name}" for name in self.candidates)
        super().__init__(
            f"'{requested}' did not match exactly one font in archive. "
            f"Candidates:\n{listing}"
        )


class PresetConflictError(SelectionError):
    """Raised when a preset or font hint names both the HS and NF bundles."""
    pass


class FontSelectionError(SelectionError):
    """Raised when no font can be resolved from the archive."""
    pass


class FontNotFoundError(SelectionError):
    """Raised when the archive holds no usable font file."""
    pass


# --- Interaction Errors ---

class InteractionError(InstallerError):
    """Base class for errors while talking to the user."""
    pass


class InteractiveUnavailableError(InteractionError):
    """Raised when a prompt is required but no terminal is attached."""
    pass


class InvalidChoiceError(InteractionError):
    """Raised for an unusable answer to a numbered prompt; callers re-prompt."""
    pass
