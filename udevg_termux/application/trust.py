"""
Trust rules for download URLs and the checksum verification policy.
"""

import dataclasses
import logging
import re
from typing import Optional

from .domain import Asset
from .exceptions import ConfigurationConflictError, DigestUnavailableError

logger = logging.getLogger(__name__)

_SHA256_DIGEST = re.compile(r"^sha256:([0-9a-fA-F]{64})$")


def trusted_prefix(owner: str, repo: str) -> str:
    """Return the release download namespace of a GitHub repository."""
    return f"https://github.com/{owner}/{repo}/releases/download/"


def is_trusted_url(url: str, prefix: str) -> bool:
    return url.startswith(prefix)


def extract_digest(field: Optional[str]) -> Optional[str]:
    """
    Return the lowercase hex SHA-256 from a ``sha256:<hex>`` digest field.

    Any other algorithm, a malformed value or a missing field yields None.
    """
    if not field:
        return None
    match = _SHA256_DIGEST.match(field)
    if match is None:
        return None
    return match.group(1).lower()


@dataclasses.dataclass(frozen=True)
class VerificationPolicy:
    """Whether to verify downloads, and whether a missing digest is fatal."""

    verify: bool = True
    strict: bool = False

    def __post_init__(self):
        if not self.verify and self.strict:
            raise ConfigurationConflictError(
                "--no-verify and --require-verify cannot be used together."
            )

    @classmethod
    def from_flags(cls, skip_verify: bool, require_verify: bool):
        return cls(verify=not skip_verify, strict=bool(require_verify))

    def expected_digest(self, asset: Asset) -> Optional[str]:
        """
        Resolve the digest a download of ``asset`` must match.

        Returns None when verification is disabled or, outside strict mode,
        when the release metadata carries no usable digest.

        Raises:
            DigestUnavailableError: In strict mode, if no digest is available.
        """
        if not self.verify:
            return None

        digest = extract_digest(asset.digest)
        if digest is not None:
            return digest

        if self.strict:
            raise DigestUnavailableError(
                f"Could not get SHA256 digest for {asset.file_name} "
                f"from release metadata."
            )

        logger.warning(
            f"Could not get SHA256 digest for {asset.file_name} from release "
            f"metadata. Continuing without SHA256 verification; use "
            f"--require-verify to fail instead."
        )
        return None
