"""
Pydantic models for validating the structure of GitHub release responses.

These models serve as a strict contract for the expected JSON data, ensuring
that any deviation from this structure is caught at the infrastructure layer
before being passed to the application core.
"""

from typing import List, Optional

from pydantic import BaseModel


class AssetDetails(BaseModel):
    """
    Represents a single asset attached to a release.

    Only the fields the installer reads are declared. ``digest`` is absent
    on releases published before GitHub started computing asset digests.
    """

    name: Optional[str] = None
    browser_download_url: Optional[str] = None
    digest: Optional[str] = None
    size: Optional[int] = None


class ReleaseResponse(BaseModel):
    """Represents the top-level structure of a release API response."""

    tag_name: Optional[str] = None
    assets: List[AssetDetails] = []
