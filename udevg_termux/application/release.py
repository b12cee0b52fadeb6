"""
Release resolution: picking the archive to install out of the upstream
release's assets.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from .domain import BundleKey, Prompter, Release
from .exceptions import NoArchiveAssetError, TrustViolationError
from .selector import choose_option, normalize_text
from .trust import is_trusted_url

PRESET_EXAMPLES = (
    "standard, lg, 35, 35lg",
    "nf, nflg, 35nf, 35nflg",
    "hs, hslg, 35hs, 35hslg",
    "Optional style suffix: -bold / -italic / -bolditalic",
    "Example: 35nflg-bold",
)


def file_name_from_url(url: str) -> str:
    return url.rsplit("/", 1)[-1]


class ReleaseResolver:
    """Classifies and chooses among the archives published in a release."""

    def __init__(self, product: str, trusted_prefix: str, archive_extension: str):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.product = product
        self.trusted_prefix = trusted_prefix
        self.archive_extension = archive_extension
        p = re.escape(product)
        ext = re.escape(archive_extension)
        self._templates = (
            (re.compile(rf"^{p}_NF_v.*{ext}$"), BundleKey.NF),
            (re.compile(rf"^{p}_HS_v.*{ext}$"), BundleKey.HS),
            (re.compile(rf"^{p}_v.*{ext}$"), BundleKey.STANDARD),
        )

    def collect_archive_urls(self, release: Release) -> List[str]:
        """
        Return the sorted, de-duplicated archive URLs of a release.

        Raises:
            NoArchiveAssetError: If the release has no archive asset.
        """
        urls = sorted({
            asset.url
            for asset in release.assets
            if asset.url.endswith(self.archive_extension)
        })
        if not urls:
            raise NoArchiveAssetError(
                f"Could not find a {self.archive_extension} asset in the "
                f"latest release."
            )
        return urls

    def validate_asset_urls(self, urls: Sequence[str]):
        """
        Reject the run if any URL points outside the trusted namespace.

        Raises:
            TrustViolationError: Naming the first offending URL.
        """
        for url in urls:
            self.ensure_trusted(url, "Untrusted asset URL in release metadata")

    def ensure_trusted(self, url: str, reason: str = "Asset URL is not trusted"):
        if not is_trusted_url(url, self.trusted_prefix):
            raise TrustViolationError(f"{reason}: {url}")

    def classify_bundle(self, url: str) -> BundleKey:
        name = file_name_from_url(url)
        for pattern, key in self._templates:
            if pattern.match(name):
                return key

        norm = normalize_text(name)
        has_nf = "nf" in norm
        has_hs = "hs" in norm
        if has_nf and not has_hs:
            return BundleKey.NF
        if has_hs and not has_nf:
            return BundleKey.HS
        return BundleKey.STANDARD

    def url_for_bundle(self, urls: Sequence[str], key: BundleKey) -> Optional[str]:
        for url in urls:
            if self.classify_bundle(url) is key:
                return url
        return None

    def pick_default_url(self, urls: Sequence[str]) -> str:
        return self.url_for_bundle(urls, BundleKey.STANDARD) or urls[0]

    def bundle_choices(self, urls: Sequence[str]) -> List[Tuple[BundleKey, str]]:
        """One representative URL per bundle, in first-seen order."""
        seen = {}
        for url in urls:
            seen.setdefault(self.classify_bundle(url), url)
        return list(seen.items())

    def digest_for(self, release: Release, url: str) -> Optional[str]:
        for asset in release.assets:
            if asset.url == url and asset.digest:
                return asset.digest
        return None

    def choose_url(
        self, urls: Sequence[str], default_url: str, prompter: Prompter
    ) -> str:
        """Let the user pick a bundle; an empty answer keeps the default."""
        choices = self.bundle_choices(urls)
        choice_urls = [url for _, url in choices]
        labels = {
            url: f"{key.label} ({file_name_from_url(url)})"
            for key, url in choices
        }
        if default_url not in choice_urls:
            default_url = choice_urls[0]

        return choose_option(
            "Available variants:",
            choice_urls,
            default_url,
            prompter,
            label=labels.__getitem__,
        )

    def package_listing(self, urls: Sequence[str]) -> List[Tuple[str, str]]:
        return [
            (self.classify_bundle(url).label, file_name_from_url(url))
            for url in urls
        ]
