"""
The core application service and pipeline, containing the installer's
business logic.

This module defines the main orchestrator (InstallerService) for one install
run and the pipeline (ArchivePreparationPipeline) that turns a release asset
into a directory of extracted font files.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from tqdm.contrib.logging import logging_redirect_tqdm

from .domain import *
from .exceptions import FontNotFoundError, InteractiveUnavailableError
from .release import ReleaseResolver
from .selector import (
    FontSelector,
    bundle_key_from_text,
    parse_preset,
    resolve_explicit_font_name,
)
from .trust import VerificationPolicy

logger = logging.getLogger(__name__)

_ARCHIVE_NAME = "font.zip"
_EXTRACT_DIR = "extract"


class ArchivePreparationPipeline:
    """Encapsulates fetching, validating and unpacking a single archive."""

    def __init__(self, archive_store: ArchiveStore, inspector: ArchiveInspector):
        """Initializes the pipeline with necessary dependencies (ports)."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.archive_store = archive_store
        self.inspector = inspector

    def run(
        self, url: str, expected_sha256: Optional[str], work_dir: Path
    ) -> Tuple[Path, List[str]]:
        """Executes the sequential steps for preparing one archive.

        Args:
            url: Download URL of the archive.
            expected_sha256: Digest the archive must match, if any.
            work_dir: Scratch directory owned by the caller.

        Returns:
            The extraction directory and the font file names found in it.

        Raises:
            FontNotFoundError: If the archive holds no font files.
        """
        archive_path = work_dir / _ARCHIVE_NAME
        extract_dir = work_dir / _EXTRACT_DIR

        # Step 1: Fetch (URL -> archive on disk, possibly from cache)
        self.archive_store.fetch(url, archive_path, expected_sha256)

        # Step 2: Validate and extract (archive -> directory)
        self.logger.info("Extracting archive...")
        self.inspector.extract(archive_path, extract_dir)

        # Step 3: Collect (directory -> font names)
        names = list(self.inspector.collect_font_names(extract_dir))
        if not names:
            raise FontNotFoundError(
                "No font files (.ttf/.otf) were found in archive"
            )

        return extract_dir, names


class InstallerService:
    """Orchestrates one installer run from release lookup to font copy."""

    def __init__(
        self,
        release_source: ReleaseSource,
        archive_store: ArchiveStore,
        inspector: ArchiveInspector,
        resolver: ReleaseResolver,
        selector: FontSelector,
        prompter: Prompter,
        reloader: SettingsReloader,
        policy: VerificationPolicy,
        target_font: Path,
    ):
        """Initializes the service and the reusable preparation pipeline."""
        self.release_source = release_source
        self.inspector = inspector
        self.resolver = resolver
        self.selector = selector
        self.prompter = prompter
        self.reloader = reloader
        self.policy = policy
        self.target_font = Path(target_font)
        self.pipeline = ArchivePreparationPipeline(archive_store, inspector)

    def list_packages(self) -> List[Tuple[str, str]]:
        """Return ``(label, archive name)`` rows for the latest release."""
        _, urls = self._load_release()
        return self.resolver.package_listing(urls)

    def run(self, options: InstallOptions) -> InstallResult:
        """Executes the install for the user's options."""

        if not self.policy.verify:
            logger.warning("SHA256 verification is disabled (--no-verify).")
        if options.font_name and options.preset:
            logger.warning("--font is set, so --preset is ignored.")

        release, urls = self._load_release()

        criteria = None
        if options.preset and not options.font_name:
            criteria = parse_preset(options.preset)

        url = self._choose_url(urls, options, criteria)
        self.resolver.ensure_trusted(url, "Selected asset URL is not trusted")

        asset = Asset(url=url, digest=self.resolver.digest_for(release, url))
        expected_sha256 = self.policy.expected_digest(asset)

        with tempfile.TemporaryDirectory(prefix="udevg-") as tmp:
            with logging_redirect_tqdm():
                extract_dir, names = self.pipeline.run(
                    url, expected_sha256, Path(tmp)
                )

            font_name = self._choose_font(names, options, criteria, url)

            if not options.assume_yes and not self._confirm(font_name):
                logger.info("Canceled.")
                return InstallResult(
                    font_name=font_name, target=self.target_font, installed=False
                )

            source = self.inspector.locate_font(extract_dir, font_name)
            self._install(source)

        reloaded = self.reloader.reload()
        if reloaded:
            logger.info("Applied font and reloaded Termux settings.")
        else:
            logger.info("Applied font. Restart Termux to see changes.")
        logger.info(f"Done. Active font: {font_name}")

        return InstallResult(
            font_name=font_name,
            target=self.target_font,
            installed=True,
            reloaded=reloaded,
        )

    def _load_release(self) -> Tuple[Release, List[str]]:
        logger.info("Fetching latest release metadata...")
        release = self.release_source.get_latest_release()
        urls = self.resolver.collect_archive_urls(release)
        self.resolver.validate_asset_urls(urls)
        return release, urls

    def _choose_url(
        self,
        urls: Sequence[str],
        options: InstallOptions,
        criteria: Optional[SelectionCriteria],
    ) -> str:
        default_url = self.resolver.pick_default_url(urls)

        if options.font_name:
            key = bundle_key_from_text(options.font_name)
            return self.resolver.url_for_bundle(urls, key) or default_url

        if criteria is not None:
            key = BundleKey(criteria.bundle)
            return self.resolver.url_for_bundle(urls, key) or default_url

        if self.prompter.is_interactive():
            return self.resolver.choose_url(urls, default_url, self.prompter)

        label = self.resolver.classify_bundle(default_url).label
        logger.warning(f"Non-interactive mode. Using default variant: {label}")
        return default_url

    def _choose_font(
        self,
        names: Sequence[str],
        options: InstallOptions,
        criteria: Optional[SelectionCriteria],
        url: str,
    ) -> str:
        if options.font_name:
            return resolve_explicit_font_name(names, options.font_name)

        default_base = self.resolver.classify_bundle(url).value
        return self.selector.select(
            names,
            criteria=criteria,
            default_base=default_base,
            prompter=self.prompter,
        )

    def _confirm(self, font_name: str) -> bool:
        if not self.prompter.is_interactive():
            raise InteractiveUnavailableError(
                "Non-interactive mode detected. Re-run with --yes."
            )
        return self.prompter.confirm(
            f"Install {font_name} to {self.target_font}?"
        )

    def _install(self, source: Path):
        """Copy the resolved font over the target path."""
        self.target_font.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, self.target_font)
        os.chmod(self.target_font, 0o644)
        logger.info(f"Installed {source.name} to {self.target_font}")
