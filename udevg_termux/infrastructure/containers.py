"""
Dependency Injection container for the installer.

This container uses the `dependency-injector` library to wire together all
the components of the application, such as services and infrastructure
adapters, based on the application's configuration and command-line flags.
"""

from pathlib import Path
from typing import Iterator

from dependency_injector import containers, providers
import httpx

from ..application.domain import *
from ..application.release import ReleaseResolver
from ..application.selector import FontSelector
from ..application.service import InstallerService
from ..application.trust import VerificationPolicy, trusted_prefix
from ..settings import settings

from .api_client import HttpReleaseSource
from .base_client import build_http_client
from .cache import ArchiveCache
from .downloader import HttpDownloader
from .processing import Sha256Hasher, ZipArchiveInspector
from .prompts import TerminalPrompter
from .termux import TermuxSettingsReloader


def latest_release_url(owner: str, repo: str) -> str:
    return f"https://api.github.com/repos/{owner}/{repo}/releases/latest"


def user_path(value: str) -> Path:
    return Path(value).expanduser()


def http_client_resource(timeout: float) -> Iterator[httpx.Client]:
    client = build_http_client(timeout)
    yield client
    client.close()


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    cli_args = providers.Configuration()

    config = providers.Object(settings)

    installer = config.provided.installer

    http_client = providers.Resource(
        http_client_resource,
        timeout=installer.timeout,
    )

    policy = providers.Factory(
        VerificationPolicy.from_flags,
        skip_verify=cli_args.no_verify,
        require_verify=cli_args.require_verify,
    )

    release_source: providers.Factory[ReleaseSource] = providers.Factory(
        HttpReleaseSource,
        client=http_client,
        api_url=providers.Callable(
            latest_release_url,
            owner=installer.repo_owner,
            repo=installer.repo_name,
        ),
        timeout=installer.timeout,
        token=installer.github_token,
    )

    downloader: providers.Factory[Downloader] = providers.Factory(
        HttpDownloader,
        client=http_client,
        timeout=installer.timeout,
        chunk_size=installer.downloader.chunk_size,
    )

    hasher: providers.Factory[Hasher] = providers.Factory(
        Sha256Hasher,
        chunk_size=installer.hasher.chunk_size,
    )

    inspector: providers.Factory[ArchiveInspector] = providers.Factory(
        ZipArchiveInspector,
        max_uncompressed_bytes=installer.max_uncompressed_bytes,
    )

    archive_store: providers.Factory[ArchiveStore] = providers.Factory(
        ArchiveCache,
        downloader=downloader,
        hasher=hasher,
        inspector=inspector,
        cache_dir=providers.Callable(user_path, config.provided.paths.cache_dir),
    )

    resolver = providers.Factory(
        ReleaseResolver,
        product=installer.product,
        trusted_prefix=providers.Callable(
            trusted_prefix,
            owner=installer.repo_owner,
            repo=installer.repo_name,
        ),
        archive_extension=installer.archive_extension,
    )

    selector = providers.Factory(
        FontSelector,
        product=installer.product,
        default_font_name=installer.default_font_name,
    )

    prompter: providers.Singleton[Prompter] = providers.Singleton(TerminalPrompter)

    reloader: providers.Factory[SettingsReloader] = providers.Factory(
        TermuxSettingsReloader,
        command=config.provided.termux.reload_command,
    )

    installer_service = providers.Factory(
        InstallerService,
        release_source=release_source,
        archive_store=archive_store,
        inspector=inspector,
        resolver=resolver,
        selector=selector,
        prompter=prompter,
        reloader=reloader,
        policy=policy,
        target_font=providers.Callable(
            user_path, config.provided.paths.target_font
        ),
    )
