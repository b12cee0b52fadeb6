"""
Tests for the command line entry point with a container whose network and
terminal providers are replaced by fakes.
"""

import logging

import pytest
from dependency_injector import providers

from helpers import (
    HS_URL,
    NF_URL,
    STANDARD_URL,
    MapDownloader,
    RecordingReloader,
    ScriptedPrompter,
    StaticReleaseSource,
)
from udevg_termux.__main__ import main
from udevg_termux.application.domain import Asset, Release
from udevg_termux.infrastructure.containers import Container

RELEASE = Release(
    tag="v2.1.0",
    assets=(Asset(STANDARD_URL), Asset(NF_URL), Asset(HS_URL)),
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def fakes(archives):
    return {
        "source": StaticReleaseSource(RELEASE),
        "downloader": MapDownloader(archives),
        "prompter": ScriptedPrompter(interactive=False),
        "reloader": RecordingReloader(),
    }


@pytest.fixture
def container(fakes, home):
    container = Container()
    container.release_source.override(providers.Object(fakes["source"]))
    container.downloader.override(providers.Object(fakes["downloader"]))
    container.prompter.override(providers.Object(fakes["prompter"]))
    container.reloader.override(providers.Object(fakes["reloader"]))
    yield container
    container.reset_override()


class TestMain:
    """Test exit codes and output of the command line entry point."""

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"], container=Container())

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "--require-verify" in out
        assert "35nflg-bold" in out
        assert "Downloaded zip files are cached in:" in out

    def test_list(self, container, fakes, capsys):
        assert main(["--list"], container=container) == 0

        out = capsys.readouterr().out
        assert "Available packages (latest release):" in out
        assert "  - NF       UDEVGothic_NF_v2.1.0.zip" in out
        assert "  - standard UDEVGothic_v2.1.0.zip" in out
        assert "Example: 35nflg-bold" in out
        assert fakes["downloader"].calls == []

    def test_conflicting_verification_flags(self, container, fakes, caplog):
        with caplog.at_level(logging.ERROR):
            code = main(["--no-verify", "--require-verify", "--yes"], container=container)

        assert code == 1
        assert "cannot be used together" in caplog.text
        assert fakes["source"].calls == 0

    def test_install_with_preset(self, container, fakes, home):
        assert main(["--preset", "35hs-italic", "--yes"], container=container) == 0

        target = home / ".termux" / "font.ttf"
        assert target.read_bytes() == b"UDEVGothic35HS-Italic.ttf"
        assert fakes["downloader"].calls == [HS_URL]
        assert (home / ".cache" / "udevgothic" / "UDEVGothic_HS_v2.1.0.zip").is_file()
        assert fakes["reloader"].calls == 1

    def test_installer_error_exit_code(self, container, fakes, home, caplog):
        fakes["source"].release = Release(tag="v0", assets=())

        with caplog.at_level(logging.ERROR):
            assert main(["--yes"], container=container) == 1

        assert "An installer error occurred" in caplog.text
        assert not (home / ".termux" / "font.ttf").exists()

    def test_missing_confirmation_terminal(self, container, home, caplog):
        with caplog.at_level(logging.ERROR):
            assert main(["--preset", "nf"], container=container) == 1

        assert "Re-run with --yes" in caplog.text
        assert not (home / ".termux" / "font.ttf").exists()
