from pathlib import Path
from typing import Dict, List, Sequence

from udevg_termux.application.domain import (
    Downloader,
    Prompter,
    Release,
    ReleaseSource,
    SettingsReloader,
)
from udevg_termux.application.trust import trusted_prefix

TRUSTED_PREFIX = trusted_prefix("yuru7", "udev-gothic")
STANDARD_URL = TRUSTED_PREFIX + "v2.1.0/UDEVGothic_v2.1.0.zip"
NF_URL = TRUSTED_PREFIX + "v2.1.0/UDEVGothic_NF_v2.1.0.zip"
HS_URL = TRUSTED_PREFIX + "v2.1.0/UDEVGothic_HS_v2.1.0.zip"

STYLES = ("Regular", "Bold", "Italic", "BoldItalic")


def font_names_for(token: str) -> List[str]:
    """All size/width/style combinations of one bundle token ("", "NF", "HS")."""
    names = []
    for size in ("", "35"):
        for width in ("", "LG"):
            for style in STYLES:
                names.append(f"UDEVGothic{size}{token}{width}-{style}.ttf")
    return sorted(names)


class ScriptedPrompter(Prompter):
    """A prompter that replays recorded answers and remembers the questions."""

    def __init__(
        self,
        answers: Sequence[str] = (),
        interactive: bool = True,
        confirm_answer: bool = True,
    ):
        self.answers = list(answers)
        self.interactive = interactive
        self.confirm_answer = confirm_answer
        self.questions = []
        self.confirmations = []

    def is_interactive(self) -> bool:
        return self.interactive

    def ask(self, question, choices, default_index):
        self.questions.append((question, list(choices), default_index))
        if not self.answers:
            raise AssertionError(f"Unexpected question: {question}")
        return self.answers.pop(0)

    def confirm(self, question):
        self.confirmations.append(question)
        return self.confirm_answer


class StaticReleaseSource(ReleaseSource):
    def __init__(self, release: Release):
        self.release = release
        self.calls = 0

    def get_latest_release(self) -> Release:
        self.calls += 1
        return self.release


class MapDownloader(Downloader):
    """Serves archive bytes by URL and records every transfer."""

    def __init__(self, payloads: Dict[str, bytes]):
        self.payloads = payloads
        self.calls = []

    def download(self, url: str, destination: Path) -> Path:
        self.calls.append(url)
        destination.write_bytes(self.payloads[url])
        return destination


class RecordingReloader(SettingsReloader):
    def __init__(self, available: bool = True):
        self.available = available
        self.calls = 0

    def reload(self) -> bool:
        self.calls += 1
        return self.available
