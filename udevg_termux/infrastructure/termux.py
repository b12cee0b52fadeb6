"""Integration with the Termux terminal application."""

import logging
import shutil
import subprocess
from pathlib import Path

from ..application.domain import SettingsReloader


def is_termux_env(prefix: str) -> bool:
    return Path(prefix).is_dir()


class TermuxSettingsReloader(SettingsReloader):
    """Runs ``termux-reload-settings`` when it is installed."""

    def __init__(self, command: str = "termux-reload-settings"):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.command = command

    def reload(self) -> bool:
        executable = shutil.which(self.command)
        if executable is None:
            return False

        result = subprocess.run([executable], capture_output=True, text=True)
        if result.returncode != 0:
            self.logger.warning(
                f"{self.command} failed (code={result.returncode}): "
                f"{result.stderr.strip()}"
            )
            return False
        return True
