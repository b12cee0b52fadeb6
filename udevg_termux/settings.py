"""
Initializes the Dynaconf settings object for the installer.
This module is the single source of truth for all configuration.

Packaged defaults live in ``settings.toml`` beside this module. A user file
at ``~/.config/udevg-termux/settings.toml`` and ``UDEVG_`` environment
variables (for example ``UDEVG_PATHS__CACHE_DIR``) override them.
"""

from pathlib import Path
from dynaconf import Dynaconf

PACKAGE_ROOT = Path(__file__).parent
USER_SETTINGS = Path.home() / ".config" / "udevg-termux" / "settings.toml"

settings = Dynaconf(
    root_path=PACKAGE_ROOT,
    settings_files=["settings.toml", str(USER_SETTINGS)],
    envvar_prefix="UDEVG",
    merge_enabled=True,
    environments=False,
    load_dotenv=False,
)
