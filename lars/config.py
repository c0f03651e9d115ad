"""User configuration: the default repository and upload settings"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

from lars.model.state import State

logger = logging.getLogger(__name__)

APP_NAME = "lars"
REPOSITORY_ENV = "LARS_REPOSITORY"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

default_cfg = {
    "upload": {
        "strategy": "add_then_hide_old",
        "state": State.DRAFT.value,
        "edition_checking": "true",
    }
}

if platform.system() == "Darwin":
    config_dir = Path(f"~/Library/Application Support/{APP_NAME}").expanduser()
else:
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for the configuration file.

    Missing sections or keys fall back to a default instead of raising.

    Usage:
        config = ConfigAccessor()
        location = config.get("repository", "location")
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = get_config_file() if config_path is None else Path(config_path)
        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        try:
            return self.config[section][key]
        except KeyError:
            return default

    def getboolean(self, section: str, key: str, default: bool = False) -> bool:
        """
        Raises:
            ValueError: If the value is not a boolean
        """
        try:
            return self.config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def set(self, section: str, key: str, value: str) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config[section][key] = value

    def save(self) -> None:
        """
        Save the configuration file.

        Fails gracefully if the file cannot be written (e.g., read-only filesystem).
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                self.config.write(configfile)
        except OSError as e:
            logger.warning(
                f"Could not save configuration to {self.config_path}: {e}. "
                "Configuration changes will not persist."
            )

    def sections(self) -> list:
        return self.config.sections()

    # Settings

    def repository_location(self) -> Optional[str]:
        """The default repository: ``$LARS_REPOSITORY``, then ``[repository] location``."""
        return os.environ.get(REPOSITORY_ENV) or self.get("repository", "location")

    def upload_strategy(self) -> str:
        return self.get("upload", "strategy", default_cfg["upload"]["strategy"])

    def upload_state(self) -> State:
        """
        Raises:
            ValueError: If the configured state is not a lifecycle state
        """
        return State(self.get("upload", "state", default_cfg["upload"]["state"]))

    def edition_checking(self) -> bool:
        return self.getboolean("upload", "edition_checking", True)
