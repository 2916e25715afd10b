"""Configuration management for slurmtop."""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

VIEW_NAMES = ("overview", "running", "pending", "all")
THEMES = ("dark", "light")


@dataclass
class Config:
    """Startup defaults, overridden by command line options.

    Stored as JSON in ``$XDG_CONFIG_HOME/slurmtop/config.json``. Unknown keys
    are ignored and out-of-range values fall back to their defaults.
    """

    refresh_sec: float = 0.0
    username: Optional[str] = None
    default_view: str = "overview"
    theme: str = "dark"

    @classmethod
    def config_path(cls) -> Path:
        config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
        return config_home / "slurmtop" / "config.json"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a config from decoded JSON, keeping only valid values."""
        defaults = cls()
        try:
            refresh_sec = max(0.0, float(data.get("refresh_sec", defaults.refresh_sec)))
        except (TypeError, ValueError):
            refresh_sec = defaults.refresh_sec
        username = data.get("username")
        view = data.get("default_view")
        theme = data.get("theme")
        return cls(
            refresh_sec=refresh_sec,
            username=username if isinstance(username, str) and username else None,
            default_view=view if view in VIEW_NAMES else defaults.default_view,
            theme=theme if theme in THEMES else defaults.theme,
        )

    @classmethod
    def load(cls) -> "Config":
        """Read the config file; a missing or unreadable file gives the defaults."""
        path = cls.config_path()
        if not path.exists():
            return cls()
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("ignoring config file %s: %s", path, e)
            return cls()
        if not isinstance(data, dict):
            logger.warning("ignoring config file %s: expected a JSON object", path)
            return cls()
        return cls.from_dict(data)

    def save(self) -> None:
        """Write this config back to the config file."""
        path = self.config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(asdict(self), f, indent=2)
        except OSError as e:
            logger.warning("could not save config to %s: %s", path, e)
