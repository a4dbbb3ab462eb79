"""Application configuration loader.

Loads settings from ~/.factlet/config.json, then applies environment
variable overrides (FACTLET_*).
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".factlet"
DEFAULT_CONFIG_PATH = DEFAULT_HOME / "config.json"
DEFAULT_NOTIFICATION_CAP = 60
DEFAULT_LOG_MAX_SIZE_MB = 10.0


@dataclass
class AppConfig:
    """Configuration for the factlet app.

    Attributes:
        data_dir: Directory holding the shared preference database.
        db_path: Preference database (defaults to data_dir/factlet.db).
        log_dir: Directory for JSONL event logs (defaults to data_dir/logs).
        notification_cap: Maximum number of pending notifications per batch.
        log_max_size_mb: Size at which the event log rotates.
        notifications_authorized: Answer given to notification permission
            requests by the local notification center.
    """

    data_dir: Path | None = None
    db_path: Path | None = None
    log_dir: Path | None = None
    notification_cap: int = DEFAULT_NOTIFICATION_CAP
    log_max_size_mb: float = DEFAULT_LOG_MAX_SIZE_MB
    notifications_authorized: bool = True

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.data_dir is None:
            self.data_dir = DEFAULT_HOME

        if self.db_path is None:
            self.db_path = self.data_dir / "factlet.db"

        if self.log_dir is None:
            self.log_dir = self.data_dir / "logs"

        if self.notification_cap < 1:
            raise ValueError("notification_cap must be at least 1")


def _parse_config(data: dict[str, Any]) -> dict[str, Any]:
    """Pick valid values out of the parsed JSON document.

    Args:
        data: Parsed JSON data.

    Returns:
        Keyword arguments for AppConfig.
    """
    kwargs: dict[str, Any] = {}

    data_dir = data.get("data_dir")
    if isinstance(data_dir, str) and data_dir:
        kwargs["data_dir"] = Path(data_dir).expanduser()

    for name in ("db_path", "log_dir"):
        value = data.get(name)
        if isinstance(value, str) and value:
            kwargs[name] = Path(value).expanduser()

    cap = data.get("notification_cap")
    if isinstance(cap, int) and not isinstance(cap, bool) and cap >= 1:
        kwargs["notification_cap"] = cap

    size = data.get("log_max_size_mb")
    if isinstance(size, (int, float)) and not isinstance(size, bool) and size > 0:
        kwargs["log_max_size_mb"] = float(size)

    authorized = data.get("notifications_authorized")
    if isinstance(authorized, bool):
        kwargs["notifications_authorized"] = authorized

    return kwargs


def _env_overrides() -> dict[str, Any]:
    """Read FACTLET_* environment variables."""
    kwargs: dict[str, Any] = {}

    home = os.getenv("FACTLET_HOME")
    if home:
        kwargs["data_dir"] = Path(home).expanduser()

    cap = os.getenv("FACTLET_NOTIFICATION_CAP")
    if cap:
        try:
            value = int(cap)
        except ValueError:
            logger.warning("Ignoring FACTLET_NOTIFICATION_CAP=%r: not an integer", cap)
        else:
            if value >= 1:
                kwargs["notification_cap"] = value

    authorized = os.getenv("FACTLET_NOTIFICATIONS_AUTHORIZED")
    if authorized:
        kwargs["notifications_authorized"] = authorized.strip().lower() in ("1", "true", "yes", "on")

    return kwargs


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load AppConfig from a JSON file and the environment.

    The config file looks like:
    ```json
    {
      "data_dir": "~/.factlet",
      "notification_cap": 60,
      "notifications_authorized": true
    }
    ```

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        AppConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    kwargs: dict[str, Any] = {}

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        else:
            if isinstance(data, dict):
                kwargs = _parse_config(data)

    kwargs.update(_env_overrides())
    return AppConfig(**kwargs)


def save_config(config: AppConfig, config_path: Path | None = None) -> None:
    """Save non-default AppConfig values to a JSON file.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {}

    if config.data_dir != DEFAULT_HOME:
        data["data_dir"] = str(config.data_dir)

    assert config.data_dir is not None
    if config.db_path != config.data_dir / "factlet.db":
        data["db_path"] = str(config.db_path)

    if config.log_dir != config.data_dir / "logs":
        data["log_dir"] = str(config.log_dir)

    if config.notification_cap != DEFAULT_NOTIFICATION_CAP:
        data["notification_cap"] = config.notification_cap

    if config.log_max_size_mb != DEFAULT_LOG_MAX_SIZE_MB:
        data["log_max_size_mb"] = config.log_max_size_mb

    if not config.notifications_authorized:
        data["notifications_authorized"] = False

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise
