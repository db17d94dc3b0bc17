import json
import logging
import os
import platform
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .model import MAX_DURATION, MIN_DURATION, Configuration

logger = logging.getLogger(__name__)

CONFIG_ENV = "LIFECLOCK_CONFIG"


def get_config_dir() -> Path:
    system = platform.system().lower()
    if system == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            base = Path(appdata)
        else:
            base = Path.home() / "AppData" / "Roaming"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "lifeclock"


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return get_config_dir() / "config.json"


def _read(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("no configuration at %s", path)
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("could not read configuration %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring configuration %s: expected an object", path)
        return {}
    return data


def parse_configuration(data: Dict[str, Any]) -> Optional[Configuration]:
    birth_date = data.get("birth_date")
    duration = data.get("life_expectancy")
    if not isinstance(birth_date, str) or isinstance(duration, bool) or not isinstance(duration, int):
        return None
    parts = birth_date.split("-")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    year, month, day = (int(part) for part in parts)
    if not (1 <= year <= 9999 and 1 <= month <= 12 and 1 <= day <= 31):
        return None
    if not MIN_DURATION <= duration <= MAX_DURATION:
        return None
    return Configuration(year, month, day, duration)


def load(path: Optional[Path] = None) -> Optional[Configuration]:
    """Read the saved configuration; any problem means "not configured"."""
    path = path or get_config_path()
    data = _read(path)
    if not data:
        return None
    configuration = parse_configuration(data)
    if configuration is None:
        logger.warning("ignoring malformed configuration in %s", path)
    return configuration


def save(configuration: Configuration, path: Optional[Path] = None) -> None:
    path = path or get_config_path()
    data = {
        "birth_date": f"{configuration.year:04d}-{configuration.month:02d}-{configuration.day:02d}",
        "life_expectancy": configuration.duration_years,
        "saved_at": datetime.now().astimezone().isoformat(timespec="seconds"),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
    except OSError as exc:
        logger.error("could not save configuration to %s: %s", path, exc)
        return
    logger.info("configuration saved to %s", path)
