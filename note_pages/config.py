"""Runtime settings from config.json, .env and environment variables.

Precedence (highest first): environment, .env file, config.json, defaults.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# setting name -> environment variable
ENV_VARS = {
    "db_path": "NOTE_PAGES_DB",
    "storage_root": "NOTE_PAGES_STORAGE",
    "interval_seconds": "NOTE_PAGES_INTERVAL",
    "max_workers": "NOTE_PAGES_WORKERS",
    "extraction_timeout": "NOTE_PAGES_TIMEOUT",
    "max_pages": "NOTE_PAGES_MAX_PAGES",
    "log_level": "NOTE_PAGES_LOG_LEVEL",
}


@dataclass
class Settings:
    db_path: Path = Path("data") / "notes.db"
    storage_root: Path = Path("data") / "storage"
    interval_seconds: float = 300.0
    max_workers: int = 1
    extraction_timeout: Optional[float] = 120.0
    max_pages: Optional[int] = None
    log_level: str = "INFO"


def load_dotenv(env_path: Path) -> None:
    """Load KEY=VALUE lines into os.environ without overriding existing vars."""
    if not env_path.exists():
        return
    with open(env_path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                os.environ.setdefault(key.strip(), value.strip().strip('"\''))


def _to_number(key: str, value, kind):
    """Parse a positive number; a fractional value for an int key is rejected."""
    if kind is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Invalid value for {key}: {value!r} (expected an integer)")
    try:
        number = kind(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {key}: {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{key} must be positive, got {value!r}")
    return number


def _optional_number(key: str, value, kind):
    """None, "" and "none" disable an optional limit."""
    if value is None or str(value).strip().lower() in ("", "none"):
        return None
    return _to_number(key, value, kind)


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Build Settings from an optional JSON file plus environment overrides."""
    raw: dict = {}
    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                raw = json.load(f)
        else:
            logger.warning("Config file %s not found, using defaults", config_path)
        load_dotenv(config_path.parent / ".env")
    else:
        load_dotenv(Path(".env"))

    for key, env_var in ENV_VARS.items():
        if env_var in os.environ:
            raw[key] = os.environ[env_var]

    settings = Settings()
    if "db_path" in raw:
        settings.db_path = Path(raw["db_path"])
    if "storage_root" in raw:
        settings.storage_root = Path(raw["storage_root"])
    if "interval_seconds" in raw:
        settings.interval_seconds = _to_number("interval_seconds", raw["interval_seconds"], float)
    if "max_workers" in raw:
        settings.max_workers = _to_number("max_workers", raw["max_workers"], int)
    if "extraction_timeout" in raw:
        settings.extraction_timeout = _optional_number(
            "extraction_timeout", raw["extraction_timeout"], float)
    if "max_pages" in raw:
        settings.max_pages = _optional_number("max_pages", raw["max_pages"], int)
    if "log_level" in raw:
        settings.log_level = str(raw["log_level"]).upper()
    return settings
