"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores settings that must be known before opening the DB (db_folder, the
generation horizon, the log level). Config lives in ~/.budget/config.json
unless BUDGET_CONFIG_DIR points elsewhere.
"""
import json
import os
from pathlib import Path

CONFIG_DIR_ENV = "BUDGET_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json"

DEFAULT_HORIZON_MONTHS = 12


def config_dir() -> Path:
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".budget"


def config_file() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def load_config() -> dict:
    """Returns {} on a missing or corrupt file; never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = config_file()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_horizon_months() -> int:
    """Months ahead generated by on-demand regeneration. App-load runs stop at today."""
    raw = load_config().get("horizon_months", DEFAULT_HORIZON_MONTHS)
    try:
        months = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_HORIZON_MONTHS
    return months if months >= 0 else DEFAULT_HORIZON_MONTHS


def get_log_level() -> str | None:
    return load_config().get("log_level")
