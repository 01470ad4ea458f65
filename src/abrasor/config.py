import os
from pathlib import Path
from typing import Dict, Optional

UNIT_SYSTEM_KEY = "ABRASOR_UNIT_SYSTEM"
STRICT_TOKENS_KEY = "ABRASOR_STRICT_TOKENS"

KNOWN_KEYS = (UNIT_SYSTEM_KEY, STRICT_TOKENS_KEY)


def get_config_dir() -> Path:
    """config directory, overridable with ABRASOR_HOME."""
    override = os.environ.get("ABRASOR_HOME")
    if override:
        return Path(override)
    return Path.home() / ".abrasor"


def get_config_file() -> Path:
    return get_config_dir() / "config"


def _read_config() -> Dict[str, str]:
    config = {}
    config_file = get_config_file()
    if not config_file.exists():
        return config

    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line:
                    key, value = line.split("=", 1)
                    config[key] = value
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config


def get_config_value(key: str, default: Optional[str] = None) -> Optional[str]:
    """get a value from the config file."""
    return _read_config().get(key, default)


def set_config_value(key: str, value: str):
    """set a value in the config file, preserving other config values."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    config = _read_config()
    config[key] = value

    try:
        with open(get_config_file(), "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e


def get_unit_system() -> str:
    value = get_config_value(UNIT_SYSTEM_KEY, "metric")
    return value if value in ("metric", "imperial") else "metric"


def get_strict_tokens() -> bool:
    return (get_config_value(STRICT_TOKENS_KEY, "false") or "").lower() in ("1", "true", "yes")
