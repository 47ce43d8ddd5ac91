"""Configuration management for budgetbuddy."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Default config filename
CONFIG_FILENAME = "config.json"
SESSION_FILENAME = "session.json"

DEFAULT_API_BASE_URL = "http://localhost:3000/api"
DEFAULT_API_TIMEOUT_MS = 30000

ENV_API_BASE_URL = "BUDGETBUDDY_API_BASE_URL"
ENV_API_TIMEOUT = "BUDGETBUDDY_API_TIMEOUT"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout: float = DEFAULT_API_TIMEOUT_MS / 1000
    session_path: Path | None = None


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "budgetbuddy"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/budgetbuddy/config.json
    """
    config_paths = [
        Path(CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path) as f:
        return json.load(f)  # type: ignore[no-any-return]


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def config_exists() -> bool:
    """Check if any config file exists."""
    return find_config_file() is not None


def create_default_config() -> dict[str, Any]:
    """Create a default configuration."""
    return {
        "api": {
            "base_url": DEFAULT_API_BASE_URL,
            "timeout_ms": DEFAULT_API_TIMEOUT_MS,
        },
        "session": {
            "path": None,
        },
    }


def get_api_base_url(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str:
    """Get the backend base URL.

    Precedence: explicit override, environment, config file, default.
    """
    if override:
        return override.rstrip("/")

    if env_url := os.getenv(ENV_API_BASE_URL):
        return env_url.rstrip("/")

    if config:
        if base_url := config.get("api", {}).get("base_url"):
            return str(base_url).rstrip("/")

    return DEFAULT_API_BASE_URL


def get_api_timeout(config: dict[str, Any] | None = None) -> float:
    """Get the request timeout in seconds.

    The environment variable and config value are in milliseconds.
    Unparseable values fall back to the default.
    """
    raw: Any = os.getenv(ENV_API_TIMEOUT)
    if raw is None and config:
        raw = config.get("api", {}).get("timeout_ms")

    try:
        timeout_ms = int(raw) if raw is not None else DEFAULT_API_TIMEOUT_MS
    except (TypeError, ValueError):
        timeout_ms = DEFAULT_API_TIMEOUT_MS

    if timeout_ms <= 0:
        timeout_ms = DEFAULT_API_TIMEOUT_MS
    return timeout_ms / 1000


def get_session_path(config: dict[str, Any] | None = None) -> Path:
    """Get the file the session store persists to."""
    if config:
        if path := config.get("session", {}).get("path"):
            return Path(path).expanduser()
    return get_config_dir() / SESSION_FILENAME


def load_settings(
    config_path: Path | None = None,
    base_url: str | None = None,
) -> Settings:
    """Resolve Settings from config file and environment."""
    config = load_config(config_path)
    return Settings(
        api_base_url=get_api_base_url(config, base_url),
        api_timeout=get_api_timeout(config),
        session_path=get_session_path(config),
    )
