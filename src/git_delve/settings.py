"""Settings file I/O for git-delve.

Manages a JSON settings file at XDG_CONFIG_HOME/git-delve/settings.json.
Every key is optional; callers supply defaults through the typed loaders.

Import as: import git_delve.settings
"""

import json
import os
import tempfile
from pathlib import Path

DEFAULT_GIT_COMMAND = "git"
DEFAULT_TIMEOUT_SECONDS = 30.0


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / git-delve / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "git-delve" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_setting(key: str, default=None):
    """Load a single setting by key. Returns default if absent."""
    return load_settings().get(key, default)


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def load_git_command() -> str:
    value = load_setting("git_command", DEFAULT_GIT_COMMAND)
    return value if isinstance(value, str) and value else DEFAULT_GIT_COMMAND


def load_ignore_whitespace() -> bool:
    return bool(load_setting("ignore_whitespace", False))


def load_timeout() -> float:
    value = load_setting("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_SECONDS
    return timeout if timeout > 0 else DEFAULT_TIMEOUT_SECONDS


def load_theme() -> str | None:
    value = load_setting("theme")
    return value if isinstance(value, str) and value else None


def save_theme(theme: str) -> None:
    save_setting("theme", theme)
