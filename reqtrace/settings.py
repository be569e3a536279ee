"""ConfigManager — environment profiles, commit identity, and log level."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from reqtrace.config import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME, SETTINGS_DIR

logger = logging.getLogger(__name__)

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "REQTRACE_ENV": {"default": "development", "description": "Environment profile"},
    "REQTRACE_AUTHOR_NAME": {"default": DEFAULT_AUTHOR_NAME, "description": "Commit author name"},
    "REQTRACE_AUTHOR_EMAIL": {"default": DEFAULT_AUTHOR_EMAIL, "description": "Commit author email"},
    "REQTRACE_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "REQTRACE_HISTORY_DEPTH": {"default": "", "description": "Max history entries (empty = all)"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "REQTRACE_ENV": "development",
        "REQTRACE_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "REQTRACE_ENV": "production",
        "REQTRACE_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "REQTRACE_ENV": "testing",
        "REQTRACE_LOG_LEVEL": "DEBUG",
        "REQTRACE_AUTHOR_NAME": "ReqTrace Test",
        "REQTRACE_AUTHOR_EMAIL": "test@reqtrace.local",
    },
}


class Identity(BaseModel):
    """Author identity written into every commit and baseline."""

    name: str = DEFAULT_AUTHOR_NAME
    email: str = DEFAULT_AUTHOR_EMAIL

    @field_validator("name", "email")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("identity fields must not be empty")
        return value

    @classmethod
    def from_config(cls, config: dict[str, str]) -> Identity:
        return cls(
            name=config.get("REQTRACE_AUTHOR_NAME", DEFAULT_AUTHOR_NAME),
            email=config.get("REQTRACE_AUTHOR_EMAIL", DEFAULT_AUTHOR_EMAIL),
        )

    def git_env(self) -> dict[str, str]:
        """Environment overrides that make git use this identity."""
        return {
            "GIT_AUTHOR_NAME": self.name,
            "GIT_AUTHOR_EMAIL": self.email,
            "GIT_COMMITTER_NAME": self.name,
            "GIT_COMMITTER_EMAIL": self.email,
        }


# Process-wide identity: set once at startup, read on every commit.
_identity: Identity | None = None


def set_identity(identity: Identity) -> None:
    """Install *identity* as the default for all subsequent commits."""
    global _identity
    _identity = identity
    logger.debug("Commit identity set to %s <%s>", identity.name, identity.email)


def get_identity() -> Identity:
    """Return the process-wide identity, falling back to the defaults."""
    if _identity is None:
        return Identity()
    return _identity


def reset_identity() -> None:
    """Forget the process-wide identity."""
    global _identity
    _identity = None


def _read_json_config(config_json: Path) -> dict[str, str]:
    """Return the string values of ``.reqtrace/config.json``; unreadable files count as empty."""
    if not config_json.is_file():
        return {}
    try:
        data = json.loads(config_json.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s", config_json, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", config_json)
        return {}
    return {str(k): str(v) for k, v in data.items()}


def _read_env_file(env_file: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines from a ``.env`` file; blank and ``#`` lines are skipped."""
    values: dict[str, str] = {}
    if not env_file.is_file():
        return values
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip()
    return values


class ConfigManager:
    """Manage ReqTrace configuration across environments."""

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Write ``.env.example`` listing every key with its default.

        Returns the path to the generated file.
        """
        env_path = Path(project_path) / ".env.example"
        profiles = ", ".join(_PROFILES)

        lines = [
            "# ReqTrace settings; copy to .env to override them for this project",
            f"# REQTRACE_ENV selects a profile: {profiles}",
            "",
        ]
        for key, info in _CONFIG_KEYS.items():
            lines += [f"# {info['description']}", f"{key}={info['default']}", ""]

        env_path.write_text("\n".join(lines), encoding="utf-8")
        return env_path

    def load_config(self, project_path: str | Path) -> dict[str, str]:
        """Load merged config: defaults -> profile -> config.json -> .env -> env vars.

        Returns a flat dict of configuration values.
        """
        root = Path(project_path)
        config = {key: str(info["default"]) for key, info in _CONFIG_KEYS.items()}

        profile = os.environ.get("REQTRACE_ENV", config["REQTRACE_ENV"])
        if profile not in _PROFILES:
            logger.warning("Unknown REQTRACE_ENV profile %r, using defaults", profile)

        layers = (
            _PROFILES.get(profile, {}),
            _read_json_config(root / SETTINGS_DIR / "config.json"),
            _read_env_file(root / ".env"),
            {key: os.environ[key] for key in _CONFIG_KEYS if key in os.environ},
        )
        for layer in layers:
            config.update(layer)
        return config

    def history_depth(self, config: dict[str, str]) -> int | None:
        """Return the configured history cap, or *None* for unlimited.

        A value that is not an integer is ignored with a warning.
        """
        raw = config.get("REQTRACE_HISTORY_DEPTH", "").strip()
        if not raw:
            return None
        try:
            depth = int(raw)
        except ValueError:
            logger.warning("Ignoring REQTRACE_HISTORY_DEPTH=%r: not an integer", raw)
            return None
        return depth if depth > 0 else None

    def apply_logging(self, config: dict[str, str]) -> None:
        """Set the level of the ``reqtrace`` logger from *config*.

        An unknown level name falls back to ``INFO``.
        """
        level = config.get("REQTRACE_LOG_LEVEL", "INFO").strip().upper()
        reqtrace_logger = logging.getLogger("reqtrace")
        try:
            reqtrace_logger.setLevel(level)
        except ValueError:
            reqtrace_logger.setLevel(logging.INFO)
            logger.warning("Unknown REQTRACE_LOG_LEVEL %r, using INFO", level)
