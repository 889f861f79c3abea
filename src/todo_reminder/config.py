# src/todo_reminder/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Everything has a default: a bare `todo-reminder` run works without any env.
- Paths default to the user's home (`~/todo/...`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _default_data_dir() -> Path:
    # No resolvable home (odd service accounts): fall back to /todo.
    try:
        return Path.home() / "todo"
    except RuntimeError:
        return Path("/todo")


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    tasks_path: Path
    icon_path: Path
    log_dir: Path

    # ---- Lifecycle ----
    interactive: bool
    exit_when_idle: bool

    # ---- Notifications ----
    notification_body: str
    notification_timeout: int
    default_priority: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-reminder").strip() or "todo-reminder"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), _default_data_dir())
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")
        icon_path = _env_path(_k("ICON_PATH"), data_dir / "icon.png")
        log_dir = _env_path(_k("LOG_DIR"), data_dir / "logs")

        interactive = _env_bool(_k("INTERACTIVE"), True)
        exit_when_idle = _env_bool(_k("EXIT_WHEN_IDLE"), False)

        notification_body = _env(_k("NOTIFICATION_BODY"), "Time's up")
        notification_timeout = max(1, _env_int(_k("NOTIFICATION_TIMEOUT"), 10))
        default_priority = _env(_k("DEFAULT_PRIORITY"), "Medium").strip() or "Medium"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            icon_path=icon_path,
            log_dir=log_dir,
            interactive=interactive,
            exit_when_idle=exit_when_idle,
            notification_body=notification_body,
            notification_timeout=notification_timeout,
            default_priority=default_priority,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
