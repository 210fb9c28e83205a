from __future__ import annotations

import os
from datetime import time
from pathlib import Path

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))


def jwt_secret() -> str:
    s = os.getenv("JWT_SECRET", "")
    if not s:
        # required in every environment, tests set it through monkeypatch
        raise RuntimeError("JWT_SECRET is not set")
    return s


def jwt_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def jwt_exp_minutes() -> int:
    return _int_env("JWT_EXP_MINUTES", 60)


def bcrypt_rounds() -> int | None:
    raw = os.getenv("BCRYPT_ROUNDS")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def trash_retention_days() -> int:
    return _int_env("TRASH_RETENTION_DAYS", 30)


def purge_enabled() -> bool:
    return os.getenv("PURGE_ENABLED", "true").strip().lower() not in ("0", "false", "no", "off")


def purge_at() -> time:
    """Wall-clock time of the daily trash purge, ``HH:MM``."""
    raw = os.getenv("PURGE_AT", "00:00")
    try:
        hour, minute = (int(part) for part in raw.split(":", 1))
        return time(hour=hour, minute=minute)
    except ValueError:
        return time(0, 0)


def purge_cron() -> str:
    """Crontab expression for the purge job. ``PURGE_CRON`` wins over ``PURGE_AT``."""
    explicit = os.getenv("PURGE_CRON")
    if explicit:
        return explicit
    at = purge_at()
    return f"{at.minute} {at.hour} * * *"


def purge_timezone() -> str:
    return os.getenv("PURGE_TIMEZONE", "UTC")


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


def log_format() -> str:
    return os.getenv("LOG_FORMAT", "json")


def server_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def server_port() -> int:
    return _int_env("PORT", 5000)
