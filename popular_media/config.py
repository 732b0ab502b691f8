from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_LANGUAGE = "en-US"
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_SAMPLE_SIZE = 8


def load_env(*, override: bool = False) -> Path | None:
    repo_root = Path(__file__).resolve().parents[1]
    candidates = [
        repo_root / ".env",
        Path.cwd() / ".env",
    ]
    for path in candidates:
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            return path
    return None


def _env_str(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if raw is None:
        return default
    if not raw.isdigit() or int(raw) <= 0:
        raise RuntimeError(f"{name} must be a positive integer, got {raw!r}")
    return int(raw)


def _env_csv(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """
    Process configuration, resolved once from the environment.

    Values are passed into the TMDb client and Supabase factories explicitly so
    nothing downstream reads `os.environ` on its own.
    """

    tmdb_api_key: str | None = None
    tmdb_language: str = DEFAULT_LANGUAGE
    tmdb_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None
    nonce_secret: str | None = None
    admin_emails: tuple[str, ...] = field(default_factory=tuple)
    cors_allow_origins: tuple[str, ...] = field(default_factory=tuple)
    sample_size: int = DEFAULT_SAMPLE_SIZE


def settings_from_env() -> Settings:
    return Settings(
        tmdb_api_key=_env_str("TMDB_API_KEY"),
        tmdb_language=_env_str("TMDB_LANGUAGE") or DEFAULT_LANGUAGE,
        tmdb_timeout_seconds=_env_float("TMDB_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        supabase_url=_env_str("SUPABASE_URL"),
        supabase_anon_key=_env_str("SUPABASE_ANON_KEY"),
        supabase_service_role_key=_env_str("SUPABASE_SERVICE_ROLE_KEY"),
        nonce_secret=_env_str("NONCE_SECRET"),
        admin_emails=tuple(email.casefold() for email in _env_csv("ADMIN_EMAILS")),
        cors_allow_origins=_env_csv("CORS_ALLOW_ORIGINS"),
        sample_size=_env_int("REFRESH_SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_env()
    return settings_from_env()


def require_setting(value: str | None, name: str) -> str:
    if not value:
        raise RuntimeError(f"{name} environment variable is not set")
    return value
