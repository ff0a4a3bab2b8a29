from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    api_url: str
    api_timeout: float
    currency: str
    log_level: str


def load_settings() -> Settings:
    """Читает настройки из окружения (и .env в корне проекта)"""
    return Settings(
        api_url=(
            _get_env("STOREFRONT_API_URL", "API_URL", default="http://localhost:5000/api")
            or "http://localhost:5000/api"
        ).rstrip("/"),
        api_timeout=_get_float("STOREFRONT_API_TIMEOUT", default=30.0),
        currency=_get_env("STOREFRONT_CURRENCY", default="₹") or "₹",
        log_level=(_get_env("STOREFRONT_LOG_LEVEL", "LOG_LEVEL", default="INFO") or "INFO").upper(),
    )


settings = load_settings()

if settings.api_timeout <= 0:
    raise RuntimeError("STOREFRONT_API_TIMEOUT must be > 0")
