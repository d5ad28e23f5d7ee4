import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_FALLBACK_IMAGE = (
    "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?auto=format&fit=crop&q=80&w=400"
)


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


_load_env()


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_list(key: str, default: List[str]) -> List[str]:
    value = _get_env(key)
    if value is None:
        return list(default)
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class AppConfig:
    log_level: str = field(default_factory=lambda: _get_env("SITE_LOG_LEVEL", "INFO"))
    port: int = field(default_factory=lambda: _get_int("PORT", 8000))
    cors_origins: List[str] = field(default_factory=lambda: _get_list("CORS_ORIGINS", ["*"]))

    image_api_key: Optional[str] = field(default_factory=lambda: _get_env("IMAGE_API_KEY"))
    image_api_base_url: str = field(
        default_factory=lambda: _get_env(
            "IMAGE_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    image_model: str = field(default_factory=lambda: _get_env("IMAGE_MODEL", "imagen-4.0-generate-001"))
    image_timeout_seconds: float = field(default_factory=lambda: _get_float("IMAGE_TIMEOUT_SECONDS", 60.0))
    fallback_image_url: str = field(default_factory=lambda: _get_env("FALLBACK_IMAGE_URL", DEFAULT_FALLBACK_IMAGE))

    max_party_size: int = field(default_factory=lambda: _get_int("MAX_PARTY_SIZE", 20))


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def refresh_config() -> AppConfig:
    global _config
    _config = AppConfig()
    return _config
