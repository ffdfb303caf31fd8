"""Configuration for the Lens application.

Values are read from environment variables first and from Streamlit secrets
second, then cast to the requested type and cached until ``clear_cache``.
"""

import os
from typing import Any

import streamlit as st

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = "/tmp/lens/lens.db"  # nosec B108
DEVELOPMENT_ENVIRONMENTS = ("development", "dev", "local")
TRUE_VALUES = ("true", "1", "yes", "on")

_MISSING = object()


def cast_value(value: Any, cast_type: type) -> Any:
    """Cast a raw setting; strings like "yes" or "0" become booleans."""
    if cast_type is bool:
        return value.lower() in TRUE_VALUES if isinstance(value, str) else bool(value)
    if cast_type is str or isinstance(value, cast_type):
        return value
    return cast_type(value)


class Config:
    """Settings lookup with type casting and a per-key cache."""

    def __init__(self):
        self._cache: dict[tuple[str, str], Any] = {}

    def _lookup(self, key: str) -> Any:
        value = os.getenv(key)
        if value is not None:
            return value
        try:
            return st.secrets.get(key)
        except Exception as e:  # nosec B110
            # No secrets.toml, or called outside a Streamlit run
            logger.debug("config_secrets_unavailable", key=key, error=str(e))
            return None

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get a setting.

        Args:
            key: Setting name, e.g. GCS_PHOTOS_BUCKET
            default: Returned when the setting is absent or cannot be cast
            cast_type: str, int, float or bool

        Returns:
            The cast value, or the default
        """
        cache_key = (key, cast_type.__name__)
        cached = self._cache.get(cache_key, _MISSING)
        if cached is not _MISSING:
            return cached

        raw = self._lookup(key)
        if raw is None:
            value = default
        else:
            try:
                value = cast_value(raw, cast_type)
            except (ValueError, TypeError) as e:
                logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
                value = default

        self._cache[cache_key] = value
        return value

    def get_required(self, key: str, cast_type: type = str) -> Any:
        """Get a setting that must be present and non-empty.

        Raises:
            ValueError: If the setting is missing
        """
        value = self.get(key, cast_type=cast_type)
        if value is None or value == "":
            raise ValueError(f"Required configuration '{key}' not found")
        return value

    @property
    def environment(self) -> str:
        return str(self.get("ENVIRONMENT", "development")).lower()

    def is_development(self) -> bool:
        return self.environment in DEVELOPMENT_ENVIRONMENTS

    def clear_cache(self):
        self._cache.clear()


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    return get_config().get(key, default, cast_type)


def get_required_env(key: str, cast_type: type = str) -> Any:
    """Get a required setting.

    Raises:
        ValueError: If the setting is missing
    """
    return get_config().get_required(key, cast_type)


def get_environment() -> str:
    return get_config().environment


def get_debug_mode() -> bool:
    """Debug output is on with DEBUG=true and always in development."""
    return bool(get_env("DEBUG", False, bool)) or get_config().is_development()


def get_database_path() -> str:
    """Local DuckDB file holding users and albums."""
    return str(get_env("LENS_DB_PATH", DEFAULT_DB_PATH))


def is_database_sync_enabled() -> bool:
    """Whether the DuckDB file is backed up to the database bucket after writes."""
    return bool(get_env("LENS_DB_SYNC_ENABLED", False, bool))
