# =============================================================================
# lifetrack_core/config/settings.py
# Application Settings (.env, environment, Streamlit secrets)
# =============================================================================
"""
Settings are read from the environment (a ``.env`` file is honoured via
python-dotenv) or from a mapping such as Streamlit secrets.

Expected .env format:
    SUPABASE_URL=https://your-project.supabase.co
    SUPABASE_KEY=your-anon-key
    LIFETRACK_DB_PATH=local_data/lifetrack.db
    LIFETRACK_REMOTE_TIMEOUT=5
    LIFETRACK_SYNC_INTERVAL=30
    LIFETRACK_LOG_LEVEL=INFO
    LIFETRACK_LOG_TO_FILE=false

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [lifetrack]
    db_path = "local_data/lifetrack.db"
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from dotenv import dotenv_values

from lifetrack_core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    db_path: Path = Path("local_data") / "lifetrack.db"
    remote_timeout: float = 5.0
    sync_interval: float = 30.0
    log_level: str = "INFO"
    log_to_file: bool = False

    # Flat key -> attribute
    ENV_KEYS = {
        "SUPABASE_URL": "supabase_url",
        "SUPABASE_KEY": "supabase_key",
        "LIFETRACK_DB_PATH": "db_path",
        "LIFETRACK_REMOTE_TIMEOUT": "remote_timeout",
        "LIFETRACK_SYNC_INTERVAL": "sync_interval",
        "LIFETRACK_LOG_LEVEL": "log_level",
        "LIFETRACK_LOG_TO_FILE": "log_to_file",
    }

    @property
    def has_supabase_credentials(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Settings:
        """
        Build settings from flat env-style keys and/or nested secrets sections.

        Raises:
            ConfigurationError: a value cannot be parsed
        """
        flat: Dict[str, Any] = {}

        supabase = values.get("supabase")
        if isinstance(supabase, Mapping):
            flat["SUPABASE_URL"] = supabase.get("url")
            flat["SUPABASE_KEY"] = supabase.get("key")

        lifetrack = values.get("lifetrack")
        if isinstance(lifetrack, Mapping):
            for key, value in lifetrack.items():
                flat[f"LIFETRACK_{str(key).upper()}"] = value

        for key in cls.ENV_KEYS:
            if values.get(key) is not None:
                flat[key] = values[key]

        kwargs = {}
        for key, attribute in cls.ENV_KEYS.items():
            raw = flat.get(key)
            if raw is None:
                continue
            kwargs[attribute] = _PARSERS[attribute](key, raw)
        return cls(**kwargs)


def _parse_str(key: str, raw: Any) -> Optional[str]:
    value = str(raw).strip()
    return value or None


def _parse_path(key: str, raw: Any) -> Path:
    value = str(raw).strip()
    if not value:
        raise ConfigurationError(f"{key} must not be empty", config_key=key, expected_type="path")
    return Path(value)


def _parse_positive_float(key: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{key} must be a number, got {raw!r}", config_key=key, expected_type="float"
        ) from None
    if value <= 0:
        raise ConfigurationError(
            f"{key} must be positive, got {value}", config_key=key, expected_type="float > 0"
        )
    return value


def _parse_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(
        f"{key} must be true or false, got {raw!r}", config_key=key, expected_type="bool"
    )


def _parse_log_level(key: str, raw: Any) -> str:
    value = str(raw).strip().upper()
    if value not in _LOG_LEVELS:
        raise ConfigurationError(
            f"{key} must be one of {', '.join(sorted(_LOG_LEVELS))}, got {raw!r}",
            config_key=key,
            expected_type="log level",
        )
    return value


_PARSERS: Dict[str, Callable[[str, Any], Any]] = {
    "supabase_url": _parse_str,
    "supabase_key": _parse_str,
    "db_path": _parse_path,
    "remote_timeout": _parse_positive_float,
    "sync_interval": _parse_positive_float,
    "log_level": _parse_log_level,
    "log_to_file": _parse_bool,
}


def load_settings(
    env_file: Optional[Union[str, Path]] = ".env",
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Load settings from a .env file overlaid by the process environment.

    Args:
        env_file: dotenv file to read (None to skip)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Parsed Settings
    """
    values: Dict[str, Any] = {}
    if env_file is not None and Path(env_file).exists():
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        logger.debug(f"Loaded settings file: {env_file}")
    environ = os.environ if environ is None else environ
    values.update({k: v for k, v in environ.items() if k in Settings.ENV_KEYS})
    return Settings.from_mapping(values)
