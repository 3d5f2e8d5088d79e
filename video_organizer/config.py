"""
Runtime configuration for the video organizer.

Values come from environment variables. A ``.env`` file in the working
directory is loaded first without overriding variables that are already
set.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .geocoder import DEFAULT_MIN_INTERVAL, GOOGLE_GEOCODE_URL
from .normalizers import DEFAULT_UTC_OFFSET, normalize_offset

ENV_API_KEY = "GOOGLE_MAPS_API_KEY"
ENV_GEOCODE_URL = "VIDEO_ORGANIZER_GEOCODE_URL"
ENV_GEOCODE_INTERVAL = "VIDEO_ORGANIZER_GEOCODE_INTERVAL"
ENV_REQUEST_TIMEOUT = "VIDEO_ORGANIZER_REQUEST_TIMEOUT"
ENV_DEFAULT_UTC_OFFSET = "VIDEO_ORGANIZER_DEFAULT_UTC_OFFSET"
ENV_EXIFTOOL_PATH = "EXIFTOOL_PATH"


def _float_setting(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class OrganizerConfig:
    """Settings shared by the pipeline components."""

    api_key: Optional[str] = None
    geocode_url: str = GOOGLE_GEOCODE_URL
    min_request_interval: float = DEFAULT_MIN_INTERVAL
    request_timeout: float = 10.0
    default_utc_offset: str = DEFAULT_UTC_OFFSET
    exiftool_path: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "OrganizerConfig":
        """
        Build the configuration from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        if env is None:
            env = os.environ

        offset = env.get(ENV_DEFAULT_UTC_OFFSET) or DEFAULT_UTC_OFFSET
        try:
            offset = normalize_offset(offset)
        except ValueError as e:
            raise ConfigurationError(f"{ENV_DEFAULT_UTC_OFFSET}: {e}") from e

        return cls(
            api_key=env.get(ENV_API_KEY) or None,
            geocode_url=env.get(ENV_GEOCODE_URL) or GOOGLE_GEOCODE_URL,
            min_request_interval=_float_setting(env, ENV_GEOCODE_INTERVAL, DEFAULT_MIN_INTERVAL),
            request_timeout=_float_setting(env, ENV_REQUEST_TIMEOUT, 10.0),
            default_utc_offset=offset,
            exiftool_path=env.get(ENV_EXIFTOOL_PATH) or None,
        )


def load_config(dotenv_path: Optional[str] = None) -> OrganizerConfig:
    """Load ``.env`` (if present) and build the configuration from the environment."""
    env_path = Path(dotenv_path) if dotenv_path else Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    return OrganizerConfig.from_env()
