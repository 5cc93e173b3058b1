"""
Client configuration and logging setup.

Settings come from the process environment, after a local ``.env`` file has
been merged into it (existing variables win).
"""

import logging
import os
import sys
from typing import Mapping, Optional

import dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .engine.exceptions import ConfigurationError
from .networks.health import DEFAULT_HEALTH_TIMEOUT_MS

_SETTING_TO_ENV_KEY = {
    "server_url": "X402_SERVER_URL",
    "network": "X402_NETWORK",
    "paid_path": "X402_PAID_PATH",
    "health_timeout_ms": "X402_HEALTH_TIMEOUT_MS",
    "request_timeout": "X402_REQUEST_TIMEOUT",
    "log_level": "X402_LOG_LEVEL",
}


class ClientSettings(BaseModel):
    """Resolved client configuration."""
    server_url: str = Field("http://127.0.0.1:3000", description="Protected resource server")
    network: str = Field("paseo", description="Network to connect to")
    paid_path: str = Field("/api/paid", description="Protected resource path")
    health_timeout_ms: int = Field(DEFAULT_HEALTH_TIMEOUT_MS, gt=0, description="Probe timeout (ms)")
    request_timeout: float = Field(30.0, gt=0, description="HTTP timeout (seconds)")
    log_level: str = Field("INFO", description="Logging level name")

    @field_validator("server_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    *,
    env_file: Optional[str] = None,
) -> ClientSettings:
    """
    Build ClientSettings from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (no .env loading then)
        env_file: Explicit .env path; by default python-dotenv searches for one

    Raises:
        ConfigurationError: If a variable holds an invalid value.
    """
    if environ is None:
        dotenv.load_dotenv(env_file)
        environ = os.environ

    values = {
        field_name: environ[env_key]
        for field_name, env_key in _SETTING_TO_ENV_KEY.items()
        if environ.get(env_key)
    }
    try:
        return ClientSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid client configuration: {exc}") from exc


def setup_logging(level: str = "INFO") -> None:
    """
    Install a stdout handler on the root logger.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
