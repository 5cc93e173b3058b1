import logging

import pytest

from x402_dot.config import ClientSettings, load_settings, setup_logging
from x402_dot.engine.exceptions import ConfigurationError


def test_defaults():
    settings = load_settings({})

    assert settings == ClientSettings()
    assert settings.server_url == "http://127.0.0.1:3000"
    assert settings.network == "paseo"
    assert settings.paid_path == "/api/paid"
    assert settings.health_timeout_ms == 5000


def test_environment_values():
    settings = load_settings({
        "X402_SERVER_URL": "https://api.example.com/",
        "X402_NETWORK": "westend",
        "X402_PAID_PATH": "/api/report",
        "X402_HEALTH_TIMEOUT_MS": "1500",
        "X402_REQUEST_TIMEOUT": "2.5",
        "X402_LOG_LEVEL": "debug",
    })

    assert settings.server_url == "https://api.example.com"
    assert settings.network == "westend"
    assert settings.paid_path == "/api/report"
    assert settings.health_timeout_ms == 1500
    assert settings.request_timeout == 2.5
    assert settings.log_level == "DEBUG"


def test_empty_values_fall_back_to_defaults():
    assert load_settings({"X402_NETWORK": ""}).network == "paseo"


@pytest.mark.parametrize("key,value", [
    ("X402_HEALTH_TIMEOUT_MS", "0"),
    ("X402_HEALTH_TIMEOUT_MS", "soon"),
    ("X402_REQUEST_TIMEOUT", "-1"),
    ("X402_LOG_LEVEL", "LOUD"),
])
def test_invalid_values(key, value):
    with pytest.raises(ConfigurationError):
        load_settings({key: value})


def test_env_file_is_loaded(tmp_path, monkeypatch):
    # Registers the variable with monkeypatch so the value loaded below is undone
    monkeypatch.setenv("X402_NETWORK", "unset")
    monkeypatch.delenv("X402_NETWORK")
    env_file = tmp_path / ".env"
    env_file.write_text("X402_NETWORK=polkadot\n")

    assert load_settings(env_file=str(env_file)).network == "polkadot"


def test_setup_logging_replaces_handlers():
    root_logger = logging.getLogger()
    saved = (root_logger.level, root_logger.handlers[:])
    try:
        setup_logging("WARNING")
        setup_logging("DEBUG")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
    finally:
        root_logger.setLevel(saved[0])
        root_logger.handlers[:] = saved[1]
