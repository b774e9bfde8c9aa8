"""Tests for configuration helpers."""

import sessionauth.config as config


def test_settings_read_environment():
    """Settings should pick up the test environment."""
    settings = config.get_settings()
    assert settings.database_path == ":memory:"
    assert settings.session_cookie_name == "session"
    assert settings.login_url == "/login"
    assert settings.register_url == "/register"
    assert settings.products_url == "/products"


def test_session_secret_prefers_configured_value():
    """A configured secret should be used as-is."""
    assert config.get_session_secret() == "test-session-secret"


def test_session_secret_generated_once_when_unset(monkeypatch):
    """Without a configured secret a random one should be reused for the process."""
    monkeypatch.setattr(
        config,
        "get_settings",
        lambda: config.Settings(session_secret_key=None),
    )
    monkeypatch.setattr(config, "_process_session_secret", None)

    first = config.get_session_secret()
    assert first
    assert config.get_session_secret() == first
