"""Tests for configuration loading and validation."""

import pytest

from courier_booking.config import (
    AppConfig,
    BrowserConfig,
    PortalConfig,
    RetryConfig,
    WebhookConfig,
    _safe_bool,
    _safe_float,
    _safe_int,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_default_retry_policy(self):
        retry = RetryConfig(max_retries=3, retry_delay_sec=2.0)
        _validate_config(AppConfig(retry=retry))

    def test_zero_retries_rejected(self):
        config = AppConfig(retry=RetryConfig(max_retries=0, retry_delay_sec=2.0))
        with pytest.raises(ValueError, match="MAX_RETRIES"):
            _validate_config(config)

    def test_negative_retry_delay_rejected(self):
        config = AppConfig(retry=RetryConfig(max_retries=3, retry_delay_sec=-1.0))
        with pytest.raises(ValueError, match="RETRY_DELAY_SEC"):
            _validate_config(config)

    def test_non_http_portal_url_rejected(self):
        config = AppConfig(portal=PortalConfig(url="portal.jtexpress.ph"))
        with pytest.raises(ValueError, match="JT_PORTAL_URL"):
            _validate_config(config)

    def test_zero_timeout_rejected(self):
        config = AppConfig(browser=BrowserConfig(candidate_timeout_ms=0))
        with pytest.raises(ValueError, match="CANDIDATE_TIMEOUT_MS"):
            _validate_config(config)

    def test_negative_settle_delay_rejected(self):
        config = AppConfig(browser=BrowserConfig(settle_delay_ms=-5))
        with pytest.raises(ValueError, match="SETTLE_DELAY_MS"):
            _validate_config(config)

    def test_zero_settle_delay_allowed(self):
        _validate_config(AppConfig(browser=BrowserConfig(settle_delay_ms=0)))

    def test_bad_viewport_rejected(self):
        config = AppConfig(browser=BrowserConfig(viewport_width=0))
        with pytest.raises(ValueError, match="BROWSER_VIEWPORT_WIDTH"):
            _validate_config(config)

    def test_webhook_timeout_rejected(self):
        config = AppConfig(webhook=WebhookConfig(timeout_sec=0))
        with pytest.raises(ValueError, match="WEBHOOK_TIMEOUT_SEC"):
            _validate_config(config)

    def test_port_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="PORT"):
            _validate_config(AppConfig(port=70000))

    def test_config_is_immutable(self):
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.port = 8080  # type: ignore[misc]


class TestEnvParsing:
    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_invalid(self, monkeypatch):
        monkeypatch.setenv("COURIER_TEST_INT", "three")
        with pytest.raises(ValueError, match="COURIER_TEST_INT"):
            _safe_int("COURIER_TEST_INT", "3")

    def test_safe_float_parsing(self):
        assert _safe_float("NONEXISTENT_VAR_12345", "2.5") == pytest.approx(2.5)

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), ("1", True), ("YES", True),
        ("false", False), ("0", False), ("off", False),
    ])
    def test_safe_bool_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("COURIER_TEST_BOOL", raw)
        assert _safe_bool("COURIER_TEST_BOOL", "true") is expected

    def test_safe_bool_invalid(self, monkeypatch):
        monkeypatch.setenv("COURIER_TEST_BOOL", "maybe")
        with pytest.raises(ValueError, match="COURIER_TEST_BOOL"):
            _safe_bool("COURIER_TEST_BOOL", "true")
