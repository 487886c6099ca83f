"""
Tests for InstantlyConfig.
"""

import pytest
from pydantic import ValidationError

from common.config import (
    CAMPAIGN_METRICS_ENDPOINT,
    DEFAULT_BASE_URL,
    InstantlyConfig,
)
from common.exceptions import ConfigurationException


def test_from_env_defaults():
    config = InstantlyConfig.from_env({"INSTANTLY_API_KEY": "key"})

    assert config.api_key == "key"
    assert config.base_url == DEFAULT_BASE_URL
    assert config.request_delay_ms == 1000
    assert config.rate_limit_cooldown_ms == 5000
    assert config.max_retry_attempts == 3
    assert config.retry_delay_ms == 2000
    assert config.page_size == 100
    assert config.batch_size == 500


def test_from_env_overrides():
    config = InstantlyConfig.from_env(
        {
            "INSTANTLY_API_KEY": "key",
            "INSTANTLY_API_BASE_URL": "https://example.test/api/v2/",
            "RATE_LIMIT_DELAY_MS": "250",
            "MAX_RETRY_ATTEMPTS": "5",
            "FIRESTORE_BATCH_SIZE": "100",
        }
    )

    assert config.base_url == "https://example.test/api/v2"
    assert config.request_delay_ms == 250
    assert config.max_retry_attempts == 5
    assert config.batch_size == 100


def test_from_env_missing_api_key():
    with pytest.raises(ConfigurationException, match="INSTANTLY_API_KEY"):
        InstantlyConfig.from_env({})


def test_from_env_invalid_number():
    with pytest.raises(ConfigurationException):
        InstantlyConfig.from_env(
            {"INSTANTLY_API_KEY": "key", "MAX_RETRY_ATTEMPTS": "three"}
        )


def test_sizes_are_clamped():
    config = InstantlyConfig(api_key="key", page_size=1000, batch_size=10000)
    assert config.page_size == 100
    assert config.batch_size == 500


def test_config_is_immutable():
    config = InstantlyConfig(api_key="key")
    with pytest.raises(ValidationError):
        config.api_key = "other"


def test_endpoint_template():
    config = InstantlyConfig(api_key="key")
    assert config.endpoint(CAMPAIGN_METRICS_ENDPOINT, id="c1") == "/campaigns/c1/metrics"
