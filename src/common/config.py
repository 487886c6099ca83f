"""
Immutable runtime configuration for the Instantly sync functions.

Built once per invocation from environment variables and handed to every
component at construction time.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.exceptions import ConfigurationException

DEFAULT_BASE_URL = "https://api.instantly.ai/api/v2"
MAX_PAGE_SIZE = 100
MAX_BATCH_SIZE = 500

CAMPAIGNS_ENDPOINT = "/campaigns"
CAMPAIGN_DETAILS_ENDPOINT = "/campaigns/{id}"
CAMPAIGN_METRICS_ENDPOINT = "/campaigns/{id}/metrics"
CAMPAIGN_SUBSCRIBERS_ENDPOINT = "/campaigns/{id}/subscribers"
LEADS_LIST_ENDPOINT = "/leads/list"


class InstantlyConfig(BaseModel):
    """Connection, rate-limit and batching settings."""

    api_key: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    request_delay_ms: int = Field(default=1000, ge=0)
    rate_limit_cooldown_ms: int = Field(default=5000, ge=0)
    max_retry_attempts: int = Field(default=3, ge=1)
    retry_delay_ms: int = Field(default=2000, ge=0)
    request_timeout_s: float = Field(default=30, gt=0)
    page_size: int = MAX_PAGE_SIZE
    batch_size: int = MAX_BATCH_SIZE

    model_config = ConfigDict(frozen=True)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        return max(1, min(v, MAX_PAGE_SIZE))

    @field_validator("batch_size")
    @classmethod
    def clamp_batch_size(cls, v: int) -> int:
        return max(1, min(v, MAX_BATCH_SIZE))

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "InstantlyConfig":
        """
        Build configuration from environment variables.

        Raises:
            ConfigurationException: If INSTANTLY_API_KEY is missing or a numeric
                setting cannot be parsed
        """
        env = os.environ if environ is None else environ

        api_key = env.get("INSTANTLY_API_KEY")
        if not api_key:
            raise ConfigurationException(
                "INSTANTLY_API_KEY is required in environment variables"
            )

        try:
            return cls(
                api_key=api_key,
                base_url=env.get("INSTANTLY_API_BASE_URL") or DEFAULT_BASE_URL,
                request_delay_ms=int(env.get("RATE_LIMIT_DELAY_MS", 1000)),
                rate_limit_cooldown_ms=int(env.get("RATE_LIMIT_COOLDOWN_MS", 5000)),
                max_retry_attempts=int(env.get("MAX_RETRY_ATTEMPTS", 3)),
                retry_delay_ms=int(env.get("RETRY_DELAY_MS", 2000)),
                request_timeout_s=float(env.get("REQUEST_TIMEOUT_SECONDS", 30)),
                page_size=int(env.get("INSTANTLY_PAGE_SIZE", MAX_PAGE_SIZE)),
                batch_size=int(env.get("FIRESTORE_BATCH_SIZE", MAX_BATCH_SIZE)),
            )
        except ValueError as e:
            raise ConfigurationException(f"Invalid sync configuration: {e}")

    def endpoint(self, template: str, **kwargs) -> str:
        """Fill an endpoint template such as CAMPAIGN_METRICS_ENDPOINT."""
        return template.format(**kwargs)
