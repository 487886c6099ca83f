"""
Instantly API v2 client wrapper for campaign and lead retrieval.

Every outbound call waits a fixed delay first. A 429 answer is retried once
after a cooldown, and retry_request() separately retries any failure with a
linearly increasing delay. The two mechanisms are independent and compound.
"""

import logging
import time
from typing import Any, Callable, Optional, Tuple

import requests

from common.config import (
    CAMPAIGN_DETAILS_ENDPOINT,
    CAMPAIGN_METRICS_ENDPOINT,
    CAMPAIGN_SUBSCRIBERS_ENDPOINT,
    CAMPAIGNS_ENDPOINT,
    LEADS_LIST_ENDPOINT,
    InstantlyConfig,
)
from common.exceptions import (
    InstantlyAPIException,
    NotFoundException,
    RateLimitException,
    UpstreamConnectionException,
    ValidationException,
)
from common.response_shapes import describe_shape, extract_cursor, extract_records

logger = logging.getLogger(__name__)

USER_AGENT = "Instantly-Firestore-Sync/1.0.0"


class InstantlyClient:
    """
    Client for the Instantly API v2.

    Args:
        config: Immutable connection and rate-limit settings
        session: Optional pre-built requests session
        sleep: Sleep function taking seconds; injectable for tests
    """

    def __init__(
        self,
        config: InstantlyConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.base_url = config.base_url
        self.sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> requests.Response:
        """Issue one throttled request, retrying a single 429 after the cooldown."""
        url = f"{self.base_url}{path}"

        self.sleep(self.config.request_delay_ms / 1000)
        response = self.session.request(
            method, url, params=params, json=json, timeout=self.config.request_timeout_s
        )

        if response.status_code == 429:
            logger.warning(
                "Rate limit exceeded on %s %s, waiting %dms before retry",
                method,
                path,
                self.config.rate_limit_cooldown_ms,
            )
            self.sleep(self.config.rate_limit_cooldown_ms / 1000)
            self.sleep(self.config.request_delay_ms / 1000)
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.config.request_timeout_s,
            )

        response.raise_for_status()
        return response

    def retry_request(self, request_fn: Callable[[], Any], max_attempts: int = None) -> Any:
        """
        Call request_fn until it succeeds or max_attempts is exhausted.

        After failed attempt n the client waits n * retry_delay_ms. The last
        error is re-raised once every attempt has failed.
        """
        max_attempts = max_attempts or self.config.max_retry_attempts
        last_error = None

        for attempt in range(1, max_attempts + 1):
            try:
                return request_fn()
            except Exception as e:
                last_error = e
                logger.warning("Attempt %d/%d failed: %s", attempt, max_attempts, e)

                if attempt < max_attempts:
                    delay_ms = self.config.retry_delay_ms * attempt
                    logger.info("Waiting %dms before retry", delay_ms)
                    self.sleep(delay_ms / 1000)

        raise last_error

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        retry: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body."""
        def send():
            return self._send(method, path, params=params, json=json)

        try:
            response = self.retry_request(send) if retry else send()
        except requests.HTTPError as e:
            raise self._translate_http_error(e, method, path)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise UpstreamConnectionException(
                f"Could not reach Instantly API: {e}", details={"path": path}
            )

        return self._parse_body(response)

    @staticmethod
    def _parse_body(response: requests.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}

    @staticmethod
    def _translate_http_error(
        error: requests.HTTPError, method: str, path: str
    ) -> Exception:
        response = error.response
        status = response.status_code if response is not None else None
        body = response.text[:800] if response is not None else ""
        details = {"method": method, "path": path, "status": status, "body": body}

        logger.error("Instantly API call failed: %s (status=%s)", error, status)

        if status == 404:
            return NotFoundException(f"Resource not found: {path}", details=details)
        if status == 429:
            return RateLimitException(
                "Instantly rate limit exceeded", status_code=status, details=details
            )
        return InstantlyAPIException(
            f"Instantly API error {status} on {method} {path}",
            status_code=status,
            details=details,
        )

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def list_campaigns_page(
        self, starting_after: Optional[str] = None, limit: Optional[int] = None
    ) -> Tuple[list, Optional[str]]:
        """Fetch one page of campaigns; returns (campaigns, next_cursor)."""
        params = {"limit": limit or self.config.page_size}
        if starting_after:
            params["starting_after"] = starting_after

        logger.info("Fetching campaigns page (starting_after=%s)", starting_after)
        body = self._request("GET", CAMPAIGNS_ENDPOINT, params=params)

        campaigns = extract_records(body)
        logger.info("Retrieved %d campaigns from API response", len(campaigns))
        return campaigns, extract_cursor(body)

    def get_campaign(self, campaign_id: str) -> dict:
        """Fetch a campaign by ID."""
        path = self.config.endpoint(CAMPAIGN_DETAILS_ENDPOINT, id=campaign_id)
        logger.info("Fetching details for campaign %s", campaign_id)
        return self._request("GET", path)

    def get_campaign_metrics(self, campaign_id: str) -> dict:
        """Fetch delivery metrics for a campaign."""
        path = self.config.endpoint(CAMPAIGN_METRICS_ENDPOINT, id=campaign_id)
        logger.info("Fetching metrics for campaign %s", campaign_id)
        return self._request("GET", path)

    def get_campaign_subscribers(
        self,
        campaign_id: str,
        starting_after: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Tuple[list, Optional[str]]:
        """Fetch one page of campaign subscribers; returns (subscribers, next_cursor)."""
        path = self.config.endpoint(CAMPAIGN_SUBSCRIBERS_ENDPOINT, id=campaign_id)
        params = {"limit": limit or self.config.page_size}
        if starting_after:
            params["starting_after"] = starting_after

        body = self._request("GET", path, params=params)
        return extract_records(body), extract_cursor(body)

    # ------------------------------------------------------------------
    # Leads
    # ------------------------------------------------------------------

    def list_leads_page(
        self,
        starting_after: Optional[str] = None,
        limit: Optional[int] = None,
        campaign_id: Optional[str] = None,
    ) -> Tuple[list, Optional[str]]:
        """Fetch one page of leads via POST /leads/list; returns (leads, next_cursor)."""
        payload = {"limit": limit or self.config.page_size}
        if starting_after:
            payload["starting_after"] = starting_after
        if campaign_id:
            payload["campaign"] = campaign_id

        logger.info("Fetching leads page (starting_after=%s)", starting_after)
        body = self._request("POST", LEADS_LIST_ENDPOINT, json=payload)

        leads = extract_records(body)
        logger.info("Retrieved %d leads from API response", len(leads))
        return leads, extract_cursor(body)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def test_connection(self) -> dict:
        """
        Probe the campaigns endpoint with a single-item request.

        Returns a report dict; an API-level failure is reported with
        success=False rather than raised.

        Raises:
            UpstreamConnectionException: If the API cannot be reached
        """
        logger.info("Testing Instantly API connection")
        try:
            body = self._request(
                "GET", CAMPAIGNS_ENDPOINT, params={"limit": 1}, retry=False
            )
        except (InstantlyAPIException, NotFoundException) as e:
            logger.warning("Campaigns endpoint test failed: %s", e)
            return {
                "success": False,
                "message": "Instantly API rejected the request",
                "error": str(e),
                "status": getattr(e, "status_code", None),
            }

        return {
            "success": True,
            "message": "Connection successful",
            "campaignsEndpoint": {
                "structure": describe_shape(body),
                "recordsFound": len(extract_records(body)),
            },
        }

    def debug_response(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """
        Return the raw response of a GET endpoint with shape diagnostics.

        Raises:
            ValidationException: If endpoint is not a relative API path
        """
        if not endpoint or not endpoint.startswith("/") or "://" in endpoint:
            raise ValidationException(
                "endpoint must be a relative API path such as /campaigns"
            )

        params = params or {}
        logger.info("Debugging API response for endpoint %s", endpoint)
        body = self._request("GET", endpoint, params=params, retry=False)

        debug_info = {"endpoint": endpoint, "params": params}
        debug_info.update(describe_shape(body, sample_length=1000))
        return {"debugInfo": debug_info, "data": body}
