"""
Base handler class implementing Template Method pattern for Lambda functions.
Provides consistent error handling, client initialization, and logging.
"""

from abc import ABC, abstractmethod
import base64
import json
import logging
import os
from typing import Any, Optional

from common.exceptions import (
    AuthenticationException,
    NotFoundException,
    SyncInProgressException,
    UpstreamConnectionException,
    ValidationException,
)

# Most specific first; anything unlisted is a 500.
ERROR_STATUS_CODES = (
    (ValidationException, 400),
    (AuthenticationException, 401),
    (NotFoundException, 404),
    (SyncInProgressException, 409),
    (UpstreamConnectionException, 503),
)

# Carry credentials (Authorization, cookies); never logged.
UNLOGGED_EVENT_KEYS = ("headers", "multiValueHeaders")

ERROR_LABELS = {
    400: "Bad request",
    401: "Unauthorized",
    404: "Not found",
    409: "Conflict",
    500: "Internal server error",
    503: "Service unavailable",
}


class BaseLambdaHandler(ABC):
    """
    Abstract base class for Lambda handlers with common functionality.

    Subclasses must implement _execute() method with their specific logic.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))
        self._config = None
        self._instantly_client = None
        self._firestore = None
        self._sync_orchestrator = None

    @property
    def config(self):
        """Configuration read once from the environment"""
        if self._config is None:
            from common.config import InstantlyConfig

            self._config = InstantlyConfig.from_env()
        return self._config

    @property
    def instantly_client(self):
        """Lazy initialization of Instantly client"""
        if self._instantly_client is None:
            from common.instantly_client import InstantlyClient

            self._instantly_client = InstantlyClient(self.config)
        return self._instantly_client

    @property
    def firestore(self):
        """Lazy initialization of Firestore client"""
        if self._firestore is None:
            from common.firestore_client import get_firestore_client

            self._firestore = get_firestore_client()
        return self._firestore

    @property
    def sync_orchestrator(self):
        """Lazy initialization of the sync orchestrator, guarded by the run lock"""
        if self._sync_orchestrator is None:
            from common.storage import DEFAULT_LOCK_TTL_SECONDS, SyncLock
            from common.sync_service import SyncOrchestrator

            ttl = int(os.getenv("SYNC_LOCK_TTL_SECONDS", DEFAULT_LOCK_TTL_SECONDS))
            self._sync_orchestrator = SyncOrchestrator(
                self.instantly_client,
                self.firestore,
                self.config,
                lock=SyncLock(self.firestore, ttl_seconds=ttl),
            )
        return self._sync_orchestrator

    def handle(self, event: dict, context: dict) -> dict:
        """
        Main entry point for Lambda handler (Template Method).

        Args:
            event: Lambda event dict
            context: Lambda context

        Returns:
            HTTP response dict with statusCode and body
        """
        try:
            loggable = {k: v for k, v in event.items() if k not in UNLOGGED_EVENT_KEYS}
            self.logger.info(f"Received event: {json.dumps(loggable, default=str)}")
            result = self._execute(event, context)
            self.logger.info("Handler completed successfully")
            return result
        except Exception as e:
            status_code = self._status_code_for(e)
            if status_code >= 500:
                self.logger.error(f"Handler error: {e}", exc_info=True)
            else:
                self.logger.warning(f"Request rejected ({status_code}): {e}")
            return self._error_response(str(e), status_code)

    @abstractmethod
    def _execute(self, event: dict, context: dict) -> dict:
        """
        Subclasses implement their specific business logic here.

        Args:
            event: Lambda event dict
            context: Lambda context

        Returns:
            HTTP response dict
        """
        pass

    @staticmethod
    def _status_code_for(error: Exception) -> int:
        for exc_type, status_code in ERROR_STATUS_CODES:
            if isinstance(error, exc_type):
                return status_code
        return 500

    def _success_response(
        self, data: Any = None, message: Optional[str] = None, status_code: int = 200
    ) -> dict:
        """Standard success response format"""
        body = {"success": True}
        if data is not None:
            body["data"] = data
        if message:
            body["message"] = message
        return self._response(body, status_code)

    def _error_response(
        self, message: str, status_code: int, error: Optional[str] = None
    ) -> dict:
        """Standard error response format"""
        body = {
            "success": False,
            "error": error or ERROR_LABELS.get(status_code, "Internal server error"),
            "message": message,
        }
        return self._response(body, status_code)

    @staticmethod
    def _response(body: dict, status_code: int) -> dict:
        return {
            "statusCode": status_code,
            "headers": {
                "Content-Type": "application/json",
                "Access-Control-Allow-Origin": "*",
            },
            "body": json.dumps(body, default=str),
        }

    def _parse_body(self, event: dict) -> Any:
        """Parse request body handling base64 encoding"""
        body = event.get("body", "")

        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")

        if isinstance(body, str):
            if body:  # Only parse non-empty strings
                try:
                    return json.loads(body)
                except ValueError:
                    raise ValidationException("Request body is not valid JSON")
            return {}

        return body or {}

    def _get_param(self, event: dict, name: str, required: bool = False) -> Optional[str]:
        """
        Read a parameter from the path, then the query string, then the JSON body.

        Raises:
            ValidationException: If required and absent
        """
        for source in ("pathParameters", "queryStringParameters"):
            value = (event.get(source) or {}).get(name)
            if value not in (None, ""):
                return value

        body = self._parse_body(event)
        if isinstance(body, dict) and body.get(name) not in (None, ""):
            return body[name]

        if required:
            raise ValidationException(f"{name} is required")
        return None

    def _get_int_param(self, event: dict, name: str, default: int, minimum: int = 1, maximum: int = None) -> int:
        """Read an integer query parameter, clamped to [minimum, maximum]."""
        raw = self._get_param(event, name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValidationException(f"{name} must be an integer")
        value = max(minimum, value)
        if maximum is not None:
            value = min(value, maximum)
        return value
