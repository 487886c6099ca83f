"""
Lambda handler: Authenticated Full Sync

Same full sync as the HTTP function, but only for authenticated callers:
either API Gateway has already attached an authorizer principal to the
request, or the caller presents "Authorization: Bearer <SYNC_CALLABLE_TOKEN>".
"""

import hmac
import os

from common.exceptions import AuthenticationException
from common.models import SyncTrigger
from common.sync_handler import FullSyncHandler


class CallableSyncHandler(FullSyncHandler):
    """Handler for authenticated full syncs."""

    trigger = SyncTrigger.CALLABLE

    def _authorize(self, event: dict) -> None:
        authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
        principal = authorizer.get("principalId") or (authorizer.get("claims") or {}).get("sub")
        if principal:
            self.logger.info("Sync requested by %s", principal)
            return

        expected = os.environ.get("SYNC_CALLABLE_TOKEN")
        headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
        scheme, _, token = (headers.get("authorization") or "").strip().partition(" ")
        if scheme.lower() != "bearer":
            token = ""
        token = token.strip()

        if not expected or not token or not hmac.compare_digest(token.encode(), expected.encode()):
            raise AuthenticationException("The function must be called while authenticated")


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = CallableSyncHandler()
    return handler.handle(event, context)
