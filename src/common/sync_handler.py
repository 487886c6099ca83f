"""
Shared full-sync handler used by the HTTP, scheduled and callable sync functions.
"""

from typing import Any

from common.base_handler import BaseLambdaHandler
from common.models import SyncTrigger

FALSE_VALUES = ("false", "0", "no")


def parse_flag(value: Any, default: bool = True) -> bool:
    """Interpret a JSON or string flag; "false", "0" and "no" are false."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_VALUES
    return bool(value)


class FullSyncHandler(BaseLambdaHandler):
    """Runs a full campaign (and lead) sync and reports the run."""

    trigger = SyncTrigger.HTTP

    def _execute(self, event: dict, context: dict) -> dict:
        self._authorize(event)

        include_leads = self._include_leads(event)
        self.logger.info(
            "Starting full sync (trigger=%s, include_leads=%s)",
            self.trigger.value,
            include_leads,
        )

        run = self.sync_orchestrator.run_full_sync(
            trigger=self.trigger, include_leads=include_leads
        )
        return self._success_response(
            run.to_dict(), message="Synchronization completed successfully"
        )

    def _authorize(self, event: dict) -> None:
        """Hook for handlers that require an authenticated caller."""
        return None

    def _include_leads(self, event: dict) -> bool:
        body = self._parse_body(event)
        if not isinstance(body, dict):
            return True
        return parse_flag(body.get("includeLeads"))
