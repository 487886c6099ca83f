"""
Lambda handler: Scheduled Daily Sync

Triggered by an EventBridge schedule rule (default cron(0 2 * * ? *)).
Runs the same full sync as the HTTP function.
"""

from common.models import SyncTrigger
from common.sync_handler import FullSyncHandler, parse_flag


class ScheduledSyncHandler(FullSyncHandler):
    """Handler for the daily scheduled sync."""

    trigger = SyncTrigger.SCHEDULE

    def _include_leads(self, event: dict) -> bool:
        # EventBridge events carry no body; "detail" may hold overrides.
        detail = event.get("detail") or {}
        return parse_flag(detail.get("includeLeads"))


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = ScheduledSyncHandler()
    return handler.handle(event, context)
