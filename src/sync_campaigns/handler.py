"""
Lambda handler: Full Sync

Triggered by API Gateway (POST /sync-campaigns). Pulls every campaign and,
unless the body sets "includeLeads": false, every lead from Instantly and
writes them to Firestore in batches of at most 500 documents.
"""

from common.sync_handler import FullSyncHandler


class SyncCampaignsHandler(FullSyncHandler):
    """Handler for manually triggered full syncs."""

    pass


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = SyncCampaignsHandler()
    return handler.handle(event, context)
