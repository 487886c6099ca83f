"""
Lambda handler: Sync Stats

Triggered by API Gateway (GET /sync-stats). Reports stored campaign and lead
counts and the outcome of the most recent sync run.
"""

from common.base_handler import BaseLambdaHandler
from common.storage import CampaignRepository, LeadRepository, SyncRunRepository


class SyncStatsHandler(BaseLambdaHandler):
    """Handler for sync statistics."""

    def _execute(self, event: dict, context: dict) -> dict:
        campaign_id = self._get_param(event, "campaignId")

        stats = {
            "campaigns": CampaignRepository(self.firestore).stats(),
            "leads": LeadRepository(self.firestore).stats(campaign_id=campaign_id),
            "lastSync": SyncRunRepository(self.firestore).latest(),
        }
        return self._success_response(stats)


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = SyncStatsHandler()
    return handler.handle(event, context)
