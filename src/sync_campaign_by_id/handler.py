"""
Lambda handler: Sync Campaign By ID

Triggered by API Gateway (POST /sync-campaign/{campaignId}). Fetches one
campaign and its metrics from Instantly and upserts it into Firestore.
"""

from common.base_handler import BaseLambdaHandler


class SyncCampaignByIdHandler(BaseLambdaHandler):
    """Handler for syncing a single campaign."""

    def _execute(self, event: dict, context: dict) -> dict:
        campaign_id = self._get_param(event, "campaignId", required=True)

        campaign = self.sync_orchestrator.sync_campaign_by_id(campaign_id)
        return self._success_response(
            campaign.model_dump(mode="json"),
            message=f"Campaign {campaign_id} synced successfully",
        )


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = SyncCampaignByIdHandler()
    return handler.handle(event, context)
