"""
Lambda handler: Get Campaign

Triggered by API Gateway (GET /campaigns/{campaignId}). Returns the stored
Firestore copy of a campaign.
"""

from common.base_handler import BaseLambdaHandler
from common.exceptions import NotFoundException
from common.storage import CampaignRepository


class GetCampaignHandler(BaseLambdaHandler):
    """Handler for reading one stored campaign."""

    def _execute(self, event: dict, context: dict) -> dict:
        campaign_id = self._get_param(event, "campaignId", required=True)

        campaign = CampaignRepository(self.firestore).get(campaign_id)
        if campaign is None:
            raise NotFoundException(f"Campaign {campaign_id} not found")

        return self._success_response(campaign.model_dump(mode="json"))


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = GetCampaignHandler()
    return handler.handle(event, context)
