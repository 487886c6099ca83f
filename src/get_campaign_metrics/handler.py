"""
Lambda handler: Get Campaign Metrics

Triggered by API Gateway (GET /campaigns/{campaignId}/metrics). Reads live
metrics for a campaign straight from the Instantly API.
"""

from common.base_handler import BaseLambdaHandler


class GetCampaignMetricsHandler(BaseLambdaHandler):
    """Handler for live campaign metrics."""

    def _execute(self, event: dict, context: dict) -> dict:
        campaign_id = self._get_param(event, "campaignId", required=True)

        metrics = self.instantly_client.get_campaign_metrics(campaign_id)
        return self._success_response({"campaignId": campaign_id, "metrics": metrics})


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = GetCampaignMetricsHandler()
    return handler.handle(event, context)
