"""
Lambda handler: List Campaigns

Triggered by API Gateway (GET /campaigns). Reads synced campaigns from
Firestore. Query parameters:
- status: decoded status label to filter on (e.g. "Active")
- limit: page size, 1-100 (default 50)
- page: 1-based page number (default 1)
"""

from common.base_handler import BaseLambdaHandler
from common.storage import CampaignRepository

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


class ListCampaignsHandler(BaseLambdaHandler):
    """Handler for listing stored campaigns."""

    def _execute(self, event: dict, context: dict) -> dict:
        status = self._get_param(event, "status")
        limit = self._get_int_param(event, "limit", DEFAULT_LIMIT, maximum=MAX_LIMIT)
        page = self._get_int_param(event, "page", 1)

        campaigns = CampaignRepository(self.firestore).list(
            status=status, limit=limit, page=page
        )
        self.logger.info("Listed %d campaigns (status=%s, page=%d)", len(campaigns), status, page)

        return self._success_response(
            {
                "campaigns": [c.model_dump(mode="json") for c in campaigns],
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "count": len(campaigns),
                    "hasMore": len(campaigns) == limit,
                },
                "filters": {"status": status},
            }
        )


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = ListCampaignsHandler()
    return handler.handle(event, context)
