"""
Lambda handler: Debug API Response

Triggered by API Gateway (GET /debug-api?endpoint=/campaigns&limit=1).
Returns the raw Instantly response for a relative endpoint together with a
summary of its shape. Every query parameter except "endpoint" is forwarded.
"""

from common.base_handler import BaseLambdaHandler


class DebugApiResponseHandler(BaseLambdaHandler):
    """Handler for inspecting raw Instantly responses."""

    def _execute(self, event: dict, context: dict) -> dict:
        endpoint = self._get_param(event, "endpoint", required=True)
        params = {
            k: v
            for k, v in (event.get("queryStringParameters") or {}).items()
            if k != "endpoint"
        }

        result = self.instantly_client.debug_response(endpoint, params)
        return self._success_response(result)


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = DebugApiResponseHandler()
    return handler.handle(event, context)
