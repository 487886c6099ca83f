"""
Lambda handler: Check Connection

Triggered by API Gateway (GET /test-connection). Probes the Instantly
campaigns endpoint and reports the response structure. Answers 503 when the
API is unreachable or rejects the request.
"""

from common.base_handler import BaseLambdaHandler


class CheckConnectionHandler(BaseLambdaHandler):
    """Handler for checking Instantly API connectivity."""

    def _execute(self, event: dict, context: dict) -> dict:
        report = self.instantly_client.test_connection()

        if not report["success"]:
            return self._error_response(
                report.get("error", "Connection failed"),
                503,
                error=report.get("message"),
            )
        return self._success_response(report, message=report["message"])


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda handler entry point."""
    handler = CheckConnectionHandler()
    return handler.handle(event, context)
