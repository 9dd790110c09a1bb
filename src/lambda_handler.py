"""AWS Lambda handler serving the POS API behind API Gateway.

Requests are passed to the FastAPI application through the Mangum ASGI
adapter.
"""

import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_fastapi_app, initialize_lambda_environment

# Initialize Lambda environment during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    mangum_handler: Mangum | None = Mangum(get_fastapi_app(), lifespan="off")
else:
    mangum_handler = None


def is_api_gateway_event(event: dict[str, Any]) -> bool:
    """Determine if the event came from API Gateway (REST or HTTP API).

    Args:
        event: The Lambda event payload

    Returns:
        True for API Gateway requests, False otherwise
    """
    return "requestContext" in event and ("httpMethod" in event or "rawPath" in event)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point.

    Args:
        event: The Lambda event payload
        context: The Lambda context object

    Returns:
        API Gateway proxy response dict
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    if not is_api_gateway_event(event):
        logger.warning("Rejecting non API Gateway event")
        return {
            "statusCode": 400,
            "body": '{"success": false, "error": "Unsupported event type"}',
        }

    handler = mangum_handler
    if handler is None:
        handler = Mangum(get_fastapi_app(), lifespan="off")

    try:
        result: dict[str, Any] = handler(event, context)
        return result
    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": '{"success": false, "error": "Internal server error"}',
        }
