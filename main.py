"""Cloud Functions entry point for deployment.

This module provides the HTTP endpoint for Google Cloud Functions (Gen 2).
Each request names a tool and its arguments; the matching handler fetches
and parses the Mountaineers pages and returns a JSON result.
"""

import logging
import functions_framework
from flask import Request

from mountaineers_scraper.functions import HANDLERS


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def dispatch(request_json: dict) -> dict:
    """
    Run the handler named by request_json['tool'].

    Unknown tools and malformed arguments are reported in the usual
    error envelope instead of raising.
    """
    if not isinstance(request_json, dict):
        return {
            'status': 'error',
            'error': 'request body must be a JSON object',
        }

    tool = request_json.get('tool')
    arguments = request_json.get('arguments') or {}

    handler = HANDLERS.get(tool)
    if handler is None:
        return {
            'status': 'error',
            'error': f"Unknown tool: {tool!r}. Available tools: {', '.join(sorted(HANDLERS))}",
        }
    if not isinstance(arguments, dict):
        return {
            'status': 'error',
            'error': 'arguments must be a JSON object',
        }

    return handler(arguments)


@functions_framework.http
def tools(request: Request):
    """
    Tools Cloud Function - runs one scraper tool.

    Expected JSON payload:
    {
        "tool": "search_activities",
        "arguments": {"activity_type": "Day Hiking", "page": 0}
    }

    Returns:
    {
        "status": "success",
        "result": {"total_count": 42, "items": [...], "page": 0, "has_more": true}
    }
    """
    logger.info("=== Tools function invoked ===")
    request_json = request.get_json(silent=True) or {}
    logger.info(f"Request payload: {request_json}")

    result = dispatch(request_json)

    tool = request_json.get('tool') if isinstance(request_json, dict) else None
    logger.info(f"Tool {tool} finished with status {result['status']}")
    logger.info("=== Tools function completed ===")
    return result
