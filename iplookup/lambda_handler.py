"""
API Gateway (REST, proxy integration) entry point.

Same contract as the FastAPI app, for deployments that map
``GET /ip/{ip}`` straight onto a function.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional

from iplookup.common.config import get_settings
from iplookup.common.logging import configure_logging
from iplookup.exceptions import IPLookupError, MethodNotAllowed
from iplookup.lookup.provider import IPDataProvider, IpapiProvider, build_client
from iplookup.lookup.schemas import ErrorResponse
from iplookup.lookup.service import handle_lookup

logger = logging.getLogger(__name__)


def _response(status_code: int, body: str, extra_headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    headers = {"Content-Type": "application/json"}
    if extra_headers:
        headers.update(extra_headers)
    return {"statusCode": status_code, "headers": headers, "body": body}


async def respond(event: Dict[str, Any], provider: IPDataProvider) -> Dict[str, Any]:
    """Turn one proxy event into a proxy response. Never raises."""
    method = event.get("httpMethod") or ""
    ip = (event.get("pathParameters") or {}).get("ip")

    try:
        result = await handle_lookup(method, ip, provider)
        response = _response(200, result.model_dump_json())
    except IPLookupError as exc:
        extra = {"Allow": "GET"} if isinstance(exc, MethodNotAllowed) else None
        body = ErrorResponse(error=exc.code, message=exc.message)
        response = _response(exc.status_code, body.model_dump_json(), extra)
    except Exception:
        logger.exception("unhandled error for %s", event.get("path"))
        body = ErrorResponse(error="internal_error", message="internal server error")
        response = _response(500, body.model_dump_json())

    logger.info(
        "response from: %s statusCode: %s body: %s",
        event.get("path"), response["statusCode"], response["body"],
    )
    return response


async def _respond_with_ipapi(event: Dict[str, Any]) -> Dict[str, Any]:
    settings = get_settings()
    async with build_client(settings) as client:
        return await respond(event, IpapiProvider.from_settings(client, settings))


def handler(event: Dict[str, Any], context: Any = None, provider: Optional[IPDataProvider] = None) -> Dict[str, Any]:
    configure_logging(get_settings().log_level)
    logger.info("received: %s", json.dumps(event, default=str))
    if provider is not None:
        return asyncio.run(respond(event, provider))
    return asyncio.run(_respond_with_ipapi(event))
