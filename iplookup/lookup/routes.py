from typing import Optional

from fastapi import APIRouter, Depends, Request

from iplookup.lookup.provider import IPDataProvider
from iplookup.lookup.schemas import ErrorResponse, IPLookupResult
from iplookup.lookup.service import handle_lookup

# Every method is routed here so the core can reject non-GET with a message
# naming the method instead of FastAPI's generic 405.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}

router = APIRouter(redirect_slashes=False, tags=["lookup"])


def get_provider(request: Request) -> IPDataProvider:
    return request.app.state.provider


def caller_address(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop if behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


@router.api_route(
    "/ip/{ip}",
    methods=ALL_METHODS,
    response_model=IPLookupResult,
    responses=ERROR_RESPONSES,
)
async def lookup_ip(ip: str, request: Request, provider: IPDataProvider = Depends(get_provider)):
    return await handle_lookup(request.method, ip, provider)


@router.api_route("/ip", methods=ALL_METHODS, responses=ERROR_RESPONSES, include_in_schema=False)
@router.api_route("/ip/", methods=ALL_METHODS, responses=ERROR_RESPONSES, include_in_schema=False)
async def lookup_without_ip(request: Request, provider: IPDataProvider = Depends(get_provider)):
    return await handle_lookup(request.method, None, provider)


@router.api_route("/me", methods=ALL_METHODS, response_model=IPLookupResult, responses=ERROR_RESPONSES)
async def lookup_caller(request: Request, provider: IPDataProvider = Depends(get_provider)):
    """Look up the address the request came from."""
    return await handle_lookup(request.method, caller_address(request), provider)
