import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from iplookup import __version__
from iplookup.common.config import Settings, get_settings, settings
from iplookup.common.logging import configure_logging
from iplookup.exceptions import IPLookupError, MethodNotAllowed
from iplookup.lookup.provider import IPDataProvider, IpapiProvider, build_client
from iplookup.lookup.routes import router as lookup_router
from iplookup.lookup.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(exc: IPLookupError) -> JSONResponse:
    headers = {"Allow": "GET"} if isinstance(exc, MethodNotAllowed) else None
    body = ErrorResponse(error=exc.code, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)


def create_app(settings: Optional[Settings] = None, provider: Optional[IPDataProvider] = None) -> FastAPI:
    """
    Build the API application.

    When *provider* is given it is used as-is (tests); otherwise an
    ipapi.co provider sharing one httpx client is opened for the app's
    lifetime.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if provider is not None:
            app.state.provider = provider
            yield
            return
        async with build_client(settings) as client:
            app.state.provider = IpapiProvider.from_settings(client, settings)
            logger.info("provider ready: %s", settings.provider_url)
            yield

    app = FastAPI(title=settings.app_name, version=__version__, debug=settings.debug, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(IPLookupError)
    async def handle_lookup_error(request: Request, exc: IPLookupError):
        logger.info("response from: %s %s status: %s", request.method, request.url.path, exc.status_code)
        return error_response(exc)

    app.include_router(lookup_router)

    @app.get("/")
    def read_root():
        return {"status": f"{settings.app_name} online", "version": __version__}

    @app.get("/health")
    async def health_check():
        return {"status": "online", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
