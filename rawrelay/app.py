"""Application factory and console entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.status import HTTP_400_BAD_REQUEST
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.status import HTTP_502_BAD_GATEWAY

from rawrelay.backends import BaseEntryBackend
from rawrelay.backends import MemoryBackend
from rawrelay.config import RelaySettings
from rawrelay.engine import ResourceCache
from rawrelay.exceptions import ConfigurationError
from rawrelay.exceptions import FetchError
from rawrelay.exceptions import InvalidResourceError
from rawrelay.origin import OriginClient
from rawrelay.routes import add_routes

logger = getLogger(__name__)


def create_app(
    settings: Optional[RelaySettings] = None,
    backend: Optional[BaseEntryBackend] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Configuration, read from the environment when omitted
        backend: Entry store, a fresh ``MemoryBackend`` when omitted
        transport: Transport for the outbound ``httpx`` client
    """
    settings = settings or RelaySettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(transport=transport) as client:
            origin = OriginClient(
                client,
                timeout=settings.request_timeout,
                user_agent=settings.user_agent,
                accept=settings.accept,
            )
            app.state.engine = ResourceCache(
                origin,
                backend=backend if backend is not None else MemoryBackend(),
                ttl=settings.cache_ttl,
            )
            yield

    app = FastAPI(title="rawrelay", lifespan=lifespan)
    app.state.settings = settings

    @app.exception_handler(InvalidResourceError)
    async def invalid_resource_handler(
        request: Request, exc: InvalidResourceError
    ) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=HTTP_400_BAD_REQUEST)

    @app.exception_handler(ConfigurationError)
    async def configuration_handler(
        request: Request, exc: ConfigurationError
    ) -> PlainTextResponse:
        logger.error("Misconfigured route %s: %s", request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(FetchError)
    async def fetch_error_handler(request: Request, exc: FetchError) -> PlainTextResponse:
        logger.error("Error: %s", exc)
        return PlainTextResponse(
            "Failed to fetch the file.", status_code=HTTP_502_BAD_GATEWAY
        )

    add_routes(app)
    return app


def main() -> None:
    import uvicorn

    settings = RelaySettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("rawrelay listening on port %d", settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
