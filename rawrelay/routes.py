"""Relay routes."""

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi.responses import PlainTextResponse

from rawrelay.config import RelaySettings
from rawrelay.directives import CacheControl
from rawrelay.engine import ResourceCache
from rawrelay.exceptions import ConfigurationError
from rawrelay.security import get_settings
from rawrelay.security import require_api_key
from rawrelay.types import ResolveResult
from rawrelay.validation import build_resource_url
from rawrelay.validation import validate_filename


def get_engine(request: Request) -> ResourceCache:
    return request.app.state.engine


def render(result: ResolveResult, settings: RelaySettings) -> Response:
    """Turn a resolve result into the relayed response."""
    return Response(
        content=result.content,
        headers={
            "Content-Type": result.content_type,
            "Cache-Control": str(CacheControl.public(settings.max_age)),
            "X-Cache": result.provenance.header_value,
        },
    )


def add_routes(app: FastAPI) -> None:
    """Register the relay routes on ``app``.

    ``app.state`` must carry ``settings`` and ``engine``; ``create_app`` does this.
    """

    @app.get("/ping", response_class=PlainTextResponse)
    async def ping() -> str:
        return "pong"

    @app.get("/raw", dependencies=[Depends(require_api_key)])
    async def get_raw(
        fresh: bool = False,
        settings: RelaySettings = Depends(get_settings),
        engine: ResourceCache = Depends(get_engine),
    ) -> Response:
        if not settings.raw_url:
            raise ConfigurationError("RAW_URL is not configured")

        result = await engine.resolve(settings.raw_url, force_fresh=fresh)
        return render(result, settings)

    @app.get("/scripts/{filename}", dependencies=[Depends(require_api_key)])
    async def get_script(
        filename: str,
        fresh: bool = False,
        settings: RelaySettings = Depends(get_settings),
        engine: ResourceCache = Depends(get_engine),
    ) -> Response:
        validate_filename(filename, settings.allowed_extensions)
        if not settings.base_repo_url:
            raise ConfigurationError("BASE_REPO_URL is not configured")

        url = build_resource_url(settings.base_repo_url, filename)
        result = await engine.resolve(url, force_fresh=fresh)
        return render(result, settings)

    @app.get("/cached-entries", dependencies=[Depends(require_api_key)])
    async def get_cached_entries(
        engine: ResourceCache = Depends(get_engine),
    ) -> dict:
        now = engine.clock()
        cache_data = await engine.backend.get_cache_data()
        entries = [
            {
                "identifier": identifier,
                "content_type": entry.content_type,
                "validator": entry.validator,
                "size": len(entry.content),
                "expires_at": entry.expires_at,
                "ttl_remaining": max(0.0, entry.expires_at - now),
                "is_fresh": entry.is_fresh(now),
            }
            for identifier, entry in sorted(cache_data.items())
        ]
        fresh_count = sum(1 for entry in entries if entry["is_fresh"])
        return {
            "entries": entries,
            "total_entries": len(entries),
            "fresh_entries": fresh_count,
            "stale_entries": len(entries) - fresh_count,
        }
