import hmac

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi.security import APIKeyHeader
from starlette.status import HTTP_401_UNAUTHORIZED

from rawrelay.config import RelaySettings

API_KEY_HEADER = "x-api-key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def get_settings(request: Request) -> RelaySettings:
    return request.app.state.settings


def require_api_key(
    api_key: str | None = Depends(api_key_header),
    settings: RelaySettings = Depends(get_settings),
) -> None:
    """Reject the request unless it carries the configured API key."""
    expected = settings.api_key
    if not expected or api_key is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    if not hmac.compare_digest(api_key.encode(), expected.encode()):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unauthorized")
