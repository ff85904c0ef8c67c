"""Origin fetch capability backed by ``httpx``."""

import asyncio
from collections.abc import Mapping
from logging import getLogger

import httpx

from rawrelay.exceptions import OriginRejectedError
from rawrelay.exceptions import OriginUnreachableError
from rawrelay.types import OriginResponse

CACHE_BUSTER_PARAM = "_ts"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "rawrelay/1.0"
DEFAULT_ACCEPT = "text/plain, */*"

logger = getLogger(__name__)


def bust_url(url: str, now: float) -> str:
    """Append a request-scoped timestamp so CDN caches cannot answer the request."""
    busted = httpx.URL(url).copy_add_param(CACHE_BUSTER_PARAM, str(int(now * 1000)))
    return str(busted)


def is_accepted_status(status_code: int) -> bool:
    return 200 <= status_code < 300 or status_code == 304


class OriginClient:
    """Fetches resources from the origin.

    Redirects are not followed: a 3xx other than 304 is a rejection.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        accept: str = DEFAULT_ACCEPT,
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.default_headers = {"User-Agent": user_agent, "Accept": accept}

    async def fetch(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> OriginResponse:
        """Issue a GET against the origin.

        Args:
            url: Target URL, possibly decorated with a cache buster
            headers: Extra request headers, e.g. conditional ones

        Returns:
            The accepted response

        Raises:
            OriginUnreachableError: On timeout or transport failure
            OriginRejectedError: On a status outside 2xx and 304
        """
        request_headers = {**self.default_headers, **(headers or {})}
        try:
            # httpx applies its timeout per read, the deadline bounds the whole exchange
            response = await asyncio.wait_for(
                self.client.get(
                    url,
                    headers=request_headers,
                    timeout=self.timeout,
                    follow_redirects=False,
                ),
                timeout=self.timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise OriginUnreachableError(url, f"Timed out fetching {url}") from e
        except httpx.TransportError as e:
            raise OriginUnreachableError(url, f"Could not reach origin: {e}") from e

        if not is_accepted_status(response.status_code):
            raise OriginRejectedError(url, response.status_code)

        logger.debug("Fetched %s -> %s", url, response.status_code)
        return OriginResponse(
            url=url,
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            content=response.content,
        )
