from __future__ import annotations

from typing import Optional, Union

import httpcore
import httpx

from verdict._core.models import RawResponse
from verdict._utils import to_str

__all__ = (
    "from_httpx",
    "from_httpcore",
    "HttpxFetcher",
    "AsyncHttpxFetcher",
)


def from_httpx(response: httpx.Response) -> RawResponse:
    """
    Convert an httpx.Response into a RawResponse.

    Repeated header fields are kept separate, and the request URL is
    carried along so relative Location headers can be resolved.
    """
    try:
        url: Optional[str] = str(response.url)
    except RuntimeError:
        # The response was built without a request.
        url = None

    return RawResponse(
        status_code=response.status_code,
        headers=response.headers.multi_items(),
        content=response.read(),
        url=url,
    )


def from_httpcore(response: httpcore.Response, url: Union[str, bytes, httpcore.URL, None] = None) -> RawResponse:
    """Convert an httpcore.Response into a RawResponse."""
    if isinstance(url, httpcore.URL):
        url = bytes(url)

    return RawResponse(
        status_code=response.status,
        headers=[(to_str(key), to_str(value)) for key, value in response.headers],
        content=response.read(),
        url=to_str(url) if url is not None else None,
    )


class HttpxFetcher:
    """Fetches redirect targets with an `httpx.Client`, never letting httpx follow redirects itself."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def __call__(self, url: str) -> RawResponse:
        return from_httpx(self._client.get(url, follow_redirects=False))


class AsyncHttpxFetcher:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def __call__(self, url: str) -> RawResponse:
        response = await self._client.get(url, follow_redirects=False)
        await response.aread()
        return from_httpx(response)
