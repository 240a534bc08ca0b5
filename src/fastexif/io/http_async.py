"""Asynchronous HTTP byte reader using httpx."""

import asyncio
from typing import Optional

import httpx

from .base import RangeNotSupportedError, eof_error
from .http_sync import GET_TIMEOUT, HEAD_TIMEOUT, _decide_full_get

# Global async client, bound to the event loop that created it
_client: Optional[httpx.AsyncClient] = None
_client_loop: Optional[asyncio.AbstractEventLoop] = None


def _get_client() -> httpx.AsyncClient:
    """Get or create the httpx AsyncClient for the running loop."""
    global _client, _client_loop
    loop = asyncio.get_running_loop()
    if _client is None or _client_loop is not loop:
        _client = httpx.AsyncClient(timeout=GET_TIMEOUT)
        _client_loop = loop
    return _client


class HTTPAsyncByteReader:
    """Asynchronous HTTP byte reader with Range support."""

    def __init__(self, url: str):
        self.url = url
        self.bytes_fetched = 0
        self.requests_made = 0
        self.content_length: Optional[int] = None
        self._accept_ranges = False
        self._full_content: Optional[bytes] = None
        self._initialized = False

    async def _request(self, method: str, what: str, **kwargs) -> httpx.Response:
        self.requests_made += 1
        try:
            response = await _get_client().request(method, self.url, **kwargs)
        except httpx.HTTPError as e:
            raise OSError(f"{what} request failed: {e}") from e
        if response.status_code >= 400:
            raise OSError(f"{what} request failed with status {response.status_code}")
        return response

    async def _ensure_initialized(self):
        """Perform HEAD request to check capabilities if not already done."""
        if self._initialized:
            return
        response = await self._request("HEAD", "HEAD", timeout=HEAD_TIMEOUT)
        if cl := response.headers.get('content-length'):
            self.content_length = int(cl)
        self._accept_ranges = response.headers.get('accept-ranges', '').lower() == 'bytes'
        self._initialized = True

    async def _fetch_full_content(self) -> bytes:
        if self._full_content is None:
            response = await self._request("GET", "GET")
            self._full_content = response.content
            self.bytes_fetched += len(self._full_content)
        return self._full_content

    @property
    def size(self) -> int:
        """Known size; only valid once initialised and the size is known."""
        if self._full_content is not None:
            return len(self._full_content)
        if self.content_length is None:
            raise OSError("Content length unknown before download")
        return self.content_length

    async def get_size(self) -> int:
        await self._ensure_initialized()
        if self._full_content is None and self.content_length is None:
            await self._fetch_full_content()
        return self.size

    async def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`."""
        await self._ensure_initialized()
        if start < 0:
            raise OSError("Start offset cannot be negative")
        if length <= 0:
            return b""

        if self._full_content is None and not self._accept_ranges:
            if not _decide_full_get(self.content_length, self._accept_ranges):
                raise RangeNotSupportedError("Server doesn't support ranges and file is too large")
            await self._fetch_full_content()

        if self._full_content is not None:
            if start + length > len(self._full_content):
                raise eof_error(start, length, len(self._full_content))
            return self._full_content[start:start + length]

        if self.content_length is not None and start + length > self.content_length:
            raise eof_error(start, length, self.content_length)
        headers = {'Range': f'bytes={start}-{start + length - 1}'}
        response = await self._request("GET", "Range", headers=headers, timeout=HEAD_TIMEOUT)
        if response.status_code == 200:
            # Range ignored, the whole body came back
            self._full_content = response.content
            self.bytes_fetched += len(self._full_content)
            return await self.fetch(start, length)
        data = response.content
        self.bytes_fetched += len(data)
        if len(data) < length:
            raise eof_error(start, length, start + len(data))
        return data[:length]

    async def close(self):
        # Client is shared, don't close it here
        pass

    async def __aenter__(self):
        await self._ensure_initialized()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


async def open_http_reader_async(url: str) -> HTTPAsyncByteReader:
    """Create an asynchronous HTTP byte reader."""
    reader = HTTPAsyncByteReader(url)
    await reader._ensure_initialized()
    return reader


async def close_global_client():
    """Close the global httpx client before its event loop goes away."""
    global _client, _client_loop
    if _client is not None:
        await _client.aclose()
        _client = None
        _client_loop = None
