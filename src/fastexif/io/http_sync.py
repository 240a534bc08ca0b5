"""Synchronous HTTP byte reader using requests."""

from typing import Optional

import requests

from .base import RANGE_FALLBACK_MAX, RangeNotSupportedError, eof_error

HEAD_TIMEOUT = 30
GET_TIMEOUT = 60

# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _decide_full_get(content_length: Optional[int], accept_ranges: bool) -> bool:
    """True when ranges are unavailable but the whole file is small enough to download."""
    return (not accept_ranges and
            (content_length is None or content_length < RANGE_FALLBACK_MAX))


class HTTPByteReader:
    """Synchronous HTTP byte reader with Range support."""

    def __init__(self, url: str):
        self.url = url
        self.bytes_fetched = 0
        self.requests_made = 0
        self.content_length: Optional[int] = None
        self._accept_ranges = False
        self._full_content: Optional[bytes] = None
        self._session = _get_session()
        self._perform_head()

    def _request(self, method: str, what: str, **kwargs) -> requests.Response:
        self.requests_made += 1
        try:
            response = self._session.request(method, self.url, **kwargs)
        except requests.RequestException as e:
            raise OSError(f"{what} request failed: {e}") from e
        if response.status_code >= 400:
            raise OSError(f"{what} request failed with status {response.status_code}")
        return response

    def _perform_head(self):
        response = self._request("HEAD", "HEAD", timeout=HEAD_TIMEOUT)
        if cl := response.headers.get('content-length'):
            self.content_length = int(cl)
        self._accept_ranges = response.headers.get('accept-ranges', '').lower() == 'bytes'

    def _fetch_full_content(self) -> bytes:
        if self._full_content is None:
            response = self._request("GET", "GET", timeout=GET_TIMEOUT)
            self._full_content = response.content
            self.bytes_fetched += len(self._full_content)
        return self._full_content

    @property
    def size(self) -> int:
        if self._full_content is not None:
            return len(self._full_content)
        if self.content_length is not None:
            return self.content_length
        return len(self._fetch_full_content())

    def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`."""
        if start < 0:
            raise OSError("Start offset cannot be negative")
        if length <= 0:
            return b""

        if self._full_content is None and not self._accept_ranges:
            if not _decide_full_get(self.content_length, self._accept_ranges):
                raise RangeNotSupportedError("Server doesn't support ranges and file is too large")
            self._fetch_full_content()

        if self._full_content is not None:
            if start + length > len(self._full_content):
                raise eof_error(start, length, len(self._full_content))
            return self._full_content[start:start + length]

        if self.content_length is not None and start + length > self.content_length:
            raise eof_error(start, length, self.content_length)
        headers = {'Range': f'bytes={start}-{start + length - 1}'}
        response = self._request("GET", "Range", headers=headers, timeout=HEAD_TIMEOUT)
        if response.status_code == 200:
            # Range ignored, the whole body came back
            self._full_content = response.content
            self.bytes_fetched += len(self._full_content)
            return self.fetch(start, length)
        data = response.content
        self.bytes_fetched += len(data)
        if len(data) < length:
            raise eof_error(start, length, start + len(data))
        return data[:length]

    def close(self):
        # Session is shared, don't close it here
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_http_reader(url: str) -> HTTPByteReader:
    """Create a synchronous HTTP byte reader."""
    return HTTPByteReader(url)
