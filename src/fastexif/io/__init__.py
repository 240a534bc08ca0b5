"""I/O layer for fastexif - delivers exact byte windows to container parsers."""

from .base import ByteReader, AsyncByteReader, RangeNotSupportedError
from .local import open_local_reader, open_local_reader_async
from .http_sync import open_http_reader
from .http_async import open_http_reader_async


def _is_url(source) -> bool:
    return str(source).startswith(('http://', 'https://'))


def open_reader(source) -> ByteReader:
    """Create the ByteReader matching a path, URL or binary file object."""
    if not hasattr(source, 'read') and _is_url(source):
        return open_http_reader(str(source))
    return open_local_reader(source)


async def open_reader_async(source) -> AsyncByteReader:
    """Create the AsyncByteReader matching a path, URL or binary file object."""
    if not hasattr(source, 'read') and _is_url(source):
        return await open_http_reader_async(str(source))
    return await open_local_reader_async(source)


__all__ = [
    "ByteReader", "AsyncByteReader", "RangeNotSupportedError",
    "open_reader", "open_reader_async",
    "open_local_reader", "open_local_reader_async",
    "open_http_reader", "open_http_reader_async",
]
