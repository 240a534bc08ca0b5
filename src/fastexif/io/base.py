"""Base protocols and shared types for the I/O layer."""

from typing import Protocol, runtime_checkable


class RangeNotSupportedError(OSError):
    """Raised when server rejects Range and file size > RANGE_FALLBACK_MAX."""


RANGE_FALLBACK_MAX = 10 * 1024 * 1024  # 10 MB


def eof_error(start: int, length: int, size: int) -> OSError:
    return OSError(f"Unexpected end of file: requested {length} bytes at offset {start}, "
                   f"but source only has {size} bytes")


@runtime_checkable
class ByteReader(Protocol):
    """Protocol for synchronous byte readers."""

    bytes_fetched: int  # running total
    requests_made: int

    @property
    def size(self) -> int:
        ...

    def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`.
        If not enough data can be fetched -> raise OSError.
        """
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class AsyncByteReader(Protocol):
    """Protocol for asynchronous byte readers."""

    bytes_fetched: int  # running total
    requests_made: int

    @property
    def size(self) -> int:
        ...

    async def get_size(self) -> int:
        """Size of the source, fetching whatever is needed to learn it."""
        ...

    async def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`.
        If not enough data can be fetched -> raise OSError.
        """
        ...

    async def close(self) -> None:
        ...
