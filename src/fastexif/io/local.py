"""Local file readers using mmap."""

import asyncio
import io
import mmap
from pathlib import Path
from typing import BinaryIO, Union

from .base import eof_error


class LocalByteReader:
    """Synchronous local file reader using mmap."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self.bytes_fetched = 0
        self.requests_made = 0
        self._file = None
        self._mmap = None
        self._data = None  # in-memory sources and empty files
        self._should_close_file = False

        if hasattr(source, 'read'):
            # file objects are read once, restoring their position
            pos = source.tell() if source.seekable() else None
            if pos is not None:
                source.seek(0)
            self._data = source.read()
            if pos is not None:
                source.seek(pos)
        else:
            self._file = open(source, 'rb')
            self._should_close_file = True

    def _buffer(self):
        if self._data is None and self._mmap is None:
            self._file.seek(0, io.SEEK_END)
            if self._file.tell() == 0:
                self._data = b""    # mmap rejects empty files
            else:
                self._mmap = mmap.mmap(self._file.fileno(), 0, access=mmap.ACCESS_READ)
        return self._mmap if self._mmap is not None else self._data

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        return len(self._buffer())

    def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`."""
        self.requests_made += 1
        if start < 0:
            raise OSError("Start offset cannot be negative")
        buf = self._buffer()
        if start + length > len(buf):
            raise eof_error(start, length, len(buf))
        data = bytes(buf[start:start + length])
        self.bytes_fetched += len(data)
        return data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close mmap and file if we opened it."""
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None
        if self._should_close_file and self._file is not None:
            self._file.close()
            self._file = None


class LocalAsyncByteReader:
    """Asynchronous local file reader - thin wrapper around sync reader."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self._sync_reader = LocalByteReader(source)

    @property
    def size(self) -> int:
        return self._sync_reader.size

    @property
    def bytes_fetched(self) -> int:
        return self._sync_reader.bytes_fetched

    @property
    def requests_made(self) -> int:
        return self._sync_reader.requests_made

    async def get_size(self) -> int:
        return self._sync_reader.size

    async def fetch(self, start: int, length: int) -> bytes:
        return await asyncio.to_thread(self._sync_reader.fetch, start, length)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await asyncio.to_thread(self._sync_reader.close)


def open_local_reader(source: Union[Path, str, BinaryIO]) -> LocalByteReader:
    """Create a synchronous local byte reader."""
    return LocalByteReader(source)


async def open_local_reader_async(source: Union[Path, str, BinaryIO]) -> LocalAsyncByteReader:
    """Create an asynchronous local byte reader."""
    return LocalAsyncByteReader(source)
