"""Tests for local file I/O."""

import io
import tempfile
from pathlib import Path

import pytest

from fastexif.io.local import LocalAsyncByteReader, LocalByteReader, open_local_reader_async


class TestLocalByteReader:
    """Test synchronous local byte reader."""

    def test_basic_fetch(self):
        with tempfile.NamedTemporaryFile() as f:
            f.write(b"0123456789")
            f.flush()

            reader = LocalByteReader(f.name)
            assert reader.size == 10
            assert reader.fetch(0, 5) == b"01234"
            assert reader.fetch(5, 5) == b"56789"
            assert reader.fetch(2, 3) == b"234"

            assert reader.bytes_fetched == 13  # 5 + 5 + 3
            assert reader.requests_made == 3
            reader.close()

    def test_binary_io_source_keeps_position(self):
        bio = io.BytesIO(b"0123456789")
        bio.seek(4)

        reader = LocalByteReader(bio)
        assert reader.fetch(0, 5) == b"01234"
        assert bio.tell() == 4
        reader.close()

    def test_path_source(self, tmp_path: Path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")
        with LocalByteReader(path) as reader:
            assert reader.fetch(8, 2) == b"89"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")
        with LocalByteReader(path) as reader:
            assert reader.size == 0
            with pytest.raises(OSError, match="Unexpected end of file"):
                reader.fetch(0, 1)

    def test_error_conditions(self):
        reader = LocalByteReader(io.BytesIO(b"0123456789"))

        with pytest.raises(OSError, match="Start offset cannot be negative"):
            reader.fetch(-1, 5)

        with pytest.raises(OSError, match="Unexpected end of file"):
            reader.fetch(5, 10)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LocalByteReader(tmp_path / "nope.bin")


class TestLocalAsyncByteReader:
    """Test asynchronous local byte reader."""

    @pytest.mark.asyncio
    async def test_basic_fetch(self, tmp_path: Path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")

        async with await open_local_reader_async(path) as reader:
            assert isinstance(reader, LocalAsyncByteReader)
            assert await reader.get_size() == 10
            assert await reader.fetch(3, 4) == b"3456"
            assert reader.bytes_fetched == 4
            assert reader.requests_made == 1

    @pytest.mark.asyncio
    async def test_eof(self):
        reader = LocalAsyncByteReader(io.BytesIO(b"abc"))
        with pytest.raises(OSError, match="Unexpected end of file"):
            await reader.fetch(0, 4)
        await reader.close()
