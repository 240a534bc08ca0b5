"""Tests for I/O factory functions."""

import io

import pytest

from fastexif.io import open_reader, open_reader_async
from fastexif.io.http_async import HTTPAsyncByteReader
from fastexif.io.http_sync import HTTPByteReader
from fastexif.io.local import LocalAsyncByteReader, LocalByteReader


class TestFactoryFunctions:
    """Test the main factory functions."""

    def test_open_reader_with_path(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")

        for source in (path, str(path)):
            reader = open_reader(source)
            assert isinstance(reader, LocalByteReader)
            assert reader.fetch(0, 5) == b"01234"
            reader.close()

    def test_open_reader_with_binary_io(self):
        reader = open_reader(io.BytesIO(b"0123456789"))
        assert isinstance(reader, LocalByteReader)
        assert reader.fetch(0, 5) == b"01234"

    def test_open_reader_with_url(self, httpserver):
        httpserver.expect_request("/data").respond_with_data(
            b"0123456789", headers={"Accept-Ranges": "none"})
        reader = open_reader(httpserver.url_for("/data"))
        assert isinstance(reader, HTTPByteReader)

    @pytest.mark.asyncio
    async def test_open_reader_async_with_binary_io(self):
        reader = await open_reader_async(io.BytesIO(b"0123456789"))
        assert isinstance(reader, LocalAsyncByteReader)
        assert await reader.fetch(0, 5) == b"01234"

    @pytest.mark.asyncio
    async def test_open_reader_async_with_url(self, httpserver):
        httpserver.expect_request("/data").respond_with_data(
            b"0123456789", headers={"Accept-Ranges": "none"})
        reader = await open_reader_async(httpserver.url_for("/data"))
        assert isinstance(reader, HTTPAsyncByteReader)
