import io

import pytest

from builders import simple_tiff
from fastexif import read_exif, read_exif_sync
from fastexif.core.error import InvalidFormatError, IoError, NotSupportedError
from fastexif.core.registry import UNSUPPORTED_SIGNATURES
from fastexif.io.local import open_local_reader
from fastexif.parsers.tiff import TIFFParser


@pytest.fixture
def tiff_path(tmp_path):
    path = tmp_path / "image.tif"
    path.write_bytes(simple_tiff(">"))
    return path


def test_tiff_locate_sync(tiff_path):
    reader = open_local_reader(tiff_path)
    assert TIFFParser.locate_sync(reader) == simple_tiff(">")
    assert reader.requests_made > 0
    reader.close()


def test_tiff_read_sync(tiff_path):
    exif = read_exif_sync(tiff_path)
    assert len(exif) == 3
    assert exif.little_endian is False


@pytest.mark.asyncio
async def test_tiff_read_async(tiff_path):
    exif = await read_exif(tiff_path)
    assert len(exif) == 3


def test_empty_tif_is_truncated(tmp_path):
    path = tmp_path / "empty.tif"
    path.write_bytes(b"")
    with pytest.raises(InvalidFormatError, match="Truncated TIFF header"):
        read_exif_sync(path)


def test_bigtiff_not_supported():
    with pytest.raises(NotSupportedError, match="BigTIFF container is not supported"):
        read_exif_sync(io.BytesIO(b"II+\x00\x08\x00\x00\x00" + b"\x00" * 16))


def test_webp_not_supported():
    data = b"RIFF\x24\x00\x00\x00WEBPVP8X" + b"\x00" * 32
    with pytest.raises(NotSupportedError, match="WebP container is not supported"):
        read_exif_sync(io.BytesIO(data))


def test_not_supported_message_is_the_table_constant():
    with pytest.raises(NotSupportedError) as excinfo:
        read_exif_sync(io.BytesIO(b"MM\x00+\x00\x08\x00\x00" + b"\x00" * 16))
    assert any(excinfo.value.message is key for key in UNSUPPORTED_SIGNATURES)


def test_unknown_format():
    with pytest.raises(InvalidFormatError, match="Unknown image format"):
        read_exif_sync(io.BytesIO(b"GIF89a" + b"\x00" * 40))


def test_missing_file_is_io_error(tmp_path):
    with pytest.raises(IoError) as excinfo:
        read_exif_sync(tmp_path / "missing.tif")
    assert isinstance(excinfo.value.source, FileNotFoundError)


def test_parser_registration():
    """Test that TIFF parser is properly registered."""
    from fastexif.core.registry import _REGISTRY

    for ext in ("tif", "tiff"):
        parsers = _REGISTRY._by_ext.get(ext, [])
        assert any(parser_cls.__name__ == "TIFFParser" for _, _, parser_cls in parsers)
