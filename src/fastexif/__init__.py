"""fastexif - read Exif attributes from JPEG, TIFF and PNG files and URLs."""

from .core.error import (                                              # re-export
    Error, InvalidFormatError, IoError, NotFoundError, BlankValueError,
    TooBigError, NotSupportedError, UnexpectedValueError,
    PartialResult, PartialResultError, DecodeWarning, io_errors,
)
from .core.model import Context, Tag, Value, Field, Exif, DateTime, Result
from .core.decoder import parse_exif
from .core.registry import _REGISTRY                                  # singleton
from .io import open_reader, open_reader_async

# Import parsers to trigger registration
from .parsers import jpeg, tiff, png  # noqa: F401

SNIFF_SIZE = 64


async def read_exif(source, *, continue_on_error: bool = False) -> Exif:
    """Read Exif asynchronously from a source (path, URL, or file-like object)."""
    with io_errors():
        reader = await open_reader_async(source)
        try:
            head = await reader.fetch(0, min(SNIFF_SIZE, await reader.get_size()))
            parser_cls = _REGISTRY.choose(source, head)
            blob = await parser_cls.locate(reader)
        finally:
            await reader.close()
    return parse_exif(blob, continue_on_error=continue_on_error)


def read_exif_sync(source, *, continue_on_error: bool = False) -> Exif:
    """Read Exif synchronously from a source (path, URL, or file-like object)."""
    with io_errors():
        reader = open_reader(source)
        try:
            head = reader.fetch(0, min(SNIFF_SIZE, reader.size))
            parser_cls = _REGISTRY.choose(source, head)
            blob = parser_cls.locate_sync(reader)
        finally:
            reader.close()
    return parse_exif(blob, continue_on_error=continue_on_error)

__all__ = [
    "read_exif", "read_exif_sync", "parse_exif",
    "Error", "InvalidFormatError", "IoError", "NotFoundError", "BlankValueError",
    "TooBigError", "NotSupportedError", "UnexpectedValueError",
    "PartialResult", "PartialResultError", "DecodeWarning",
    "Context", "Tag", "Value", "Field", "Exif", "DateTime", "Result",
]
