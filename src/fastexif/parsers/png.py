from __future__ import annotations

from typing import ClassVar

from ..core.error import InvalidFormatError, NotFoundError
from ..core.parser_base import ContainerParser

# PNG signature
PNG_SIG = b'\x89PNG\r\n\x1a\n'
EXIF_CHUNK_TYPE = b'eXIf'
IEND_CHUNK_TYPE = b'IEND'
_CHUNK_OVERHEAD = 12        # length + type + CRC


class PNGParser(ContainerParser):
    """Returns the payload of the eXIf chunk."""

    formats: ClassVar = ("png",)
    signatures: ClassVar = ((0, PNG_SIG),)
    container: ClassVar = "PNG"
    priority: ClassVar = 40

    @classmethod
    def _check_sig(cls, head: bytes) -> None:
        if head != PNG_SIG:
            raise InvalidFormatError("Not a PNG file")

    @staticmethod
    def _chunk_header(hdr: bytes) -> tuple[int, bytes]:
        return int.from_bytes(hdr[:4], "big"), hdr[4:8]

    # --------------------------- sync ---------------------------------- #
    @classmethod
    def locate_sync(cls, reader) -> bytes:
        cls._check_sig(reader.fetch(0, len(PNG_SIG)))
        offset = len(PNG_SIG)
        while True:
            length, ctype = cls._chunk_header(reader.fetch(offset, 8))
            if ctype == EXIF_CHUNK_TYPE:
                return reader.fetch(offset + 8, length)
            if ctype == IEND_CHUNK_TYPE:
                raise NotFoundError(cls.container)
            offset += length + _CHUNK_OVERHEAD

    # -------------------------- async ---------------------------------- #
    @classmethod
    async def locate(cls, reader) -> bytes:
        cls._check_sig(await reader.fetch(0, len(PNG_SIG)))
        offset = len(PNG_SIG)
        while True:
            length, ctype = cls._chunk_header(await reader.fetch(offset, 8))
            if ctype == EXIF_CHUNK_TYPE:
                return await reader.fetch(offset + 8, length)
            if ctype == IEND_CHUNK_TYPE:
                raise NotFoundError(cls.container)
            offset += length + _CHUNK_OVERHEAD
