from __future__ import annotations

from typing import ClassVar

from ..core.error import InvalidFormatError, NotFoundError
from ..core.parser_base import ContainerParser

# Marker constants
SOI = b"\xFF\xD8"
EOI = 0xD9
SOS = 0xDA
APP1 = 0xE1
RST0 = 0xD0
RST7 = 0xD7
TEM = 0x01

EXIF_ID = b"Exif\x00\x00"


class JPEGParser(ContainerParser):
    """Finds the first APP1 segment carrying Exif."""

    formats: ClassVar = ("jpg", "jpeg", "jpe")
    signatures: ClassVar = ((0, SOI),)
    container: ClassVar = "JPEG"
    priority: ClassVar = 50

    @staticmethod
    def _standalone(marker: int) -> bool:
        return marker in (0xD8, TEM) or RST0 <= marker <= RST7

    @classmethod
    def _check_soi(cls, head: bytes) -> None:
        if head != SOI:
            raise InvalidFormatError("Not a JPEG file")

    @classmethod
    def _check_marker(cls, marker: bytes) -> int:
        if marker[0] != 0xFF:
            raise InvalidFormatError("Invalid JPEG marker")
        return marker[1]

    # --------------------------- sync ---------------------------------- #
    @classmethod
    def locate_sync(cls, reader) -> bytes:
        cls._check_soi(reader.fetch(0, 2))
        offset = 2
        while True:
            code = cls._check_marker(reader.fetch(offset, 2))
            offset += 2
            if code == 0xFF:        # fill byte
                offset -= 1
                continue
            if cls._standalone(code):
                continue
            if code in (SOS, EOI):
                raise NotFoundError(cls.container)
            seg_len = int.from_bytes(reader.fetch(offset, 2), "big")
            if seg_len < 2:
                raise InvalidFormatError("Invalid JPEG segment length")
            body = reader.fetch(offset + 2, seg_len - 2)
            if code == APP1 and body.startswith(EXIF_ID):
                return body[len(EXIF_ID):]
            offset += seg_len

    # -------------------------- async ---------------------------------- #
    @classmethod
    async def locate(cls, reader) -> bytes:
        cls._check_soi(await reader.fetch(0, 2))
        offset = 2
        while True:
            code = cls._check_marker(await reader.fetch(offset, 2))
            offset += 2
            if code == 0xFF:        # fill byte
                offset -= 1
                continue
            if cls._standalone(code):
                continue
            if code in (SOS, EOI):
                raise NotFoundError(cls.container)
            seg_len = int.from_bytes(await reader.fetch(offset, 2), "big")
            if seg_len < 2:
                raise InvalidFormatError("Invalid JPEG segment length")
            body = await reader.fetch(offset + 2, seg_len - 2)
            if code == APP1 and body.startswith(EXIF_ID):
                return body[len(EXIF_ID):]
            offset += seg_len
