from __future__ import annotations

from typing import ClassVar, Sequence

from ..core.parser_base import ContainerParser, Signature


class TIFFParser(ContainerParser):
    """A TIFF file is itself the Exif blob."""

    formats: ClassVar[tuple[str, ...]] = ("tiff", "tif")
    signatures: ClassVar[Sequence[Signature]] = (
        (0, b"II*\x00"),  # Little-endian
        (0, b"MM\x00*"),  # Big-endian
    )
    container: ClassVar[str] = "TIFF"
    priority: ClassVar[int] = 10

    @classmethod
    def locate_sync(cls, reader) -> bytes:
        return reader.fetch(0, reader.size)

    @classmethod
    async def locate(cls, reader) -> bytes:
        return await reader.fetch(0, await reader.get_size())
