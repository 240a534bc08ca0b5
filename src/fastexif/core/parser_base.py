from abc import ABC, abstractmethod
from typing import ClassVar, Sequence, Tuple

Signature = Tuple[int, bytes]          # (offset, byte-pattern)


class ContainerParser(ABC):
    """Finds the TIFF-structured Exif blob inside an image container."""

    # --- required by subclasses ---
    formats: ClassVar[tuple[str, ...]]      # file-extensions (lower, no dot)
    signatures: ClassVar[Sequence[Signature]]  # magic bytes patterns
    container: ClassVar[str]                # name used in NotFoundError
    priority: ClassVar[int] = 100            # lower = examined earlier

    # --- sync ---
    @classmethod
    @abstractmethod
    def locate_sync(cls, reader) -> bytes:
        """Return the raw Exif blob read through a ByteReader."""
        ...

    # --- async ---
    @classmethod
    @abstractmethod
    async def locate(cls, reader) -> bytes:
        """Return the raw Exif blob read through an AsyncByteReader."""
        ...

    # --- registry hook ---
    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        from .registry import _REGISTRY
        _REGISTRY.register(cls)           # noqa: E402
