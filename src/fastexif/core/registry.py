from __future__ import annotations
import bisect
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Type

from .parser_base import ContainerParser, Signature
from .error import InvalidFormatError, NotSupportedError

# Containers that may carry Exif but have no locator here: message -> signatures.
UNSUPPORTED_SIGNATURES: Dict[str, tuple[Signature, ...]] = {
    "WebP container is not supported": ((8, b"WEBP"),),
    "BigTIFF container is not supported": ((0, b"II+\x00"), (0, b"MM\x00+")),
    "HEIF container is not supported": ((4, b"ftypheic"), (4, b"ftypheix"), (4, b"ftypmif1"), (4, b"ftypavif")),
}


def _matches(head: bytes, offset: int, pat: bytes) -> bool:
    return len(head) >= offset + len(pat) and head[offset:offset + len(pat)] == pat


class ParserRegistry:
    def __init__(self) -> None:
        self._by_ext: Dict[str, List[tuple[int, str, Type[ContainerParser]]]] = defaultdict(list)
        self._parsers: List[tuple[int, str, Type[ContainerParser]]] = []   # sorted by priority

    # called from ContainerParser.__init_subclass__
    def register(self, parser_cls: Type[ContainerParser]) -> None:
        # (priority, class_name, parser_cls) keeps sorting stable
        entry = (parser_cls.priority, parser_cls.__name__, parser_cls)
        bisect.insort(self._parsers, entry)
        for ext in parser_cls.formats:
            bisect.insort(self._by_ext[ext], entry)

    # --- detection helpers ---
    def _sniff(self, head: bytes) -> Type[ContainerParser] | None:
        for _, _, p in self._parsers:
            for offset, pat in p.signatures:
                if _matches(head, offset, pat):
                    return p
        return None

    def choose(self, source: str | Path, head: bytes) -> Type[ContainerParser]:
        # 1) magic-number sniff
        parser = self._sniff(head)
        if parser:
            return parser
        for message, sigs in UNSUPPORTED_SIGNATURES.items():
            if any(_matches(head, offset, pat) for offset, pat in sigs):
                raise NotSupportedError(message)
        # 2) extension hint
        ext = Path(source).suffix.lower().lstrip(".") if isinstance(source, (str, Path)) else ""
        if ext and (lst := self._by_ext.get(ext)):
            return lst[0][2]
        raise InvalidFormatError("Unknown image format")


# singleton used project-wide
_REGISTRY = ParserRegistry()
