"""TIFF/IFD decoder producing :class:`~fastexif.core.model.Exif`.

Header and IFD0 structure problems are always fatal.  Problems with single
entries, child IFDs and IFD1 are recoverable: in continue-on-error mode they
are collected and reported through :class:`PartialResultError`.
"""

from __future__ import annotations

import struct
import warnings
from typing import Callable, Dict, List, Set, Tuple

from .error import (DecodeWarning, Error, InvalidFormatError, PartialResult,
                    PartialResultError, UnexpectedValueError)
from .model import (Context, EXIF_IFD_POINTER, Exif, Field, GPS_INFO_IFD_POINTER,
                    INTEROP_IFD_POINTER, Tag, Value)

TIFF_HEADER_SIZE = 8
_ENTRY_SIZE = 12
_MAX_IFDS = 2          # IFD0 (primary image) and IFD1 (thumbnail)

# field type -> (name, unit size, struct code or None for raw bytes)
_FIELD_TYPES: Dict[int, Tuple[str, int, str | None]] = {
    1: ("BYTE", 1, "B"),
    2: ("ASCII", 1, None),
    3: ("SHORT", 2, "H"),
    4: ("LONG", 4, "I"),
    5: ("RATIONAL", 8, "II"),
    6: ("SBYTE", 1, "b"),
    7: ("UNDEFINED", 1, None),
    8: ("SSHORT", 2, "h"),
    9: ("SLONG", 4, "i"),
    10: ("SRATIONAL", 8, "ii"),
    11: ("FLOAT", 4, "f"),
    12: ("DOUBLE", 8, "d"),
    13: ("IFD", 4, "I"),
}
_POINTER_TYPES = frozenset({4, 13})

_CHILD_CONTEXTS = {
    EXIF_IFD_POINTER: Context.EXIF,
    GPS_INFO_IFD_POINTER: Context.GPS,
    INTEROP_IFD_POINTER: Context.INTEROP,
}


class _Walker:
    def __init__(self, data: bytes, endian: str, continue_on_error: bool):
        self.data = data
        self.endian = endian
        self.continue_on_error = continue_on_error
        self.fields: List[Field] = []
        self.errors: List[Error] = []
        self.visited: Set[int] = set()

    def recover(self, err: Error) -> None:
        """Record ``err`` in best-effort mode, raise it otherwise."""
        if not self.continue_on_error:
            raise err
        warnings.warn(str(err), DecodeWarning, stacklevel=2)
        self.errors.append(err)

    def guarded(self, step: Callable[[], None]) -> None:
        try:
            step()
        except Error as err:
            self.recover(err)

    def _unpack(self, fmt: str, offset: int):
        return struct.unpack_from(self.endian + fmt, self.data, offset)

    def read_ifd(self, offset: int, ctx: Context, ifd_num: int) -> int:
        """Decode the IFD at ``offset`` and return the next-IFD offset."""
        if offset in self.visited:
            raise InvalidFormatError("Unexpected next IFD")
        self.visited.add(offset)
        if offset + 2 > len(self.data):
            raise InvalidFormatError("Truncated IFD count")
        (count,) = self._unpack("H", offset)
        table_end = offset + 2 + count * _ENTRY_SIZE
        if table_end + 4 > len(self.data):
            raise InvalidFormatError("Truncated IFD")

        for i in range(count):
            pos = offset + 2 + i * _ENTRY_SIZE
            self.guarded(lambda: self._read_entry(pos, ctx, ifd_num))

        (next_ifd,) = self._unpack("I", table_end)
        return next_ifd

    def _read_entry(self, pos: int, ctx: Context, ifd_num: int) -> None:
        number, typ, count = self._unpack("HHI", pos)
        tag = Tag(ctx, number)

        child_ctx = _CHILD_CONTEXTS.get(tag)
        if child_ctx is not None:
            if typ not in _POINTER_TYPES or count != 1:
                raise UnexpectedValueError("Invalid pointer")
            (child_offset,) = self._unpack("I", pos + 8)
            self.read_ifd(child_offset, child_ctx, ifd_num)
            return

        self.fields.append(Field(tag, ifd_num, self._read_value(pos, typ, count)))

    def _read_value(self, pos: int, typ: int, count: int) -> Value:
        name, unit, code = _FIELD_TYPES.get(typ, ("UNKNOWN", 1, None))
        size = unit * count
        if size <= 4:
            start = pos + 8
        else:
            (start,) = self._unpack("I", pos + 8)
        if start + size > len(self.data):
            raise InvalidFormatError("Truncated field value")
        raw = self.data[start:start + size]

        if name == "ASCII":
            # NUL-terminated strings; a trailing NUL does not start a new one
            items = tuple(raw.rstrip(b"\x00").split(b"\x00")) if raw.strip(b"\x00") else ()
            return Value(name, items)
        if code is None:
            return Value(name, bytes(raw))
        flat = struct.unpack(self.endian + code * count, raw)
        if len(code) == 2:
            return Value(name, tuple(zip(flat[0::2], flat[1::2])))
        return Value("LONG" if name == "IFD" else name, flat)


def parse_exif(data: bytes, *, continue_on_error: bool = False) -> Exif:
    """Decode a TIFF-structured Exif blob.

    With ``continue_on_error`` a pass that skipped errors ends by raising
    :class:`PartialResultError`; without it the first error is raised as is.
    """
    data = bytes(data)
    if len(data) < TIFF_HEADER_SIZE:
        raise InvalidFormatError("Truncated TIFF header")
    if data[:4] == b"II*\x00":
        endian = "<"
    elif data[:4] == b"MM\x00*":
        endian = ">"
    else:
        raise InvalidFormatError("Broken TIFF header")

    walker = _Walker(data, endian, continue_on_error)
    (offset,) = struct.unpack_from(endian + "I", data, 4)
    next_ifd = walker.read_ifd(offset, Context.TIFF, 0)

    ifd_num = 1
    while next_ifd != 0 and ifd_num < _MAX_IFDS:
        try:
            next_ifd = walker.read_ifd(next_ifd, Context.TIFF, ifd_num)
        except Error as err:
            walker.recover(err)
            break
        ifd_num += 1

    exif = Exif(data, walker.fields, little_endian=endian == "<")
    if walker.errors:
        raise PartialResultError(PartialResult(exif, walker.errors))
    return exif
