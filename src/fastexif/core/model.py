from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, Iterable, List, NamedTuple, Tuple

from .error import BlankValueError, InvalidFormatError, UnexpectedValueError


class Context(Enum):
    TIFF = "tiff"        # IFD0 / IFD1 attributes
    EXIF = "exif"
    GPS = "gps"
    INTEROP = "interop"


class Tag(NamedTuple):
    context: Context
    number: int

    @property
    def name(self) -> str | None:
        return _TAG_NAMES.get(self)

    def __str__(self) -> str:
        return self.name or f"Tag({self.context.name}, {self.number:#06x})"


# Pointers to child IFDs; never reported as fields.
EXIF_IFD_POINTER = Tag(Context.TIFF, 0x8769)
GPS_INFO_IFD_POINTER = Tag(Context.TIFF, 0x8825)
INTEROP_IFD_POINTER = Tag(Context.EXIF, 0xA005)

_TAG_NAMES: Dict[Tag, str] = {
    EXIF_IFD_POINTER: "ExifIFDPointer",
    GPS_INFO_IFD_POINTER: "GPSInfoIFDPointer",
    INTEROP_IFD_POINTER: "InteropIFDPointer",
    Tag(Context.TIFF, 0x0100): "ImageWidth",
    Tag(Context.TIFF, 0x0101): "ImageLength",
    Tag(Context.TIFF, 0x0102): "BitsPerSample",
    Tag(Context.TIFF, 0x0103): "Compression",
    Tag(Context.TIFF, 0x010E): "ImageDescription",
    Tag(Context.TIFF, 0x010F): "Make",
    Tag(Context.TIFF, 0x0110): "Model",
    Tag(Context.TIFF, 0x0112): "Orientation",
    Tag(Context.TIFF, 0x011A): "XResolution",
    Tag(Context.TIFF, 0x011B): "YResolution",
    Tag(Context.TIFF, 0x0128): "ResolutionUnit",
    Tag(Context.TIFF, 0x0131): "Software",
    Tag(Context.TIFF, 0x0132): "DateTime",
    Tag(Context.TIFF, 0x013B): "Artist",
    Tag(Context.TIFF, 0x0201): "JPEGInterchangeFormat",
    Tag(Context.TIFF, 0x0202): "JPEGInterchangeFormatLength",
    Tag(Context.TIFF, 0x8298): "Copyright",
    Tag(Context.EXIF, 0x829A): "ExposureTime",
    Tag(Context.EXIF, 0x829D): "FNumber",
    Tag(Context.EXIF, 0x8827): "PhotographicSensitivity",
    Tag(Context.EXIF, 0x9000): "ExifVersion",
    Tag(Context.EXIF, 0x9003): "DateTimeOriginal",
    Tag(Context.EXIF, 0x9004): "DateTimeDigitized",
    Tag(Context.EXIF, 0x920A): "FocalLength",
    Tag(Context.EXIF, 0xA001): "ColorSpace",
    Tag(Context.EXIF, 0xA002): "PixelXDimension",
    Tag(Context.EXIF, 0xA003): "PixelYDimension",
    Tag(Context.GPS, 0x0000): "GPSVersionID",
    Tag(Context.GPS, 0x0001): "GPSLatitudeRef",
    Tag(Context.GPS, 0x0002): "GPSLatitude",
    Tag(Context.GPS, 0x0003): "GPSLongitudeRef",
    Tag(Context.GPS, 0x0004): "GPSLongitude",
    Tag(Context.INTEROP, 0x0001): "InteroperabilityIndex",
}


_UINT_KINDS = frozenset({"BYTE", "SHORT", "LONG"})


@dataclass(slots=True)
class Value:
    kind: str                      # TIFF field type name, e.g. "SHORT"
    items: Tuple[Any, ...] | bytes

    def get_uint(self, index: int = 0) -> int:
        if self.kind not in _UINT_KINDS:
            raise UnexpectedValueError("Value is not an unsigned integer")
        try:
            return self.items[index]
        except IndexError:
            raise UnexpectedValueError("Value index out of range") from None

    def display(self) -> str:
        if self.kind == "ASCII":
            return ", ".join(s.decode("latin-1") for s in self.items)
        if self.kind in ("UNDEFINED", "UNKNOWN"):
            return self.items.hex()
        if self.kind in ("RATIONAL", "SRATIONAL"):
            return ", ".join(f"{n}/{d}" for n, d in self.items)
        return ", ".join(str(v) for v in self.items)

    def as_json(self) -> Any:
        """Plain JSON value: scalars unwrapped, rationals as floats."""
        if self.kind in ("ASCII", "UNDEFINED", "UNKNOWN"):
            return self.display()
        if self.kind in ("RATIONAL", "SRATIONAL"):
            vals = [float(Fraction(n, d)) if d else None for n, d in self.items]
        else:
            vals = list(self.items)
        return vals[0] if len(vals) == 1 else vals


@dataclass(slots=True)
class Field:
    tag: Tag
    ifd_num: int
    value: Value

    def display_value(self) -> str:
        return self.value.display()


class Exif:
    """Decoded Exif attributes of one image."""

    def __init__(self, buf: bytes, fields: Iterable[Field], little_endian: bool):
        self.buf = buf
        self.little_endian = little_endian
        self._fields = tuple(fields)

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def field_count(self) -> int:
        return len(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def get_field(self, tag: Tag, ifd_num: int = 0) -> Field | None:
        for f in self._fields:
            if f.tag == tag and f.ifd_num == ifd_num:
                return f
        return None

    def __repr__(self) -> str:
        return f"Exif({len(self._fields)} fields)"


@dataclass(slots=True, frozen=True)
class DateTime:
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_ascii(cls, data: bytes) -> "DateTime":
        """Parse an Exif ``YYYY:MM:DD HH:MM:SS`` value."""
        if data.rstrip(b"\x00").strip(b" :") == b"":
            raise BlankValueError("DateTime is blank")
        text = data.rstrip(b"\x00")
        if len(text) < 19 or text[4:5] != b":" or text[7:8] != b":" \
                or text[10:11] != b" " or text[13:14] != b":" or text[16:17] != b":":
            raise InvalidFormatError("Invalid DateTime")
        try:
            parts = [int(text[a:b]) for a, b in ((0, 4), (5, 7), (8, 10), (11, 13), (14, 16), (17, 19))]
        except ValueError:
            raise InvalidFormatError("Invalid DateTime") from None
        return cls(*parts)

    def to_datetime(self) -> _dt.datetime:
        return _dt.datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)


@dataclass(slots=True)
class Result:
    success: bool
    data: Dict[str, Any] | None
    error: str | None
    errors: List[str] = field(default_factory=list)   # skipped in best-effort mode
