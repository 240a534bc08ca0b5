"""Helpers that assemble tiny TIFF, JPEG and PNG byte strings for tests."""

import struct
import zlib

SHORT, LONG, RATIONAL, ASCII = 3, 4, 5, 2

MAKE = 0x010F
ORIENTATION = 0x0112
X_RESOLUTION = 0x011A
DATE_TIME = 0x0132
IMAGE_WIDTH = 0x0100
EXIF_POINTER = 0x8769
EXPOSURE_TIME = 0x829A


def entry(tag: int, typ: int, count: int, value, endian: str = "<") -> bytes:
    """One IFD entry; ``value`` is inline bytes or an int offset."""
    if isinstance(value, int):
        value = struct.pack(endian + "I", value)
    return struct.pack(endian + "HHI", tag, typ, count) + value.ljust(4, b"\x00")


def ifd(entries, next_ifd: int = 0, endian: str = "<") -> bytes:
    return (struct.pack(endian + "H", len(entries)) + b"".join(entries)
            + struct.pack(endian + "I", next_ifd))


def ifd_size(n_entries: int) -> int:
    return 2 + 12 * n_entries + 4


def tiff(*chunks: bytes, endian: str = "<", first_ifd: int = 8) -> bytes:
    magic = b"II*\x00" if endian == "<" else b"MM\x00*"
    return magic + struct.pack(endian + "I", first_ifd) + b"".join(chunks)


def simple_tiff(endian: str = "<") -> bytes:
    """IFD0 with Make="ABC", Orientation=1 and XResolution=72/1."""
    data_at = 8 + ifd_size(3)
    entries = [
        entry(MAKE, ASCII, 4, b"ABC\x00", endian),
        entry(ORIENTATION, SHORT, 1, struct.pack(endian + "H", 1), endian),
        entry(X_RESOLUTION, RATIONAL, 1, data_at, endian),
    ]
    return tiff(ifd(entries, endian=endian), struct.pack(endian + "II", 72, 1), endian=endian)


def damaged_tiff() -> bytes:
    """Three good fields followed by a truncated value and a mistyped pointer."""
    data_at = 8 + ifd_size(5)
    entries = [
        entry(MAKE, ASCII, 4, b"ABC\x00"),
        entry(ORIENTATION, SHORT, 1, struct.pack("<H", 1)),
        entry(X_RESOLUTION, RATIONAL, 1, data_at),
        entry(DATE_TIME, ASCII, 20, 0xFFFF0),
        entry(EXIF_POINTER, SHORT, 1, struct.pack("<H", 26)),
    ]
    return tiff(ifd(entries), struct.pack("<II", 72, 1))


def _segment(marker: int, body: bytes) -> bytes:
    return bytes([0xFF, marker]) + (len(body) + 2).to_bytes(2, "big") + body


SOF0 = _segment(0xC0, b"\x08\x00\x10\x00\x20\x03\x01\x11\x00\x02\x11\x01\x03\x11\x01")
SOS = _segment(0xDA, b"\x03\x01\x00\x02\x11\x03\x11\x00\x3F\x00")
APP0 = _segment(0xE0, b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00")


def jpeg(exif_blob: bytes | None = None) -> bytes:
    app1 = _segment(0xE1, b"Exif\x00\x00" + exif_blob) if exif_blob is not None else b""
    return b"\xFF\xD8" + APP0 + app1 + SOF0 + SOS + b"\x00" * 8 + b"\xFF\xD9"


def _chunk(ctype: bytes, data: bytes) -> bytes:
    return (len(data).to_bytes(4, "big") + ctype + data
            + zlib.crc32(ctype + data).to_bytes(4, "big"))


def png(exif_blob: bytes | None = None) -> bytes:
    ihdr = _chunk(b"IHDR", struct.pack(">IIBBBBB", 32, 16, 8, 2, 0, 0, 0))
    exif = _chunk(b"eXIf", exif_blob) if exif_blob is not None else b""
    idat = _chunk(b"IDAT", zlib.compress(b"\x00" * 16))
    return b"\x89PNG\r\n\x1a\n" + ihdr + exif + idat + _chunk(b"IEND", b"")
