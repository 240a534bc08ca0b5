"""Container parsers for fastexif."""

from .jpeg import JPEGParser
from .png import PNGParser
from .tiff import TIFFParser

__all__ = ["JPEGParser", "PNGParser", "TIFFParser"]
