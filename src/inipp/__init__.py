"""This module provides classes for reading, interpolating and writing INI files."""

from .convert import converter, extract
from .exceptions import EncodingError, InippError, StructureError
from .files import detect_encoding, read, write
from .ini import (
    DEFAULT_SECTION,
    Header,
    Ignored,
    Ini,
    Property,
    Section,
    dump,
    dumps,
    load,
    loads,
    parse_line,
)
