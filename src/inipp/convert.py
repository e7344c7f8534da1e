"""Conversion between INI values and Python scalars."""

import re
import string
from typing import Any, TypeVar

import cattrs

T = TypeVar("T")

RE_INT = re.compile(r"[+-]?[0-9]+")
RE_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

SCALARS = (str, int, float, bool)


def _structure_bool(value: str, _) -> bool:
    if value == "true":
        return True
    elif value == "false":
        return False

    raise ValueError(f"not a boolean: '{value}'")


def _structure_int(value: str, _) -> int:
    if not RE_INT.fullmatch(value):
        raise ValueError(f"not an integer: '{value}'")

    return int(value)


def _structure_float(value: str, _) -> float:
    if not RE_FLOAT.fullmatch(value):
        raise ValueError(f"not a number: '{value}'")

    return float(value)


converter = cattrs.Converter()
converter.register_structure_hook(bool, _structure_bool)
converter.register_structure_hook(int, _structure_int)
converter.register_structure_hook(float, _structure_float)
converter.register_unstructure_hook(int, str)
converter.register_unstructure_hook(float, repr)
converter.register_unstructure_hook(bool, lambda b: "true" if b else "false")


def extract(value: str, cls: type[T]) -> tuple[bool, T | None]:
    """Convert an INI value to a scalar.

    Strings are returned as-is. Otherwise, surrounding whitespace is ignored
    and the rest of the value must convert entirely:
    booleans are 'true' or 'false', integers are decimal, and floats may have a fraction and an exponent.

    Args:
        value: The value to convert.
        cls: One of str, int, float or bool.

    Returns:
        A tuple of whether the conversion succeeded and the converted value (None on failure).

    Raises:
        TypeError: cls is not a supported scalar type.
    """

    if cls not in SCALARS:
        raise TypeError(f"cannot extract {cls!r}, expected one of {SCALARS}")

    if cls is str:
        return True, value  # type: ignore[return-value]

    result: Any
    try:
        result = converter.structure(value.strip(string.whitespace), cls)
    except ValueError:
        return False, None

    return True, result
