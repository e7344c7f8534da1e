import logging
import pathlib
from collections.abc import Iterable

import chardet

from .exceptions import EncodingError
from .ini import Ini

_log = logging.getLogger(__name__)


def detect_encoding(file: Iterable[bytes]) -> str | None:
    """Determine the encoding of a binary file.

    Args:
        file: The file to detect the encoding of.

    Returns:
        The encoding if detected successfully, otherwise None.
    """

    detector = chardet.UniversalDetector()

    for line in file:
        if not detector.done:
            detector.feed(line)
        else:
            break

    result = detector.close()

    if encoding := result["encoding"]:
        return encoding.lower()

    return None


def read(
    path: str | pathlib.Path, encoding: str | None = None, **kwargs
) -> Ini:
    """Parse an INI file into a new document.

    Args:
        path: The file to parse.
        encoding: The encoding of the file.
            If None, encoding detection is attempted.
        **kwargs: Passed to Ini().

    Returns:
        The parsed document.

    Raises:
        EncodingError: The encoding of a non-empty file could not be detected.
    """

    if isinstance(path, str):
        path = pathlib.Path(path)

    config = Ini(**kwargs)

    # An empty file is an empty document, whatever its encoding.
    if path.stat().st_size == 0:
        return config

    if encoding is None:
        with path.open("rb") as f:
            encoding = detect_encoding(f)

        if encoding is None:
            raise EncodingError(f"failed to detect encoding for {path}")

        _log.debug("detected encoding %s for %s", encoding, path)

    with path.open(encoding=encoding) as f:
        config.parse(f)

    if config.errors:
        _log.info("%s: %d invalid line(s)", path, len(config.errors))

    return config


def write(config: Ini, path: str | pathlib.Path, encoding: str = "utf-8"):
    """Serialize a document as INI to a file.

    Args:
        config: The document.
        path: The file to write to. Existing contents are replaced.
        encoding: The encoding of the file.
            Defaults to UTF-8.
    """

    if isinstance(path, str):
        path = pathlib.Path(path)

    with path.open("w", encoding=encoding) as f:
        config.generate(f)
