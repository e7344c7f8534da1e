import collections
import dataclasses
import io
import logging
import re
import string
from collections.abc import Callable, Iterable
from typing import Any, TextIO, TypeVar

import attrs
from cattrs.errors import BaseValidationError

from .convert import converter, extract
from .exceptions import StructureError

_log = logging.getLogger(__name__)

T = TypeVar("T")

Section = dict[str, str]

DEFAULT_SECTION = "DEFAULT"

REGEX = re.compile(
    r"""
    # Anchor to the start of the (already trimmed) line.
    ^

    (?:
        # Match a comment...
        (?P<comment>;.*)
        # or a section, closed by the last character on the line...
        | (?:\[(?P<section>.*)\])
        # or any other line opening a section, which is dropped...
        | (?P<unterminated>\[.*)
        # or a property, split on the first equals sign.
        | (?:(?P<key>[^=]*?) \s* = \s* (?P<value>.*))
    )

    # Anchor to the end of the line.
    $
    """,
    flags=re.VERBOSE | re.ASCII | re.DOTALL,
)


@dataclasses.dataclass(slots=True)
class Header:
    """An INI section header, i.e. [name]."""

    name: str


@dataclasses.dataclass(slots=True)
class Property:
    """An INI property, i.e. key=value."""

    key: str
    value: str


@dataclasses.dataclass(slots=True)
class Ignored:
    """A line without content: blank, a comment, or a header not ending in ']'."""

    text: str


def trim(text: str) -> str:
    """Strip ASCII whitespace from both ends of the text."""

    return text.strip(string.whitespace)


def parse_line(line: str) -> Header | Property | Ignored | None:
    """Parse an INI line.

    Args:
        line: The line to parse. Surrounding whitespace is ignored.

    Returns:
        A header, property, ignored line, or None if the line failed to parse.
    """

    line = trim(line)
    if not line:
        return Ignored(line)

    if m := REGEX.match(line):
        if m["section"] is not None:
            return Header(m["section"])
        elif m["key"] is not None:
            return Property(key=m["key"], value=m["value"])
        else:
            return Ignored(line)

    return None


class Ini(collections.UserDict[str, Section]):
    """An INI document, i.e. sections mapped to their properties.

    Properties that appear before any section header belong to the section named "".
    Parsing merges into the existing document, so several streams can be layered on top of each other.

    Attributes:
        errors: Lines that were neither blank, a comment, a section nor a property,
            in the order they were read.
        default_section: Name of the section whose properties are interpolated into every other section.
            Defaults to "DEFAULT".

    Args:
        sections: Sections to copy into the document.
    """

    errors: list[str]
    default_section: str

    def __init__(
        self,
        sections: dict[str, Section] | None = None,
        default_section: str = DEFAULT_SECTION,
    ):
        self.errors = []
        self.default_section = default_section

        super().__init__()

        if sections is not None:
            for name, section in sections.items():
                self[name] = dict(section)

    def parse(
        self,
        file: Iterable[str],
        parse_func: Callable[[str], Header | Property | Ignored | None] = parse_line,
    ):
        """Parse an INI stream into the document.

        Malformed lines are appended to errors instead of raising.

        Args:
            file: The stream to parse, read line by line until exhausted.
            parse_func: A function that classifies each line of the stream.
                This function can be overriden to implement custom functionality.
                Defaults to parse_line.
        """

        section = ""

        for n, line in enumerate(file, start=1):
            config = parse_func(line)

            if isinstance(config, Header):
                section = config.name
            elif isinstance(config, Property):
                self.data.setdefault(section, {})[config.key] = config.value
            elif isinstance(config, Ignored):
                if config.text.startswith("["):
                    _log.debug("line %d: ignoring malformed section %r", n, config.text)
            else:
                line = trim(line)
                _log.debug("line %d: invalid INI: %r", n, line)
                self.errors.append(line)

    def generate(self, file: TextIO):
        """Serialize the document as INI to a stream.

        Sections and their properties are written in sorted order.

        Args:
            file: The stream to serialize to.
        """

        for name in sorted(self.data):
            print(f"[{name}]", file=file)

            section = self.data[name]
            for key in sorted(section):
                print(f"{key}={section[key]}", file=file)

    @staticmethod
    def interpolate_section(src: Section, dst: Section):
        """Replace '%(key)' in the values of dst with the values of src.

        Only a single pass is made, so substituted text is never expanded again.
        A property is never substituted into itself.

        Args:
            src: The section to take values from.
            dst: The section to substitute into. This may be src itself.
        """

        for src_key in sorted(src):
            token = f"%({src_key})"
            src_value = src[src_key]

            for key in sorted(dst):
                value = dst[key]
                if (key, value) != (src_key, src_value):
                    dst[key] = value.replace(token, src_value)

    def interpolate(self):
        """Resolve '%(key)' references in every section.

        The default section is resolved against itself first.
        Every other section is then resolved against itself, and then against the default section.
        """

        default = self.data.get(self.default_section)
        if default is not None:
            self.interpolate_section(default, default)

        for name in sorted(self.data):
            if name == self.default_section:
                continue

            section = self.data[name]
            self.interpolate_section(section, section)
            if default is not None:
                self.interpolate_section(default, section)

    def clear(self):
        """Remove all sections and errors."""

        self.data.clear()
        self.errors.clear()

    def copy(self) -> "Ini":
        """Copy the document, including its sections and errors."""

        config = type(self)(self.data, default_section=self.default_section)
        config.errors.extend(self.errors)

        return config

    __copy__ = copy

    def lookup(
        self, section: str, key: str, cls: type[T] = str, default: Any = None
    ) -> T | Any:
        """Look up a property as a scalar.

        Args:
            section: The section name.
            key: The property key.
            cls: One of str, int, float or bool.
                Defaults to str.
            default: Returned if the property is missing or could not be converted.

        Returns:
            The converted value, or the default.
        """

        try:
            value = self.data[section][key]
        except KeyError:
            return default

        ok, result = extract(value, cls)
        return result if ok else default

    def structure(self, section: str, cls: type[T]) -> T:
        """Parse a section into an attrs class.

        Args:
            section: The section name.
            cls: The attrs class to create.

        Returns:
            The created instance.

        Raises:
            KeyError: The section does not exist.
            StructureError: A field is missing or could not be converted.
        """

        try:
            return converter.structure(self.data[section], cls)
        except BaseValidationError as e:
            raise StructureError(
                f"section [{section}] is not a valid {cls.__name__}"
            ) from e

    def unstructure(self, section: str, obj: attrs.AttrsInstance):
        """Serialize an attrs instance into a section, replacing any existing properties.

        Fields set to None are left out.

        Args:
            section: The section name.
            obj: The instance to serialize.
        """

        self.data[section] = {
            k: str(v) for k, v in converter.unstructure(obj).items() if v is not None
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.data!r}, errors={self.errors!r})"


def load(file: Iterable[str], **kwargs) -> Ini:
    """Parse an INI stream into a new document.

    Args:
        file: The stream to parse.
        **kwargs: Passed to Ini().

    Returns:
        The parsed document.
    """

    config = Ini(**kwargs)
    config.parse(file)

    return config


def loads(text: str, **kwargs) -> Ini:
    """Parse an INI text into a new document.

    Args:
        text: The text to parse.
        **kwargs: Passed to load().

    Returns:
        See load().
    """

    with io.StringIO(text) as buf:
        return load(buf, **kwargs)


def dump(config: Ini, file: TextIO):
    """Serialize a document as INI to a stream.

    Args:
        config: The document.
        file: The stream to serialize to.
    """

    config.generate(file)


def dumps(config: Ini) -> str:
    """Serialize a document as INI to a string.

    Args:
        config: The document.

    Returns:
        The INI as a string.
    """

    with io.StringIO() as buf:
        dump(config, buf)
        return buf.getvalue()
