"""Properties text codec for object metadata sidecars.

Reads and writes the line-oriented ``key=value`` format used by
``__ninja_<name>.properties`` files. The dialect matches files produced by
``java.util.Properties``, so sidecars written by earlier S3 ninja releases
stay readable:

- ``#`` or ``!`` as first non-blank character starts a comment line
- a line ending in an odd number of backslashes continues on the next line
- the key ends at the first unescaped ``=``, ``:`` or whitespace
- ``\\t \\n \\r \\f`` and ``\\uXXXX`` escapes; any other ``\\c`` means ``c``

Output is pure ASCII (everything outside 0x20..0x7E is written as
``\\uXXXX``), and files are opened as ISO-8859-1.
"""

from __future__ import annotations

import re
import string
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import IO

from s3ninja.storage.errors import PropertiesFormatError

PROPERTIES_ENCODING = "iso-8859-1"

_NEWLINE = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_COMMENT_MARKERS = "#!"

_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_ESCAPED_LITERALS = "=:#!\\"

_HEX_DIGITS = frozenset(string.hexdigits)


def load(stream: IO[str]) -> dict[str, str]:
    """Parse properties from a text stream.

    Args:
        stream: Readable text stream, usually opened with PROPERTIES_ENCODING.

    Returns:
        Mapping of keys to values. Later duplicates win.

    Raises:
        PropertiesFormatError: If an entry contains a malformed \\u escape.
    """
    return loads(stream.read())


def loads(text: str) -> dict[str, str]:
    """Parse properties from a string. See load()."""
    result: dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        key, value = _split_entry(line, line_number)
        result[key] = value
    return result


def dumps(properties: Mapping[str, str], comment: str = "") -> str:
    """Serialize properties to text.

    The output starts with the comment (an empty comment still yields a bare
    "#" line) and a "#<timestamp>" line, followed by one entry per key in
    sorted order.

    Args:
        properties: Mapping of string keys to string values.
        comment: Header comment, may span several lines.

    Returns:
        ASCII properties text terminated by a newline.

    Raises:
        PropertiesFormatError: If a key or value is not a string.
    """
    for key, value in properties.items():
        if not isinstance(key, str):
            raise PropertiesFormatError(f"Property key must be a string, got {type(key).__name__}")
        if not isinstance(value, str):
            raise PropertiesFormatError(
                f"Property value for {key!r} must be a string, got {type(value).__name__}"
            )

    lines = _comment_lines(comment)
    lines.append("#" + datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y"))
    for key in sorted(properties):
        lines.append(f"{_escape(key, escape_space=True)}={_escape(properties[key])}")
    return "\n".join(lines) + "\n"


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line_number, logical_line) pairs, skipping blanks and comments."""
    natural = _NEWLINE.split(text)
    index = 0
    while index < len(natural):
        line_number = index + 1
        line = natural[index].lstrip(_WHITESPACE)
        index += 1
        # Comment lines cannot be continued.
        if not line or line[0] in _COMMENT_MARKERS:
            continue
        while _is_continued(line) and index < len(natural):
            line = line[:-1] + natural[index].lstrip(_WHITESPACE)
            index += 1
        if _is_continued(line):
            line = line[:-1]
        yield line_number, line


def _is_continued(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str, line_number: int) -> tuple[str, str]:
    """Split a logical line into unescaped key and value."""
    length = len(line)
    key_end = length
    value_start = length
    has_separator = False

    index = 0
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS:
            key_end = index
            value_start = index + 1
            has_separator = True
            break
        if char in _WHITESPACE:
            key_end = index
            value_start = index + 1
            break
        index += 1

    while value_start < length and line[value_start] in _WHITESPACE:
        value_start += 1
    if not has_separator and value_start < length and line[value_start] in _SEPARATORS:
        value_start += 1
        while value_start < length and line[value_start] in _WHITESPACE:
            value_start += 1

    key = _unescape(line[:key_end], line_number)
    value = _unescape(line[value_start:], line_number)
    return key, value


def _unescape(text: str, line_number: int) -> str:
    if "\\" not in text:
        return text

    out: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        index += 1
        if char != "\\":
            out.append(char)
            continue
        if index >= length:
            break
        char = text[index]
        index += 1
        if char == "u":
            digits = text[index : index + 4]
            if len(digits) != 4 or not _HEX_DIGITS.issuperset(digits):
                raise PropertiesFormatError(
                    "Malformed \\uxxxx encoding",
                    line_number=line_number,
                )
            out.append(chr(int(digits, 16)))
            index += 4
        else:
            out.append(_UNESCAPES.get(char, char))

    # \uXXXX escapes carry UTF-16 units; recombine surrogate pairs.
    joined = "".join(out)
    return joined.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _escape(text: str, *, escape_space: bool = False) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == " ":
            out.append("\\ " if escape_space or index == 0 else " ")
        elif char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char in _ESCAPED_LITERALS:
            out.append("\\" + char)
        elif " " < char < "\x7f":
            out.append(char)
        else:
            out.append(_unicode_escape(char))
    return "".join(out)


def _unicode_escape(char: str) -> str:
    data = char.encode("utf-16-be", "surrogatepass")
    return "".join(
        f"\\u{int.from_bytes(data[i : i + 2], 'big'):04X}" for i in range(0, len(data), 2)
    )


def _comment_lines(comment: str) -> list[str]:
    # Only continuation lines may keep their own "#" or "!" marker.
    lines: list[str] = []
    for index, line in enumerate(_NEWLINE.split(comment)):
        encoded = "".join(c if " " <= c < "\x7f" else _unicode_escape(c) for c in line)
        if index > 0 and encoded and encoded[0] in _COMMENT_MARKERS:
            lines.append(encoded)
        else:
            lines.append("#" + encoded)
    return lines
