"""Library for parsing rfc5545 content lines into fields.

A field is the structured form of a single unfolded content line, made up of
a name, an optional list of parameters and a value:

  contentline = name *(";" param ) ":" value
  param       = param-name "=" param-value *("," param-value)
  param-value = paramtext / quoted-string

For example, given a content line of:

  ATTENDEE;RSVP=TRUE;ROLE=REQ-PARTICIPANT:MAILTO:jsmith@host.com

This library would create a Field with this structure:

  Field(
    name='ATTENDEE',
    params={'RSVP': ['TRUE'], 'ROLE': ['REQ-PARTICIPANT']},
    value='MAILTO:jsmith@host.com',
  )

The grammar is checked one byte at a time in a single pass. Only the generic
content line syntax is enforced here: the value is left as opaque text and no
parameter is interpreted. Names and parameter names are restricted to ASCII,
while parameter values and the value may contain any other text in the
configured encoding.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
import textwrap
from typing import NamedTuple

from icalfields.exceptions import ErrorKind, FieldParseError
from icalfields.options import DEFAULT_OPTIONS, ParserOptions

from .chars import (
    ILLEGAL_QUOTED_CHARS,
    ILLEGAL_UNQUOTED_CHARS,
    ILLEGAL_VALUE_CHARS,
    NAME_CHARS,
    NAME_DELIMITERS,
    PARAM_VALUE_DELIMITERS,
    UNSAFE_CHARS,
)
from .const import COLON, COMMA, DQUOTE, EQUALS, FOLD_INDENT, FOLD_LEN, SEMICOLON

__all__ = [
    "Field",
    "parse_field",
    "fold_line",
    "encode_fields",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class Field:
    """An rfc5545 content line."""

    name: str
    value: str
    params: dict[str, list[str]] = field(default_factory=dict)
    """Parameter values keyed by parameter name, in the order they appeared."""

    def get_parameter_values(self, name: str) -> list[str]:
        """Return the list of values for the parameter, or empty if not present."""
        return self.params.get(name, [])

    def ics(self) -> str:
        """Encode the Field into a single unfolded content line.

        Raises a ValueError if the Field can't be represented as a content
        line that parses back to the same Field.
        """
        result = [_encode_name(self.name)]
        for name, values in self.params.items():
            encoded_values = ",".join(_encode_param_value(value) for value in values)
            result.append(f";{_encode_name(name)}={encoded_values}")
        result.append(":")
        result.append(_encode_value(self.value))
        return "".join(result)

    @classmethod
    def from_ics(
        cls, contentline: bytes | str, options: ParserOptions | None = None
    ) -> "Field":
        """Decode a Field from an unfolded rfc5545 content line.

        Will raise a FieldParseError on failure.
        """
        options = options or DEFAULT_OPTIONS
        if isinstance(contentline, str):
            contentline = contentline.encode(
                options.encoding, errors="surrogateescape"
            )
        return parse_field(contentline, options)


def _encode_name(name: str) -> str:
    if not name or any(ord(char) not in NAME_CHARS for char in name):
        raise ValueError(f"Name {name!r} can't be encoded")
    return name


def _encode_value(value: str) -> str:
    if any(ord(char) in ILLEGAL_VALUE_CHARS for char in value):
        raise ValueError(f"Value {value!r} can't be encoded")
    return value


def _encode_param_value(value: str) -> str:
    if any(ord(char) in ILLEGAL_UNQUOTED_CHARS for char in value):
        raise ValueError(f"Parameter value {value!r} can't be encoded")
    # Property parameters with values that contain a colon, semicolon, or a
    # comma character must be placed in quoted text
    if any(char in UNSAFE_CHARS for char in value):
        return f'"{value}"'
    return value


class _Param(NamedTuple):
    """A parsed parameter and the position just past it."""

    name: str
    values: list[str]
    pos: int


def parse_field(line: bytes, options: ParserOptions | None = None) -> Field:
    """Parse a single unfolded content line, without its terminator."""
    options = options or DEFAULT_OPTIONS
    name, pos = _read_name(line, 0)
    if not name:
        raise FieldParseError(
            ErrorKind.NO_NAME, offset=pos, detailed_error=repr(line)
        )
    params: dict[str, list[str]] = {}
    while (param := _read_param(line, pos, options)) is not None:
        # A repeated parameter replaces the earlier one
        params[param.name] = param.values
        pos = param.pos
    if pos >= len(line) or line[pos] != COLON:
        raise FieldParseError(
            ErrorKind.NO_VALUE, offset=pos, detailed_error=repr(line)
        )
    return Field(
        name=name,
        value=_decode(line, pos + 1, len(line), options),
        params=params,
    )


def _read_name(line: bytes, pos: int) -> tuple[str, int]:
    """Read a name token, stopping at a delimiter or the end of the line."""
    start = pos
    while pos < len(line):
        char = line[pos]
        if char in NAME_DELIMITERS:
            break
        if char not in NAME_CHARS:
            raise FieldParseError(
                ErrorKind.INVALID_NAME_CHAR,
                offset=pos,
                char=char,
                detailed_error=repr(line),
            )
        pos += 1
    return line[start:pos].decode("ascii"), pos


def _read_param(line: bytes, pos: int, options: ParserOptions) -> _Param | None:
    """Read the next parameter, or return None when the parameter list ends."""
    if pos >= len(line) or line[pos] != SEMICOLON:
        return None
    name, pos = _read_name(line, pos + 1)
    if not name:
        raise FieldParseError(
            ErrorKind.EMPTY_PARAM_NAME, offset=pos, detailed_error=repr(line)
        )
    if pos >= len(line):
        raise FieldParseError(
            ErrorKind.UNEXPECTED_END_OF_PARAM, offset=pos, detailed_error=repr(line)
        )
    if line[pos] != EQUALS:
        raise FieldParseError(
            ErrorKind.MISSING_PARAM_EQUALS,
            offset=pos,
            char=line[pos],
            detailed_error=repr(line),
        )
    values: list[str] = []
    while True:
        if pos + 1 < len(line) and line[pos + 1] == DQUOTE:
            value, pos = _read_quoted(line, pos + 1, options)
        else:
            value, pos = _read_unquoted(line, pos + 1, options)
        values.append(value)
        # pos is at the delimiter that ended the value, or the end of the line
        if pos >= len(line) or line[pos] != COMMA:
            break
    return _Param(name=name, values=values, pos=pos)


def _read_quoted(line: bytes, pos: int, options: ParserOptions) -> tuple[str, int]:
    """Read a quoted value starting at the opening quote."""
    start = pos + 1
    end = line.find(DQUOTE, start)
    for i in range(start, end if end != -1 else len(line)):
        if line[i] in ILLEGAL_QUOTED_CHARS:
            raise FieldParseError(
                ErrorKind.ILLEGAL_QUOTED_CHAR,
                offset=i,
                char=line[i],
                detailed_error=repr(line),
            )
    if end == -1:
        raise FieldParseError(
            ErrorKind.INVALID_QUOTED, offset=pos, detailed_error=repr(line)
        )
    pos = end + 1
    if pos < len(line) and line[pos] not in PARAM_VALUE_DELIMITERS:
        raise FieldParseError(
            ErrorKind.INVALID_QUOTED,
            offset=pos,
            char=line[pos],
            detailed_error=repr(line),
        )
    return _decode(line, start, end, options), pos


def _read_unquoted(line: bytes, pos: int, options: ParserOptions) -> tuple[str, int]:
    """Read an unquoted value up to the next delimiter or the end of the line."""
    start = pos
    while pos < len(line):
        char = line[pos]
        if char in PARAM_VALUE_DELIMITERS:
            break
        if char in ILLEGAL_UNQUOTED_CHARS:
            raise FieldParseError(
                ErrorKind.ILLEGAL_PARAM_CHAR,
                offset=pos,
                char=char,
                detailed_error=repr(line),
            )
        pos += 1
    return _decode(line, start, pos, options), pos


def _decode(line: bytes, start: int, end: int, options: ParserOptions) -> str:
    if not options.strict_encoding:
        return line[start:end].decode(options.encoding, errors="surrogateescape")
    try:
        return line[start:end].decode(options.encoding)
    except UnicodeDecodeError as err:
        _LOGGER.debug("Unable to decode %r: %s", line[start:end], err)
        raise FieldParseError(
            ErrorKind.INVALID_ENCODING,
            offset=start + err.start,
            char=line[start + err.start],
            detailed_error=repr(line),
        ) from err


def fold_line(contentline: str) -> list[str]:
    """Split a content line into physical lines of at most FOLD_LEN characters."""
    if not contentline:
        return [contentline]
    return textwrap.wrap(
        contentline,
        width=FOLD_LEN,
        subsequent_indent=FOLD_INDENT,
        drop_whitespace=False,
        replace_whitespace=False,
        expand_tabs=False,
        break_on_hyphens=False,
    )


def encode_fields(fields: Iterable[Field]) -> str:
    """Encode fields as folded, CRLF terminated content lines.

    Values decoded from invalid bytes are restored when the result is encoded
    with the "surrogateescape" error handler.
    """
    return "".join(
        f"{physical}\r\n" for item in fields for physical in fold_line(item.ics())
    )
