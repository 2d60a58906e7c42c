"""Library for diagnostics or debugging information about content lines."""

from __future__ import annotations

from collections.abc import Generator
import itertools
import logging

from .exceptions import ParseError
from .field_stream import FieldStream
from .options import ParserOptions
from .parsing.field import Field

__all__ = [
    "redact_ics",
]


FIELD_ALLOWLIST = {
    "BEGIN",
    "END",
    "DTSTAMP",
    "CREATED",
    "LAST-MODIFIED",
    "DTSTART",
    "DTEND",
    "RRULE",
    "PRODID",
}
REDACT = "***"
MAX_CONTENTLINES = 5000

_LOGGER = logging.getLogger(__name__)

_OPTIONS = ParserOptions(skip_blank_lines=True)


def redact_field(field: Field, field_allowlist: set[str]) -> str:
    """Return a redacted version of a parsed field.

    The allowlist is expected to contain upper case names.
    """
    if field.name.upper() in field_allowlist:
        try:
            return field.ics()
        except ValueError as err:
            _LOGGER.debug("Redacting field that can't be encoded: %s", err)
    return f"{field.name}:{REDACT}"


def _fields_or_none(stream: FieldStream) -> Generator[Field | None, None, None]:
    """Yield each field in the stream, or None for a malformed line."""
    while True:
        try:
            yield next(stream)
        except StopIteration:
            return
        except ParseError:
            yield None


def redact_ics(
    ics: str | bytes,
    max_contentlines: int = MAX_CONTENTLINES,
    field_allowlist: set[str] | None = None,
) -> Generator[str, None, None]:
    """Generate redacted ics file contents one logical line at a time.

    Names in the allowlist are matched case-insensitively.
    """
    allowlist = {name.upper() for name in field_allowlist or FIELD_ALLOWLIST}
    stream = FieldStream.from_ics(ics, _OPTIONS)
    for field in itertools.islice(_fields_or_none(stream), max_contentlines):
        if field is None:
            yield REDACT
            continue
        yield redact_field(field, allowlist)
