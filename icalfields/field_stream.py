"""A stream of fields read from rfc5545 content.

This is an example of reading the fields of an ics file one at a time:
```python
from pathlib import Path
from icalfields.field_stream import FieldStream

filename = Path("example/calendar.ics")
with filename.open("rb") as ics_file:
    for field in FieldStream(ics_file):
        print(field.name, field.params, field.value)
```

A malformed line raises a `ParseError` for that line only. The stream can
keep being iterated afterwards, continuing with the next logical line, or the
`parse_fields` helper can be used to skip malformed lines:

```python
from icalfields.field_stream import parse_fields

with filename.open("rb") as ics_file:
    fields = list(parse_fields(ics_file, strict=False))
```

"""

from __future__ import annotations

from collections.abc import Generator, Iterator
import io
import logging

from .exceptions import ParseError
from .options import DEFAULT_OPTIONS, ParserOptions
from .parsing.field import Field, parse_field
from .parsing.lines import ByteSource, LineReader, ReaderState

__all__ = [
    "FieldStream",
    "parse_fields",
]

_LOGGER = logging.getLogger(__name__)


class FieldStream(Iterator[Field]):
    """Parses each logical line of a byte source into a Field on demand."""

    def __init__(self, source: ByteSource, options: ParserOptions | None = None) -> None:
        """Initialize FieldStream."""
        self._options = options or DEFAULT_OPTIONS
        self._reader = LineReader(source, self._options)

    @classmethod
    def from_ics(
        cls, content: str | bytes, options: ParserOptions | None = None
    ) -> "FieldStream":
        """Factory method to create a new instance from rfc5545 content in memory."""
        options = options or DEFAULT_OPTIONS
        if isinstance(content, str):
            content = content.encode(options.encoding, errors="surrogateescape")
        return cls(io.BytesIO(content), options)

    @property
    def state(self) -> ReaderState:
        """Return the state of the underlying source."""
        return self._reader.state

    def __iter__(self) -> "FieldStream":
        return self

    def __next__(self) -> Field:
        """Return the next Field in the stream.

        Raises StopIteration once the source is exhausted, a ParseError if
        the next logical line is malformed, or a StreamReadError if the
        source failed.
        """
        line = next(self._reader)
        return parse_field(line, self._options)


def parse_fields(
    source: ByteSource,
    options: ParserOptions | None = None,
    *,
    strict: bool = True,
) -> Generator[Field, None, None]:
    """Parse all fields in the byte source.

    When strict, the first malformed line raises its ParseError. Otherwise
    malformed lines are logged and skipped. A StreamReadError is always raised.
    """
    stream = FieldStream(source, options)
    while True:
        try:
            field = next(stream)
        except StopIteration:
            return
        except ParseError as err:
            if strict:
                raise
            _LOGGER.warning(
                "Skipping invalid content line: %s (%s)", err, err.detailed_error
            )
            continue
        yield field
