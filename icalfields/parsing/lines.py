"""Library for reconstructing rfc5545 logical lines from a byte stream.

Content lines in an iCalendar stream are delimited by a line break, which is a
CRLF sequence. Long lines may be split ("folded") into multiple physical lines
by inserting a CRLF immediately followed by a single linear white-space
character (SPACE or HTAB). Unfolding removes the CRLF and the white-space
character that follows it.

For example, the stream:

  DESCRIPTION:This is a lo\r\n
   ng description\r\n

Is read as the folded logical line `DESCRIPTION:This is a lo\r\n ng description\r\n`
which unfolds to `DESCRIPTION:This is a long description`.

A bare LF is accepted as a line terminator by default, even though rfc5545
requires CRLF. A CR that is not part of a line terminator can't be
interpreted and is always rejected when the line is unfolded.
"""

from __future__ import annotations

from collections.abc import Iterator
import enum
import io
import logging
from typing import Protocol

from icalfields.exceptions import ErrorKind, LineBreakError, StreamReadError
from icalfields.options import DEFAULT_OPTIONS, ParserOptions

from .const import CR, CRLF, FOLDS, LF, WSP

__all__ = [
    "ByteSource",
    "ReaderState",
    "LineReader",
    "unfold_line",
]

_LOGGER = logging.getLogger(__name__)


class ByteSource(Protocol):
    """A source of raw content lines, such as a binary file or socket file."""

    def readline(self) -> bytes:
        """Return the next physical line including its terminator."""


class ReaderState(enum.Enum):
    """Progress of a LineReader through its source."""

    READING = "reading"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


def unfold_line(folded: bytes) -> bytes:
    """Unfold a logical line and strip its terminating CRLF.

    Raises a LineBreakError if a CR or LF remains anywhere in the line once
    the folds are removed.
    """
    for fold in FOLDS:
        folded = folded.replace(fold, b"")
    line = folded.removesuffix(CRLF)
    for char, kind in (
        (CR, ErrorKind.BARE_CARRIAGE_RETURN),
        (LF, ErrorKind.BARE_LINE_FEED),
    ):
        if (pos := line.find(char)) != -1:
            raise LineBreakError(kind, offset=pos, char=char, detailed_error=repr(line))
    return line


class LineReader(Iterator[bytes]):
    """Reads logical lines one at a time from a byte source.

    Iterating the reader yields unfolded logical lines without a terminator.
    The source is only read on demand, one physical line ahead of the
    logical line being returned so that continuation lines can be detected.
    """

    def __init__(self, source: ByteSource, options: ParserOptions | None = None) -> None:
        """Initialize LineReader."""
        self._source = source
        self._options = options or DEFAULT_OPTIONS
        self._state = ReaderState.READING
        self._failure: OSError | None = None
        self._lookahead: bytes | None = None

    @classmethod
    def from_bytes(
        cls, content: bytes, options: ParserOptions | None = None
    ) -> "LineReader":
        """Create a LineReader over an in-memory buffer."""
        return cls(io.BytesIO(content), options)

    @property
    def state(self) -> ReaderState:
        """Return the state of the underlying source."""
        return self._state

    def __iter__(self) -> "LineReader":
        return self

    def __next__(self) -> bytes:
        """Return the next unfolded logical line."""
        while (folded := self.read_folded()) is not None:
            line = unfold_line(folded)
            if not line and self._options.skip_blank_lines:
                continue
            return line
        raise StopIteration

    def read_folded(self) -> bytes | None:
        """Return the next logical line with its folds intact.

        Every physical line in the result is terminated with CRLF regardless
        of the terminator used in the source. Returns None once the source is
        exhausted.
        """
        if self._lookahead is not None:
            first: bytes | None = self._lookahead
            self._lookahead = None
        else:
            first = self._read_physical()
        if first is None:
            return None
        parts = [first, CRLF]
        while (physical := self._read_physical()) is not None:
            if not physical or physical[0] not in WSP:
                self._lookahead = physical
                break
            parts.extend((physical, CRLF))
        return b"".join(parts)

    def _read_physical(self) -> bytes | None:
        """Read a single physical line with its terminator removed."""
        if self._state is ReaderState.FAILED:
            raise StreamReadError(
                "Content line source previously failed",
                detailed_error=str(self._failure),
            ) from self._failure
        if self._state is ReaderState.EXHAUSTED:
            return None
        try:
            line = self._source.readline()
        except OSError as err:
            _LOGGER.debug("Failed to read from content line source: %s", err)
            self._state = ReaderState.FAILED
            self._failure = err
            raise StreamReadError(
                "Failed to read from content line source", detailed_error=str(err)
            ) from err
        if not line:
            _LOGGER.debug("Reached end of content line source")
            self._state = ReaderState.EXHAUSTED
            return None
        if line.endswith(CRLF):
            return line[:-2]
        if line[-1] == LF and self._options.allow_bare_lf:
            return line[:-1]
        # A bare LF is kept when not allowed so that unfolding rejects it
        return line
