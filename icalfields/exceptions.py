"""Exceptions for icalfields library."""

from __future__ import annotations

import enum

__all__ = [
    "ErrorKind",
    "ContentLineError",
    "StreamReadError",
    "ParseError",
    "LineBreakError",
    "FieldParseError",
]


class ErrorKind(enum.Enum):
    """The closed set of reasons a single logical line may be rejected."""

    BARE_CARRIAGE_RETURN = "CR not followed by LF"
    BARE_LINE_FEED = "LF not preceded by CR"
    NO_NAME = "Field has no name"
    INVALID_NAME_CHAR = "Invalid character in name (must be alphanumeric or '-')"
    EMPTY_PARAM_NAME = "Empty parameter name"
    UNEXPECTED_END_OF_PARAM = "Unexpected end of input while reading parameter"
    MISSING_PARAM_EQUALS = "Invalid parameter, expected '=' after parameter name"
    ILLEGAL_PARAM_CHAR = "Illegal character in parameter value"
    INVALID_QUOTED = "Invalid quoted value in parameter"
    ILLEGAL_QUOTED_CHAR = "Illegal character in quoted parameter value"
    NO_VALUE = "Field has no value"
    INVALID_ENCODING = "Field text could not be decoded"


class ContentLineError(Exception):
    """Base exception for all icalfields errors.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the offending content line, useful
    for debugging purposes.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the ContentLineError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class StreamReadError(ContentLineError):
    """Exception raised when the underlying byte source fails.

    This is fatal for the whole stream: a reader that raised it keeps
    raising it on every subsequent call.
    """


class ParseError(ContentLineError):
    """Exception raised when a single logical line is malformed.

    The line that caused the error has been consumed, so a caller may choose
    to continue reading with the next logical line.
    """

    def __init__(
        self,
        kind: ErrorKind,
        *,
        offset: int | None = None,
        char: int | None = None,
        detailed_error: str | None = None,
    ) -> None:
        """Initialize the ParseError with the kind of failure and its location."""
        message = kind.value
        if offset is not None:
            message = f"{message} at offset {offset}"
        if char is not None:
            message = f"{message} ({bytes([char])!r})"
        super().__init__(message, detailed_error=detailed_error)
        self.kind = kind
        self.offset = offset
        self.char = char


class LineBreakError(ParseError):
    """Exception raised when an unfolded line still contains a CR or LF."""


class FieldParseError(ParseError):
    """Exception raised when a logical line does not match the field grammar."""
