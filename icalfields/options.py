"""Settings that control how content lines are read and parsed."""

from __future__ import annotations

import codecs

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = [
    "ParserOptions",
    "DEFAULT_OPTIONS",
]


class ParserOptions(BaseModel):
    """Options shared by the line reader and the field parser."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    allow_bare_lf: bool = True
    """Accept a lone LF as a line terminator in addition to CRLF.

    rfc5545 requires CRLF, however many producers emit bare LF. When this is
    disabled a bare LF is rejected as an illegal line break.
    """

    skip_blank_lines: bool = False
    """Silently drop empty logical lines instead of reporting them."""

    encoding: str = "utf-8"
    """Codec used to decode parameter values and the field value.

    Bytes that are not valid in the codec are kept with the "surrogateescape"
    error handler, so the text can be encoded back to the original bytes.
    """

    strict_encoding: bool = False
    """Reject parameter values and values that are not valid in the codec."""

    @field_validator("encoding")
    @classmethod
    def check_encoding(cls, value: str) -> str:
        """Verify the codec is known."""
        try:
            codecs.lookup(value)
        except LookupError as err:
            raise ValueError(f"Unknown encoding '{value}'") from err
        return value


DEFAULT_OPTIONS = ParserOptions()
