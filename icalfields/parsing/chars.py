"""Character sets used in rfc5545 content lines.

The field parser works on raw bytes, so each set here is exposed as a
frozenset of byte values. The ranges are defined with pyparsing unicode sets
so they read the same way as the rfc5545 ABNF.

Unlike the CONTROL rule in rfc5545, the Control range here includes HTAB, so
that HTAB is rejected in parameter values whether quoted or not. Only the
field value allows HTAB.
"""

from __future__ import annotations

from typing import cast

from pyparsing import alphanums, unicode_set
from pyparsing.unicode import UnicodeRangeList

__all__ = [
    "NAME_CHARS",
    "CONTROL_CHARS",
    "ILLEGAL_UNQUOTED_CHARS",
    "ILLEGAL_QUOTED_CHARS",
    "ILLEGAL_VALUE_CHARS",
    "PARAM_VALUE_DELIMITERS",
    "NAME_DELIMITERS",
    "UNSAFE_CHARS",
]


class CharRange(unicode_set):
    """A base class that returns all characters in a range."""

    @classmethod
    def all(cls) -> list[str]:
        """Return all characters from the range."""
        return cast(list[str], cls._chars_for_ranges)


class Control(CharRange):
    """All the controls, including HTAB."""

    _ranges: UnicodeRangeList = [
        (0x00, 0x1F),
        (0x7F,),
    ]


def _byteset(chars: str) -> frozenset[int]:
    return frozenset(chars.encode("ascii"))


# iana-token and x-name characters
NAME_CHARS = _byteset(alphanums + "-")

CONTROL_CHARS = _byteset("".join(Control.all()))

# SAFE-CHAR excludes CONTROL and DQUOTE, along with ";", ":" and "," which end
# an unquoted value. QSAFE-CHAR only excludes CONTROL, since DQUOTE ends it.
ILLEGAL_UNQUOTED_CHARS = CONTROL_CHARS | _byteset('"')
ILLEGAL_QUOTED_CHARS = CONTROL_CHARS

# VALUE-CHAR allows HTAB, all other controls must not appear in a value
ILLEGAL_VALUE_CHARS = CONTROL_CHARS - _byteset("\t")

PARAM_VALUE_DELIMITERS = _byteset(",;:")

NAME_DELIMITERS = _byteset(":;=")

# Characters that require a parameter value to be quoted when encoding
UNSAFE_CHARS = ",:;"
