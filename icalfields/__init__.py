"""
.. include:: ../README.md
"""

__all__ = [
    "diagnostics",
    "exceptions",
    "field_stream",
    "options",
    "parsing",
]
