"""Constants for icalfields parsing library."""

# Related to rfc5545 text parsing
CR = 0x0D
LF = 0x0A
CRLF = b"\r\n"
WSP = b" \t"
FOLDS = (b"\r\n ", b"\r\n\t")
FOLD_LEN = 75
FOLD_INDENT = " "

# Content line delimiters
SEMICOLON = 0x3B
COLON = 0x3A
EQUALS = 0x3D
COMMA = 0x2C
DQUOTE = 0x22
