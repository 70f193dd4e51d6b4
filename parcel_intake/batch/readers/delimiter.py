"""
Delimiter sniffing for merchant CSV exports.

Spreadsheet tools in locales with decimal commas export with ';', everything
else uses ','. Only the header line is inspected.
"""

COMMA = ","
SEMICOLON = ";"


def first_line(text: str) -> str:
    """Return text up to (not including) the first line break."""
    for idx, char in enumerate(text):
        if char in "\r\n":
            return text[:idx]
    return text


def sniff_delimiter(text: str) -> str:
    """
    Pick the delimiter used by the first line of ``text``.

    Returns ';' only when it strictly outnumbers ',' on that line; ties and
    lines with neither character default to ','.
    """
    line = first_line(text)
    if line.count(SEMICOLON) > line.count(COMMA):
        return SEMICOLON
    return COMMA
