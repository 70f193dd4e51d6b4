"""
Quote-aware CSV tokenizer for merchant parcel files.
"""

from typing import Iterator, List

from parcel_intake.observability.logger import get_logger

from .delimiter import sniff_delimiter

logger = get_logger(__name__)

QUOTE = '"'
LINE_BREAKS = "\r\n"


def parse_line(line: str, delimiter: str = ",") -> List[str]:
    """
    Split one logical row into trimmed fields.

    Honors double-quote escaping (``""`` inside quotes is a literal quote).
    Line break characters are treated as ordinary field content.

    Args:
        line: Text of a single row
        delimiter: Field separator

    Returns:
        Ordered list of trimmed field values
    """
    fields: List[str] = []
    field: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                field.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(field).strip())
            field = []
        else:
            field.append(char)
        i += 1

    fields.append("".join(field).strip())
    return fields


def iter_logical_rows(text: str) -> Iterator[str]:
    """
    Yield the raw text of each row.

    A line break only ends a row outside quotes; ``\\r\\n`` is one break.
    Rows holding nothing but quote toggles (blank lines, a bare ``""``)
    are skipped.
    """
    start = 0
    in_quotes = False
    has_content = False
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        if char == QUOTE:
            if in_quotes and i + 1 < n and text[i + 1] == QUOTE:
                has_content = True
                i += 1
            else:
                in_quotes = not in_quotes
        elif char in LINE_BREAKS and not in_quotes:
            if has_content:
                yield text[start:i]
            if char == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            start = i + 1
            has_content = False
        else:
            has_content = True
        i += 1

    if has_content:
        yield text[start:]


class CSVReader:
    """
    Tokenizes raw CSV text into rows of trimmed string fields.

    Rows are cut at line breaks outside quotes and each row is handed to
    ``parse_line``, so quoted fields may contain the delimiter, escaped
    quotes and line breaks. Both LF and CRLF line endings are accepted.
    The reader keeps no state between calls.
    """

    def __init__(self, delimiter: str | None = None):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter; sniffed from the header line when None
        """
        self.delimiter = delimiter

    def read_text(self, text: str, delimiter: str | None = None) -> List[List[str]]:
        """
        Tokenize the full text.

        Args:
            text: Entire decoded file contents
            delimiter: Overrides the reader's delimiter for this call

        Returns:
            List of rows, each a list of trimmed fields
        """
        delimiter = delimiter or self.delimiter or sniff_delimiter(text)
        rows = [parse_line(line, delimiter) for line in iter_logical_rows(text)]

        logger.debug(
            "Tokenized CSV text",
            extra={"row_count": len(rows), "delimiter": delimiter, "char_count": len(text)},
        )
        return rows
