"""
File source for merchant CSV uploads.
"""

from pathlib import Path

BOM = "\ufeff"


class FileReadError(Exception):
    """Raised when an uploaded file cannot be read or decoded."""


class FileReader:
    """
    Reads an uploaded file into text ready for tokenizing.

    The whole file is read into memory. Decoding is the only byte-level
    work done here; a leading byte-order mark and surrounding whitespace
    are removed.
    """

    def __init__(self, encoding: str = "utf-8"):
        """
        Initialize file reader.

        Args:
            encoding: Text encoding of uploaded files
        """
        self.encoding = encoding

    def read(self, file_path: str | Path) -> str:
        """
        Read and clean a file from disk.

        Raises:
            FileReadError: If the file is missing, unreadable or not decodable
        """
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise FileReadError(f"Cannot read {file_path}: {e}") from e
        return self.decode(data)

    def decode(self, data: bytes) -> str:
        """
        Decode raw bytes and strip BOM and surrounding whitespace.

        Raises:
            FileReadError: If the bytes are not valid in the configured encoding
        """
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise FileReadError(f"File is not valid {self.encoding}: {e}") from e
        return clean_text(text)


def clean_text(text: str) -> str:
    """Strip a leading byte-order mark and surrounding whitespace."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    return text.strip()
