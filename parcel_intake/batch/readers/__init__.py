"""
Readers turning uploaded files into rows of CSV fields.
"""

from .csv_reader import CSVReader, iter_logical_rows, parse_line
from .delimiter import sniff_delimiter
from .file_reader import FileReader, FileReadError, clean_text

__all__ = [
    "CSVReader",
    "FileReader",
    "FileReadError",
    "clean_text",
    "iter_logical_rows",
    "parse_line",
    "sniff_delimiter",
]
