"""
Official upload template generator.

The template is the inverse of the reader: its header matches every
keyword the header inferrer looks for and its column order matches the
positional fallback.
"""

from pathlib import Path
from typing import Sequence

TEMPLATE_FILENAME = "parcel_upload_template.csv"

TEMPLATE_HEADERS = (
    "Invoice ID",
    "Recipient Name",
    "Phone Number",
    "Full Address",
    "COD Amount",
    "Weight (kg)",
    "Note",
)

TEMPLATE_SAMPLE_ROWS = (
    ("INV-1001", "Abdur Rahman", "01712345678", "House 12, Road 5, Dhanmondi, Dhaka", "1500", "1.5", "Handle with care"),
    ("", "Sumaiya Akter", "01811223344", "Plot 45, Sector 7, Uttara, Dhaka", "0", "0.5", "Fragile - Deliver after 5 PM"),
    ("INV-1003", "Karim Mia", "01912334455", "Shop 4, Market Road, Chittagong", "550", "2.2", "Deliver to reception"),
)


def escape_csv(value: object) -> str:
    """Quote a value, doubling embedded quotes."""
    return '"' + str(value).replace('"', '""') + '"'


def format_row(values: Sequence[object]) -> str:
    return ",".join(escape_csv(v) for v in values)


def build_template() -> str:
    """Return the template CSV text (header plus sample rows, LF line endings)."""
    lines = [format_row(TEMPLATE_HEADERS)]
    lines.extend(format_row(row) for row in TEMPLATE_SAMPLE_ROWS)
    return "\n".join(lines)


def write_template(output_path: str | Path) -> Path:
    """Write the template to ``output_path`` (a directory gets the default filename)."""
    path = Path(output_path)
    if path.is_dir():
        path = path / TEMPLATE_FILENAME
    path.write_text(build_template(), encoding="utf-8")
    return path
