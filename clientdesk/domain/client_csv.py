"""CSV layout of the client export and header recognition for imports."""
import csv
import io
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

EXPORT_HEADER = ["ID", "Nombre", "CIF", "Email", "Teléfono", "Web"]

# Canonical field -> accepted header labels (compared trimmed and lowercased)
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("nombre", "name"),
    "cif": ("cif",),
    "email": ("email",),
    "phone": ("phone", "teléfono", "telefono"),
    "web": ("web",),
}


class CSVFormatError(ValueError):
    """Raised when an upload cannot be read as a CSV document."""


@dataclass
class ClientRow:
    """One data row of an import, reduced to the recognized columns."""

    name: str
    cif: str
    email: str
    phone: str
    web: str


def build_column_index(header: list[str]) -> dict[str, int]:
    """Map canonical field names to column positions.

    The first matching column wins when a label appears twice. Unknown
    columns are ignored.
    """
    labels = {}
    for position, label in enumerate(header):
        labels.setdefault(label.strip().lower(), position)

    index = {}
    for field, aliases in HEADER_ALIASES.items():
        for alias in aliases:
            if alias in labels:
                index[field] = labels[alias]
                break
    return index


def _cell(row: list[str], index: dict[str, int], field: str) -> str:
    position = index.get(field)
    if position is None or position >= len(row):
        return ""
    return row[position].strip()


def extract_row(row: list[str], index: dict[str, int]) -> ClientRow:
    """Pick the recognized cells out of a raw CSV row; absent cells become ''."""
    return ClientRow(
        name=_cell(row, index, "name"),
        cif=_cell(row, index, "cif"),
        email=_cell(row, index, "email"),
        phone=_cell(row, index, "phone"),
        web=_cell(row, index, "web"),
    )


def read_rows(content: bytes) -> tuple[dict[str, int], list[list[str]]]:
    """Decode an uploaded CSV and split it into a column index and data rows.

    Raises:
        CSVFormatError: If the bytes are not UTF-8, not CSV, or have no header
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise CSVFormatError("File is not UTF-8 encoded")

    try:
        rows = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as e:
        raise CSVFormatError(f"Malformed CSV: {e}")

    if not rows or not any(cell.strip() for cell in rows[0]):
        raise CSVFormatError("File has no header row")

    return build_column_index(rows[0]), rows[1:]


def iter_export_lines(clients: Iterable) -> Iterator[str]:
    """Yield the export document one CSV line at a time, header first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    def _flush_line() -> str:
        line = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)
        return line

    writer.writerow(EXPORT_HEADER)
    yield _flush_line()
    for client in clients:
        writer.writerow(
            [client.id, client.name, client.cif, client.email, client.phone, client.web]
        )
        yield _flush_line()
