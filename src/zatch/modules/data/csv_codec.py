"""CSV reading and writing tuned for spreadsheet users.

Files are written as UTF-8 with a byte order mark so Excel picks the right
encoding, with ``\\n`` line endings and quotes only where a field holds a
comma, quote or newline.
"""

import csv
import io
from collections.abc import Iterable, Mapping, Sequence
from typing import Any


BOM = "\ufeff"


def write_csv(headers: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if row.get(header) is None else row.get(header) for header in headers])
    return BOM + buffer.getvalue().rstrip("\n")


def read_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text into dicts keyed by the trimmed header names.

    Values are returned exactly as written. A leading byte order mark is
    ignored, as are rows with nothing but whitespace.
    """
    reader = csv.DictReader(io.StringIO(text.removeprefix(BOM), newline=""))
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]

    rows: list[dict[str, str]] = []
    for row in reader:
        cleaned = {key: value or "" for key, value in row.items() if key is not None}
        if any(value.strip() for value in cleaned.values()):
            rows.append(cleaned)
    return rows
