# Standard library imports
import csv
from pathlib import Path
from typing import Iterator


def read_data_rows(path: Path) -> Iterator[tuple[int, list[str]]]:
    """
    Yield (line number, fields) for every non-blank row after the header.

    Quoted fields are unquoted; surrounding whitespace is stripped.
    """
    with open(path, "r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.reader(handle)
        for index, row in enumerate(reader):
            if index == 0:
                continue
            if not row or all(not cell.strip() for cell in row):
                continue
            yield reader.line_num, [cell.strip() for cell in row]
