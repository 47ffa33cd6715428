"""
Delimited-file record source.

Turns each line of a delimited text file into a record keyed by declared
field names, in column order. Values stay strings.
"""

import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import MissingFieldError
from .schemes.base import Record, normalize_fields

logger = logging.getLogger(__name__)


def read_delimited(path: str | Path, fields: Iterable[str], delimiter: str = ",") -> Iterator[dict[str, str]]:
    """
    Yield one record per non-blank line of ``path``.

    Columns beyond the declared fields are ignored. A line with fewer
    columns than fields raises MissingFieldError naming the first missing
    field.
    """
    names = normalize_fields(fields)
    path = Path(path)
    count = 0

    with path.open(newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.reader(f, delimiter=delimiter), start=1):
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) < len(names):
                logger.error(f"{path}:{line_no}: expected {len(names)} columns, got {len(row)}")
                raise MissingFieldError(names[len(row)], list(names[: len(row)]))
            count += 1
            yield dict(zip(names, row))

    logger.debug(f"Read {count} records from {path}")


def project(record: Record, fields: Iterable[str]) -> dict:
    """Narrow ``record`` to ``fields``, in the order given."""
    names = normalize_fields(fields)
    missing = [name for name in names if name not in record]
    if missing:
        raise MissingFieldError(missing[0], list(record.keys()))
    return {name: record[name] for name in names}
