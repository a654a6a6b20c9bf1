from __future__ import annotations
import csv
import logging
import sys
from dataclasses import dataclass
from typing import Iterator, List, TextIO

from .errors import EmptyRoster, InsufficientRoster, MalformedInput, SourceUnavailable

log = logging.getLogger(__name__)

# no cap on field length
csv.field_size_limit(sys.maxsize)

# Header must name exactly these columns, in any order.
REQUIRED_COLUMNS = ("id", "name")
# One record per role: primary and backup.
ROLES_TO_FILL = 2


@dataclass(frozen=True)
class Record:
    id: str
    name: str


def _rows(reader: Iterator[List[str]]) -> Iterator[List[str]]:
    # csv yields [] for blank lines
    for row in reader:
        if row:
            yield row


def _check_header(header: List[str], source: str) -> None:
    unknown = [c for c in header if c not in REQUIRED_COLUMNS]
    if unknown:
        raise MalformedInput(source, f"unknown field `{unknown[0]}`, expected `id` or `name`")
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise MalformedInput(source, f"missing field `{missing[0]}`")
    if len(header) != len(set(header)):
        dup = next(c for c in header if header.count(c) > 1)
        raise MalformedInput(source, f"duplicate field `{dup}`")


def read_roster(stream: TextIO, source: str) -> List[Record]:
    """Parse a comma-delimited roster with an `id,name` header (either order).

    Every data row must carry exactly as many fields as the header. An empty
    source (no header at all) yields an empty list; emptiness is reported by
    check_roster, not here.
    """
    reader = csv.reader(stream, delimiter=",")
    rows = _rows(reader)
    try:
        header = next(rows, None)
        if header is None:
            return []
        _check_header(header, source)
        id_col, name_col = header.index("id"), header.index("name")

        records = []
        for row in rows:
            if len(row) != len(header):
                raise MalformedInput(
                    source,
                    f"line {reader.line_num}: expected {len(header)} fields, found {len(row)}",
                )
            records.append(Record(id=row[id_col], name=row[name_col]))
    except csv.Error as e:
        raise MalformedInput(source, f"line {reader.line_num}: {e}") from e
    except UnicodeDecodeError as e:
        raise MalformedInput(source, f"invalid UTF-8: {e}") from e
    return records


def check_roster(records: List[Record], source: str) -> None:
    if not records:
        raise EmptyRoster(source)
    if len(records) < ROLES_TO_FILL:
        raise InsufficientRoster(source, len(records))


def load_roster(path: str) -> List[Record]:
    """Open, parse and validate the roster at `path`.

    Raises SourceUnavailable, MalformedInput, EmptyRoster or InsufficientRoster.
    """
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            records = read_roster(f, path)
    except OSError as e:
        raise SourceUnavailable(path, e.strerror or str(e)) from e
    check_roster(records, path)
    log.debug("loaded %d records from %s", len(records), path)
    return records

