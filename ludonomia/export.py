#!/usr/bin/env python3
"""
Export
======
Streams a generator's names out as CSV or as plain newline-joined text
(the clipboard format).

CSV layout: one column per template slot, headed by the Element name,
plus an optional trailing "Name" column holding the rendered filename.
Standard quoting applies: a field containing a comma, a double quote or
a line break is wrapped in double quotes with inner quotes doubled.
"""

import csv
import io
import itertools
import logging
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple, Union

from .generator import CombinatorialGenerator

logger = logging.getLogger(__name__)

NAME_COLUMN = "Name"


def csv_header(generator: CombinatorialGenerator, include_name: bool = False) -> List[str]:
    header = list(generator.slots)
    if include_name:
        header.append(NAME_COLUMN)
    return header


def write_csv(generator: CombinatorialGenerator,
              fh: IO[str],
              header: bool = True,
              include_name: bool = False,
              limit: Optional[int] = None) -> int:
    """
    Write rows to an open text stream.

    Args:
        generator: Source of rows
        fh: Text stream (open files should use newline="")
        header: Write the Element-name header row first
        include_name: Append the rendered name as a final column
        limit: Stop after this many rows

    Returns:
        Number of data rows written
    """
    writer = csv.writer(fh, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    if header and generator.slots:
        writer.writerow(csv_header(generator, include_name))

    rows = iter(generator) if limit is None else itertools.islice(generator, limit)
    count = 0
    for row in rows:
        if include_name:
            writer.writerow(row + (generator.render(row),))
        else:
            writer.writerow(row)
        count += 1
    return count


def export_csv(generator: CombinatorialGenerator,
               path: Union[str, Path],
               header: bool = True,
               include_name: bool = False,
               limit: Optional[int] = None) -> int:
    """Write a CSV file; returns the number of data rows."""
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        count = write_csv(generator, f, header=header, include_name=include_name, limit=limit)
    logger.info(f"Exported {count} rows of '{generator.name_set_name}' to {path}")
    return count


def to_csv_text(generator: CombinatorialGenerator,
                header: bool = True,
                include_name: bool = False,
                limit: Optional[int] = None) -> str:
    buf = io.StringIO()
    write_csv(generator, buf, header=header, include_name=include_name, limit=limit)
    return buf.getvalue()


def iter_text_lines(generator: CombinatorialGenerator,
                    limit: Optional[int] = None,
                    unique: bool = False) -> Iterator[str]:
    return generator.names(unique=unique, limit=limit)


def to_clipboard_text(generator: CombinatorialGenerator,
                      limit: Optional[int] = None,
                      unique: bool = False) -> str:
    """Rendered names joined with newlines."""
    return "\n".join(iter_text_lines(generator, limit=limit, unique=unique))


def read_csv_rows(source: Union[str, IO[str]], header: bool = True) -> List[Tuple[str, ...]]:
    """Parse exported CSV back into tuples (header row dropped)."""
    if isinstance(source, str):
        source = io.StringIO(source, newline="")
    reader = csv.reader(source)
    if header:
        next(reader, None)
    return [tuple(row) for row in reader]


__all__ = [
    'NAME_COLUMN',
    'csv_header',
    'write_csv',
    'export_csv',
    'to_csv_text',
    'iter_text_lines',
    'to_clipboard_text',
    'read_csv_rows',
]
