#!/usr/bin/env python3
"""
Combinatorial Generator
=======================
Expands a NameSet into every concrete name it can produce: the
cross-product of the Term lists of the Elements in its template.

Ordering
--------
Names come out in odometer order: the LAST slot varies fastest, the
first slot slowest. For template [X, Y] with X = [A, B] and
Y = [1, 2] the sequence is

    (A, 1), (A, 2), (B, 1), (B, 2)

so an exported list reads grouped by its leading slot. Exported CSV
files depend on this order; do not change it.

Size
----
`total_count` is the product of the factor sizes, computed with Python
integers (no overflow), and is known before anything is generated so
callers can refuse oversized exports. An empty template, or any
referenced Element without Terms, yields zero names.

Memory
------
Nothing is materialized. Iteration is lazy and can be abandoned at any
point; `nth(k)` maps an index straight to its tuple by mixed-radix
decomposition, so ranges can start anywhere without walking the prefix.

Usage:
    gen = CombinatorialGenerator(project.name_sets["Locomotion"], project.elements)
    gen.check_size(100_000)
    for name in gen.names():
        print(name)
"""

import itertools
import logging
import warnings
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import (
    EmptyEnumerationWarning,
    EnumerationTooLargeError,
    IndexOutOfRangeError,
    UnknownElementError,
)
from .models import Element, NameSet

logger = logging.getLogger(__name__)


class CombinatorialGenerator:
    """
    Lazy, restartable, index-addressable cross-product of a NameSet.

    The factor lists are snapshotted at construction: editing the Project
    afterwards does not affect this generator.
    """

    def __init__(self, name_set: NameSet, elements: Mapping[str, Element]):
        for ref in name_set.template:
            if ref not in elements:
                raise UnknownElementError(ref)

        self.name_set_name = name_set.name
        self.delimiter = name_set.delimiter
        self.slots: Tuple[str, ...] = tuple(name_set.template)
        self.factors: Tuple[Tuple[str, ...], ...] = tuple(
            tuple(elements[ref].terms) for ref in self.slots
        )
        self._positions: List[Dict[str, int]] = [
            {term: i for i, term in enumerate(terms)} for terms in self.factors
        ]

    # -------------------------------------------------------------------------
    # Size
    # -------------------------------------------------------------------------

    @property
    def sizes(self) -> Tuple[int, ...]:
        return tuple(len(terms) for terms in self.factors)

    @property
    def total_count(self) -> int:
        if not self.factors:
            return 0
        total = 1
        for size in self.sizes:
            total *= size
        return total

    @property
    def empty_elements(self) -> List[str]:
        """Referenced Elements with no Terms, each listed once."""
        empty = []
        for slot, terms in zip(self.slots, self.factors):
            if not terms and slot not in empty:
                empty.append(slot)
        return empty

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    def check_size(self, limit: int):
        """Raise EnumerationTooLargeError if total_count exceeds limit."""
        total = self.total_count
        if total > limit:
            raise EnumerationTooLargeError(total, limit, self.name_set_name)

    def warn_if_empty(self) -> bool:
        """Emit EmptyEnumerationWarning when nothing would be generated."""
        if not self.is_empty:
            return False
        warning = EmptyEnumerationWarning(self.name_set_name, self.empty_elements)
        logger.warning(str(warning))
        warnings.warn(warning, stacklevel=2)
        return True

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Tuple[str, ...]]:
        if not self.factors:
            return iter(())
        # product() already advances its last argument fastest
        return itertools.product(*self.factors)

    def nth(self, k: int) -> Tuple[str, ...]:
        """The k-th tuple in odometer order."""
        total = self.total_count
        if not 0 <= k < total:
            raise IndexOutOfRangeError(k, total)

        digits = []
        for size in reversed(self.sizes):
            k, digit = divmod(k, size)
            digits.append(digit)
        digits.reverse()
        return tuple(terms[d] for terms, d in zip(self.factors, digits))

    def __getitem__(self, k: int) -> Tuple[str, ...]:
        return self.nth(k)

    def index_of(self, values: Sequence[str]) -> int:
        """Inverse of nth(): position of a tuple in the enumeration."""
        if len(values) != len(self.factors):
            raise ValueError(f"expected {len(self.factors)} values, got {len(values)}")
        index = 0
        for slot, value, positions, size in zip(self.slots, values, self._positions, self.sizes):
            if value not in positions:
                raise ValueError(f"'{value}' is not a term of '{slot}'")
            index = index * size + positions[value]
        return index

    def iter_range(self, start: int = 0, stop: Optional[int] = None) -> Iterator[Tuple[str, ...]]:
        """Tuples start..stop-1, beginning directly at start."""
        total = self.total_count
        stop = total if stop is None else min(stop, total)
        if start < 0:
            raise IndexOutOfRangeError(start, total)
        if start >= stop:
            return

        # Restart the odometer at start's digits and let it roll forward
        first = self.nth(start)
        digits = [self._positions[i][value] for i, value in enumerate(first)]
        sizes = self.sizes
        for _ in range(stop - start):
            yield tuple(terms[d] for terms, d in zip(self.factors, digits))
            for slot in range(len(digits) - 1, -1, -1):
                digits[slot] += 1
                if digits[slot] < sizes[slot]:
                    break
                digits[slot] = 0

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, values: Sequence[str]) -> str:
        return self.delimiter.join(values)

    def names(self, unique: bool = False, limit: Optional[int] = None) -> Iterator[str]:
        """
        Rendered names, lazily.

        With unique=True a name that renders identically to an earlier
        one (possible when a Term contains the delimiter) is skipped;
        this keeps every name seen so far in memory.
        """
        rows = iter(self) if limit is None else itertools.islice(self, limit)
        if not unique:
            for row in rows:
                yield self.render(row)
            return

        seen = set()
        for row in rows:
            name = self.render(row)
            if name in seen:
                continue
            seen.add(name)
            yield name


def total_count(name_set: NameSet, elements: Mapping[str, Element]) -> int:
    """Number of names a NameSet expands to."""
    return CombinatorialGenerator(name_set, elements).total_count


__all__ = ['CombinatorialGenerator', 'total_count']
