#!/usr/bin/env python3
"""
Errors
======
Exception and warning types raised by the naming engine.

Every mutating operation validates its arguments before touching the
Project, so any of these errors means nothing was changed.
"""

from typing import Optional


class LudonomiaError(Exception):
    """Base class for all engine errors."""


class DuplicateNameError(LudonomiaError, ValueError):
    """An Element or NameSet with this name already exists."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' already exists")


class InvalidProjectFormatError(LudonomiaError, ValueError):
    """A loaded document is not a usable Project, even after migration."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"invalid-project-format: {reason}")


class IndexOutOfRangeError(LudonomiaError, IndexError):
    """An index given by the caller lies outside the valid range."""

    def __init__(self, index: int, size: int, what: str = "index"):
        self.index = index
        self.size = size
        super().__init__(f"{what} {index} out of range [0, {size})")


class UnknownElementError(LudonomiaError, KeyError):
    """A name does not refer to an Element of the Project."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"unknown element '{self.name}'"


class UnknownNameSetError(LudonomiaError, KeyError):
    """A name does not refer to a NameSet of the Project."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"unknown nameset '{self.name}'"


class EnumerationTooLargeError(LudonomiaError):
    """The cross-product exceeds the configured export bound."""

    def __init__(self, total: int, limit: int, name_set: Optional[str] = None):
        self.total = total
        self.limit = limit
        self.name_set = name_set
        label = f"'{name_set}' " if name_set else ""
        super().__init__(
            f"nameset {label}expands to {total:,} names, "
            f"above the limit of {limit:,}"
        )


class EmptyEnumerationWarning(UserWarning):
    """
    Generation produced no names.

    Not a failure: either the template is empty or one of the referenced
    Elements has no Terms, which empties the whole cross-product.
    """

    def __init__(self, name_set: str, empty_elements=()):
        self.name_set = name_set
        self.empty_elements = tuple(empty_elements)
        if self.empty_elements:
            listed = ', '.join(self.empty_elements)
            message = f"nameset '{name_set}' is empty: no terms in {listed}"
        else:
            message = f"nameset '{name_set}' is empty: template has no elements"
        super().__init__(message)


__all__ = [
    'LudonomiaError',
    'DuplicateNameError',
    'InvalidProjectFormatError',
    'IndexOutOfRangeError',
    'UnknownElementError',
    'UnknownNameSetError',
    'EnumerationTooLargeError',
    'EmptyEnumerationWarning',
]
