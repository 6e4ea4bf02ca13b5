#!/usr/bin/env python3
"""
Element Registry
================
Creates Elements and edits their Term vocabularies.

Elements are identified by name (case-sensitive) and are never deleted
or renamed; only their Terms change. The registry works directly on the
`elements` mapping of a Project, so edits are visible to every other
component holding the same Project.
"""

import logging
from typing import Dict, Iterator, List

from .errors import DuplicateNameError, UnknownElementError
from .models import Element

logger = logging.getLogger(__name__)


class ElementRegistry:
    """
    Elements of one Project, by name.

    Usage:
        registry = ElementRegistry(project.elements)
        registry.create("Distance")
        registry.add_term("Distance", "Close")
        registry.remove_term("Distance", "Close")
    """

    def __init__(self, elements: Dict[str, Element]):
        self._elements = elements

    def __contains__(self, name: str) -> bool:
        return name in self._elements

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def names(self) -> List[str]:
        return list(self._elements)

    def get(self, name: str) -> Element:
        try:
            return self._elements[name]
        except KeyError:
            raise UnknownElementError(name) from None

    def terms(self, name: str) -> List[str]:
        return list(self.get(name).terms)

    def create(self, name: str) -> Element:
        """
        Create an empty Element.

        Raises:
            ValueError: if the name is blank
            DuplicateNameError: if an Element with that name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("element name cannot be empty")
        if name in self._elements:
            raise DuplicateNameError("element", name)

        element = Element(name=name)
        self._elements[name] = element
        logger.debug(f"Created element '{name}'")
        return element

    def add_term(self, name: str, term: str) -> bool:
        """
        Append a term to an Element.

        Returns:
            True if added, False if the term was already present
        """
        element = self.get(name)
        term = (term or "").strip()
        if not term:
            raise ValueError("term cannot be empty")
        added = element.add_term(term)
        if added:
            logger.debug(f"Added term '{term}' to '{name}'")
        return added

    def remove_term(self, name: str, term: str) -> bool:
        """Remove a term (stripped like add_term); returns whether it was present."""
        term = (term or "").strip()
        removed = self.get(name).remove_term(term)
        if removed:
            logger.debug(f"Removed term '{term}' from '{name}'")
        return removed

    def require(self, names):
        """Raise UnknownElementError for the first name not registered."""
        for name in names:
            if name not in self._elements:
                raise UnknownElementError(name)


__all__ = ['ElementRegistry']
