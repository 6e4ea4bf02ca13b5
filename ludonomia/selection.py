#!/usr/bin/env python3
"""
Selection State
===============
The Term currently chosen for each Element, used for the single-name
preview. Transient: never persisted with the Project.
"""

from typing import Dict, Iterable, Optional

from .errors import UnknownElementError
from .models import Project


class SelectionState:
    """Chosen Term per Element name; an absent key means "unset"."""

    def __init__(self, selections: Optional[Dict[str, str]] = None):
        self._selections: Dict[str, str] = dict(selections or {})

    def get(self, element: str) -> Optional[str]:
        return self._selections.get(element)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._selections)

    def __contains__(self, element: str) -> bool:
        return element in self._selections

    def reset(self, project: Project):
        """Select the first Term of every Element."""
        self._selections = {
            name: el.first_term
            for name, el in project.elements.items()
            if el.first_term is not None
        }

    def sync(self, project: Project, template: Iterable[str]):
        """
        Make every Element referenced by template hold a valid selection.

        A selection that is still one of the Element's terms is kept,
        otherwise it falls back to the first term, or to unset.
        """
        for name in template:
            element = project.elements.get(name)
            if element is None:
                continue
            current = self._selections.get(name)
            if current is not None and element.has_term(current):
                continue
            self._set_or_clear(name, element.first_term)

    def select(self, project: Project, element: str, term: str):
        el = project.elements.get(element)
        if el is None:
            raise UnknownElementError(element)
        if not el.has_term(term):
            raise ValueError(f"'{term}' is not a term of '{element}'")
        self._selections[element] = term

    def on_term_added(self, element: str, term: str):
        self._selections[element] = term

    def on_term_removed(self, element: str, term: str, remaining: Iterable[str]):
        if self._selections.get(element) != term:
            return
        remaining = list(remaining)
        self._set_or_clear(element, remaining[0] if remaining else None)

    def _set_or_clear(self, element: str, term: Optional[str]):
        if term is None:
            self._selections.pop(element, None)
        else:
            self._selections[element] = term


__all__ = ['SelectionState']
