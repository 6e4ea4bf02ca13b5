#!/usr/bin/env python3
"""
NameSet Registry & Template Sequencer
=====================================
NameSets are named templates: an ordered list of Element references,
a delimiter, and classification metadata used by the project browser
(one group, any number of tags).

- NameSetRegistry: create/clone, filter by group and tag, metadata edits
- TemplateSequencer: ordered edits of one NameSet's template

Template edits are validated against the Element Registry; a template
can never reference an Element that does not exist. The same Element
may appear more than once in a template.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .elements import ElementRegistry
from .errors import DuplicateNameError, IndexOutOfRangeError, UnknownNameSetError
from .models import NameSet
from .settings import get_setting

logger = logging.getLogger(__name__)

ALL_GROUPS = "All"
META_FIELDS = ('group', 'tags')


def parse_tags(value: Union[str, Iterable[str]]) -> List[str]:
    """
    Parse tag input into an ordered list without blanks or repeats.

    Accepts the comma-separated text of a tag field ("ui, core") or an
    iterable of tags.
    """
    if isinstance(value, str):
        value = value.split(',')
    tags = []
    for tag in value:
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


# =============================================================================
# Template Sequencer
# =============================================================================

class TemplateSequencer:
    """
    Ordered edits on one NameSet's template.

    Reordering never changes which Elements are referenced (or how often),
    only their order. Invalid indices raise IndexOutOfRangeError and
    leave the template untouched.
    """

    def __init__(self, name_set: NameSet, elements: ElementRegistry):
        self.name_set = name_set
        self._elements = elements

    @property
    def template(self) -> List[str]:
        return self.name_set.template

    def __len__(self) -> int:
        return len(self.name_set.template)

    def _check_index(self, index: int, size: int, what: str):
        if not 0 <= index < size:
            raise IndexOutOfRangeError(index, size, what)

    def reorder(self, from_index: int, to_index: int):
        """Move the reference at from_index so it ends up at to_index."""
        size = len(self.template)
        self._check_index(from_index, size, "from_index")
        self._check_index(to_index, size, "to_index")
        if from_index == to_index:
            return

        item = self.template.pop(from_index)
        self.template.insert(to_index, item)
        logger.debug(
            f"Reordered '{self.name_set.name}': {item} {from_index} -> {to_index}"
        )

    def append(self, element: str):
        self._elements.require([element])
        self.template.append(element)

    def insert(self, index: int, element: str):
        """Insert a reference before index (index == len appends)."""
        self._elements.require([element])
        if not 0 <= index <= len(self.template):
            raise IndexOutOfRangeError(index, len(self.template) + 1)
        self.template.insert(index, element)

    def remove_at(self, index: int) -> str:
        self._check_index(index, len(self.template), "index")
        return self.template.pop(index)

    def replace(self, template: Iterable[str]):
        """Swap in a whole new template, validated before anything changes."""
        template = list(template)
        self._elements.require(template)
        self.name_set.template = template


# =============================================================================
# NameSet Registry
# =============================================================================

class NameSetRegistry:
    """
    NameSets of one Project, by name, in insertion order.

    Usage:
        registry = NameSetRegistry(project.name_sets, ElementRegistry(project.elements))
        registry.create("Footsteps", clone_from="Locomotion")
        registry.update_meta("Footsteps", "tags", "foley, core")
        registry.filter("Movement", "fol")   # -> ["Locomotion", "Footsteps"]
    """

    def __init__(self, name_sets: Dict[str, NameSet], elements: ElementRegistry):
        self._name_sets = name_sets
        self._elements = elements

    def __contains__(self, name: str) -> bool:
        return name in self._name_sets

    def __iter__(self) -> Iterator[NameSet]:
        return iter(self._name_sets.values())

    def __len__(self) -> int:
        return len(self._name_sets)

    def names(self) -> List[str]:
        return list(self._name_sets)

    def get(self, name: str) -> NameSet:
        try:
            return self._name_sets[name]
        except KeyError:
            raise UnknownNameSetError(name) from None

    def sequencer(self, name: str) -> TemplateSequencer:
        return TemplateSequencer(self.get(name), self._elements)

    def create(self, name: str, clone_from: Optional[str] = None) -> NameSet:
        """
        Create a NameSet, optionally copying another one's layout.

        Cloning copies the template (as an independent list) and the
        delimiter. Group and tags always start blank.

        Raises:
            ValueError: blank name
            DuplicateNameError: name already taken
            UnknownNameSetError: clone_from does not exist
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("nameset name cannot be empty")
        if name in self._name_sets:
            raise DuplicateNameError("nameset", name)

        if clone_from is not None:
            source = self.get(clone_from)
            template = list(source.template)
            delimiter = source.delimiter
        else:
            template = []
            delimiter = get_setting('project.default_delimiter', "_")

        name_set = NameSet(name=name, template=template, delimiter=delimiter)
        self._name_sets[name] = name_set
        logger.debug(f"Created nameset '{name}' (clone of {clone_from!r})")
        return name_set

    def filter(self, group: str = ALL_GROUPS, tag: str = "") -> List[str]:
        """
        Names of NameSets matching a group and a tag filter.

        A NameSet matches when group is "All" or equals its group exactly,
        and the tag filter is blank or is a case-insensitive substring of
        at least one of its tags.
        """
        tag_needle = (tag or "").lower()
        match_all_tags = not (tag or "").strip()

        result = []
        for ns in self._name_sets.values():
            if group != ALL_GROUPS and ns.group != group:
                continue
            if not match_all_tags and not any(tag_needle in t.lower() for t in ns.tags):
                continue
            result.append(ns.name)
        return result

    def groups(self) -> List[str]:
        """Distinct non-empty groups, in first-seen order."""
        groups = []
        for ns in self._name_sets.values():
            if ns.group and ns.group not in groups:
                groups.append(ns.group)
        return groups

    def update_meta(self, name: str, field: str, value) -> NameSet:
        """Replace the group or the tags of a NameSet wholesale."""
        if field not in META_FIELDS:
            raise ValueError(f"unknown metadata field '{field}' (expected group or tags)")
        name_set = self.get(name)

        if field == 'group':
            if not isinstance(value, str):
                raise ValueError("group must be a string")
            name_set.group = value
        else:
            name_set.tags = parse_tags(value)

        logger.debug(f"Updated {field} of '{name}'")
        return name_set

    def set_delimiter(self, name: str, delimiter: str) -> NameSet:
        if not isinstance(delimiter, str):
            raise ValueError("delimiter must be a string")
        name_set = self.get(name)
        name_set.delimiter = delimiter
        return name_set


__all__ = [
    'ALL_GROUPS',
    'NameSetRegistry',
    'TemplateSequencer',
    'parse_tags',
]
