#!/usr/bin/env python3
"""
Project Data Model
==================
The persisted unit of Ludonomia is a Project:

- Elements: named slots, each owning an ordered vocabulary of Terms
- NameSets: named, ordered templates of Element references plus a
  delimiter and classification metadata (group, tags)

A Project is serialized as a single JSON document:

    {
      "project_name": "Ludonomia",
      "nameSets": {"Locomotion": {"template": [...], "delimiter": "_",
                                  "group": "Movement", "tags": [...]}},
      "elements": {"Action": {"terms": ["Footstep", "Jump"]}}
    }

`Project.from_dict()` expects a document that already went through
`ludonomia.migrate.migrate()`.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .errors import InvalidProjectFormatError

logger = logging.getLogger(__name__)


# =============================================================================
# Elements & Terms
# =============================================================================

@dataclass
class Element:
    """A named slot with an ordered, duplicate-free list of Terms"""
    name: str
    terms: List[str] = field(default_factory=list)

    def __post_init__(self):
        unique = _unique(self.terms)
        if len(unique) != len(self.terms):
            logger.warning(f"Element '{self.name}': dropped duplicate terms")
        self.terms = unique

    def has_term(self, term: str) -> bool:
        return term in self.terms

    def add_term(self, term: str) -> bool:
        """Append a term; no-op (returns False) if already present."""
        if term in self.terms:
            return False
        self.terms.append(term)
        return True

    def remove_term(self, term: str) -> bool:
        """Remove a term by exact match; returns whether it was present."""
        if term not in self.terms:
            return False
        self.terms.remove(term)
        return True

    @property
    def first_term(self) -> Optional[str]:
        return self.terms[0] if self.terms else None

    def to_dict(self) -> dict:
        return {'terms': list(self.terms)}


# =============================================================================
# NameSets
# =============================================================================

@dataclass
class NameSet:
    """A named template of Element references with delimiter and metadata"""
    name: str
    template: List[str] = field(default_factory=list)
    delimiter: str = "_"
    group: str = ""
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.tags = _unique(self.tags)

    def to_dict(self) -> dict:
        return {
            'template': list(self.template),
            'delimiter': self.delimiter,
            'group': self.group,
            'tags': list(self.tags),
        }


# =============================================================================
# Project
# =============================================================================

@dataclass
class Project:
    """Elements and NameSets, the whole persisted configuration"""
    project_name: str = "Untitled"
    elements: Dict[str, Element] = field(default_factory=dict)
    name_sets: Dict[str, NameSet] = field(default_factory=dict)

    def dangling_references(self) -> List[tuple]:
        """(nameset, element) pairs whose element does not exist."""
        missing = []
        for ns in self.name_sets.values():
            for ref in ns.template:
                if ref not in self.elements:
                    missing.append((ns.name, ref))
        return missing

    def validate(self):
        """Raise InvalidProjectFormatError if any template dangles."""
        missing = self.dangling_references()
        if missing:
            ns_name, ref = missing[0]
            extra = f" (and {len(missing) - 1} more)" if len(missing) > 1 else ""
            raise InvalidProjectFormatError(
                f"nameset '{ns_name}' references unknown element '{ref}'{extra}"
            )

    def to_dict(self) -> dict:
        return {
            'project_name': self.project_name,
            'nameSets': {name: ns.to_dict() for name, ns in self.name_sets.items()},
            'elements': {name: el.to_dict() for name, el in self.elements.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Project':
        """
        Build a Project from a migrated document.

        Raises:
            InvalidProjectFormatError: on wrongly typed fields or templates
                referencing unknown elements
        """
        elements = {}
        for name, raw in data['elements'].items():
            if not isinstance(raw, dict):
                raise InvalidProjectFormatError(f"element '{name}' is not an object")
            terms = raw.get('terms', [])
            _require_strings(terms, f"terms of element '{name}'")
            elements[name] = Element(name=name, terms=list(terms))

        name_sets = {}
        for name, raw in data['nameSets'].items():
            if not isinstance(raw, dict):
                raise InvalidProjectFormatError(f"nameset '{name}' is not an object")
            template = raw.get('template', [])
            tags = raw.get('tags', [])
            _require_strings(template, f"template of nameset '{name}'")
            _require_strings(tags, f"tags of nameset '{name}'")
            delimiter = raw.get('delimiter', "_")
            group = raw.get('group', "")
            if not isinstance(delimiter, str) or not isinstance(group, str):
                raise InvalidProjectFormatError(
                    f"delimiter and group of nameset '{name}' must be strings"
                )
            name_sets[name] = NameSet(
                name=name,
                template=list(template),
                delimiter=delimiter,
                group=group,
                tags=list(tags),
            )

        project_name = data.get('project_name', "Untitled")
        if not isinstance(project_name, str):
            raise InvalidProjectFormatError("project_name must be a string")

        project = cls(project_name=project_name, elements=elements, name_sets=name_sets)
        project.validate()
        return project


# =============================================================================
# Built-in default
# =============================================================================

DEFAULT_PROJECT = {
    "project_name": "Ludonomia",
    "nameSets": {
        "Locomotion": {
            "template": ["Sound Type", "CharacterID", "SurfaceType", "Action"],
            "delimiter": "_",
            "group": "Movement",
            "tags": ["Foley", "Core"],
        },
        "Weapons": {
            "template": ["Sound Type", "WeaponID", "FireMode", "Distance"],
            "delimiter": "_",
            "group": "Combat",
            "tags": ["Guns", "Explosives"],
        },
    },
    "elements": {
        "Sound Type": {"terms": ["SFX", "VO", "MX", "AMB"]},
        "SurfaceType": {"terms": ["Dirt", "Rock", "Metal", "Wood", "Water", "Grass"]},
        "CharacterID": {"terms": ["Hero", "EnemyA", "Boss1", "NPC"]},
        "Action": {"terms": ["Footstep", "Jump", "Land", "Slide", "Foley"]},
        "WeaponID": {"terms": ["Pistol", "Rifle", "Shotgun", "RocketLauncher"]},
        "FireMode": {"terms": ["Single", "Burst", "Auto", "Reload"]},
        "Distance": {"terms": ["Close", "Med", "Far"]},
    },
}


def default_project() -> Project:
    """A fresh copy of the built-in sample project."""
    return Project.from_dict(copy.deepcopy(DEFAULT_PROJECT))


# =============================================================================
# Helpers
# =============================================================================

def _unique(values: Iterable[str]) -> List[str]:
    """Drop repeated values, keeping the first occurrence."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _require_strings(values, what: str):
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise InvalidProjectFormatError(f"{what} must be a list of strings")


__all__ = [
    'Element',
    'NameSet',
    'Project',
    'DEFAULT_PROJECT',
    'default_project',
]
