#!/usr/bin/env python3
"""
Schema Migration
================
Normalizes project documents written by any earlier version of the tool
into the current schema.

Historical key names:
    presets      -> nameSets
    categories   -> elements
    wildcards    -> elements     (intermediate version)
    projectName  -> project_name

Renames are applied to the keys of the parsed top-level object only.
Term values, template entries and NameSet/Element names that happen to
read "presets" or "categories" are user data and are left alone.

Usage:
    from ludonomia.migrate import migrate, parse_project_text

    doc = migrate(json.loads(text))
    doc = parse_project_text(text)
"""

import copy
import json
import logging
from typing import Any

from .errors import InvalidProjectFormatError
from .settings import get_setting

logger = logging.getLogger(__name__)

# legacy key -> current key, applied in this order
KEY_RENAMES = [
    ('presets', 'nameSets'),
    ('categories', 'elements'),
    ('wildcards', 'elements'),
    ('projectName', 'project_name'),
]

REQUIRED_KEYS = ('nameSets', 'elements')


def needs_migration(raw: Any) -> bool:
    """True if migrating `raw` would change it."""
    try:
        return migrate(raw) != raw
    except InvalidProjectFormatError:
        return True


def migrate(raw: Any) -> dict:
    """
    Bring a raw project document up to the current schema.

    Pure: the input is never modified. Migrating a current document
    returns an equal document.

    Args:
        raw: Parsed JSON value of unknown historical shape

    Returns:
        A new dict in the current schema

    Raises:
        InvalidProjectFormatError: if the document is not an object or
            lacks the nameSets/elements mappings after renaming
    """
    if not isinstance(raw, dict):
        raise InvalidProjectFormatError(
            f"expected a JSON object at top level, got {type(raw).__name__}"
        )

    doc = copy.deepcopy(raw)
    _rename_keys(doc)

    for key in REQUIRED_KEYS:
        if key not in doc:
            raise InvalidProjectFormatError(f"missing '{key}'")
        if not isinstance(doc[key], dict):
            raise InvalidProjectFormatError(f"'{key}' must be an object")

    if 'project_name' not in doc:
        doc['project_name'] = get_setting('project.default_name', "Untitled")

    default_delimiter = get_setting('project.default_delimiter', "_")
    for name, ns in doc['nameSets'].items():
        if not isinstance(ns, dict):
            raise InvalidProjectFormatError(f"nameset '{name}' is not an object")
        ns.setdefault('template', [])
        ns.setdefault('delimiter', default_delimiter)
        ns.setdefault('group', "")
        ns.setdefault('tags', [])

    for name, el in doc['elements'].items():
        if not isinstance(el, dict):
            raise InvalidProjectFormatError(f"element '{name}' is not an object")
        el.setdefault('terms', [])

    return doc


def parse_project_text(text: str) -> dict:
    """Parse JSON text and migrate it; syntax errors become format errors."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidProjectFormatError(f"not valid JSON ({e})") from e
    return migrate(raw)


def _rename_keys(doc: dict):
    for old, new in KEY_RENAMES:
        if old not in doc:
            continue
        value = doc.pop(old)
        if new in doc:
            logger.warning(f"Both '{old}' and '{new}' present; keeping '{new}'")
            continue
        logger.debug(f"Renamed legacy key '{old}' to '{new}'")
        doc[new] = value


__all__ = [
    'migrate',
    'parse_project_text',
    'needs_migration',
    'KEY_RENAMES',
]
