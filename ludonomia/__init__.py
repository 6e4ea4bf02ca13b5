#!/usr/bin/env python3
"""
Ludonomia - Naming Template Engine
==================================

Build reusable filename templates ("NameSets") out of named slots
("Elements"), fill each slot from a controlled vocabulary ("Terms"),
preview a single name or enumerate every possible name and export the
list as CSV or plain text.

Quick Start
-----------
    from ludonomia import Ludonomia

    app = Ludonomia()                      # built-in sample project
    app.set_active("Weapons")
    app.add_term("Distance", "VeryFar")

    print(app.preview())                   # SFX_Pistol_Single_VeryFar
    print(app.total_count())               # 4 * 4 * 4 * 4 = 256
    app.export_csv("weapons.csv")

Modules
-------
    ludonomia.models     - Project / Element / NameSet data model
    ludonomia.migrate    - Upgrade old project documents
    ludonomia.elements   - Element registry and term edits
    ludonomia.namesets   - NameSet registry, filtering, template reordering
    ludonomia.generator  - Lazy cross-product of a NameSet
    ludonomia.export     - CSV / plain-text export
    ludonomia.project_io - Load and save project files

CLI Usage
---------
    python -m ludonomia namesets --group Combat
    python -m ludonomia count Weapons
    python -m ludonomia export Weapons -o weapons.csv --project my.json
"""

__version__ = "0.2.0"
__author__ = "Ludonomia"

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

# =============================================================================
# Submodule Imports
# =============================================================================

from .errors import (
    LudonomiaError,
    DuplicateNameError,
    InvalidProjectFormatError,
    IndexOutOfRangeError,
    UnknownElementError,
    UnknownNameSetError,
    EnumerationTooLargeError,
    EmptyEnumerationWarning,
)
from .models import Element, NameSet, Project, default_project
from .migrate import migrate, parse_project_text
from .elements import ElementRegistry
from .namesets import ALL_GROUPS, NameSetRegistry, TemplateSequencer, parse_tags
from .selection import SelectionState
from .preview import render_preview, render_template
from .generator import CombinatorialGenerator
from .export import export_csv, to_clipboard_text, to_csv_text, write_csv
from .project_io import load_project, loads_project, save_project, dumps_project
from .settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Ludonomia Main Class
# =============================================================================

class Ludonomia:
    """
    Main interface to a naming project.

    Owns the Project, the active NameSet and the preview selections, and
    keeps the three consistent across edits. This is the operation
    surface a UI drives: every method is synchronous and either
    completes fully or raises before changing anything.

    Attributes
    ----------
    project : Project
        The in-memory project (replaced wholesale by `load`)
    active : str or None
        Name of the active NameSet
    selections : SelectionState
        Preview selection per Element

    Examples
    --------
        >>> app = Ludonomia()
        >>> app.set_active("Locomotion")
        >>> app.reorder(0, 3)
        >>> app.template()
        ['CharacterID', 'SurfaceType', 'Action', 'Sound Type']
    """

    def __init__(self, project: Optional[Project] = None):
        """
        Parameters
        ----------
        project : Project, optional
            Project to edit. Defaults to the built-in sample project.
        """
        self.project: Project = project if project is not None else default_project()
        self.active: Optional[str] = None
        self.selections = SelectionState()
        self._adopt(self.project)

    # -------------------------------------------------------------------------
    # Registries
    # -------------------------------------------------------------------------

    @property
    def elements(self) -> ElementRegistry:
        return ElementRegistry(self.project.elements)

    @property
    def name_sets(self) -> NameSetRegistry:
        return NameSetRegistry(self.project.name_sets, self.elements)

    def _active_name(self, name_set: Optional[str]) -> str:
        name = name_set if name_set is not None else self.active
        if name is None:
            raise UnknownNameSetError("<no active nameset>")
        return name

    def name_set(self, name: Optional[str] = None) -> NameSet:
        return self.name_sets.get(self._active_name(name))

    def template(self, name: Optional[str] = None) -> List[str]:
        return list(self.name_set(name).template)

    # -------------------------------------------------------------------------
    # Load / Save
    # -------------------------------------------------------------------------

    def _adopt(self, project: Project):
        """Swap in a project and derive active nameset and selections."""
        selections = SelectionState()
        selections.reset(project)
        active = next(iter(project.name_sets), None)

        self.project = project
        self.active = active
        self.selections = selections

    def load(self, path: Union[str, Path]) -> Project:
        """
        Replace the project with one read from a file.

        On any error the current project, active nameset and selections
        stay exactly as they were.
        """
        project = load_project(path)
        self._adopt(project)
        return project

    def load_text(self, text: str) -> Project:
        project = loads_project(text)
        self._adopt(project)
        logger.info(f"Loaded project '{project.project_name}' from text")
        return project

    def load_dict(self, raw: dict) -> Project:
        project = Project.from_dict(migrate(raw))
        self._adopt(project)
        return project

    def save(self, path: Union[str, Path]) -> Path:
        return save_project(self.project, path)

    def to_json(self) -> str:
        return dumps_project(self.project)

    # -------------------------------------------------------------------------
    # Elements & Terms
    # -------------------------------------------------------------------------

    def create_element(self, name: str) -> Element:
        return self.elements.create(name)

    def add_term(self, element: str, term: str) -> bool:
        """
        Add a term to an element and select it for the preview.

        The term is selected even when it was already present.
        """
        term = (term or "").strip()
        added = self.elements.add_term(element, term)
        self.selections.on_term_added(element, term)
        return added

    def remove_term(self, element: str, term: str) -> bool:
        term = (term or "").strip()
        registry = self.elements
        removed = registry.remove_term(element, term)
        if removed:
            self.selections.on_term_removed(element, term, registry.terms(element))
        return removed

    # -------------------------------------------------------------------------
    # NameSets
    # -------------------------------------------------------------------------

    def create_name_set(self, name: str, clone_from_active: bool = True) -> NameSet:
        """Create a NameSet (copying the active layout) and make it active."""
        clone_from = self.active if clone_from_active else None
        name_set = self.name_sets.create(name, clone_from=clone_from)
        self.set_active(name_set.name)
        return name_set

    def set_active(self, name: str):
        name_set = self.name_sets.get(name)
        self.active = name_set.name
        self.selections.sync(self.project, name_set.template)

    def reorder(self, from_index: int, to_index: int, name_set: Optional[str] = None):
        self.name_sets.sequencer(self._active_name(name_set)).reorder(from_index, to_index)

    def add_to_template(self, element: str, index: Optional[int] = None,
                        name_set: Optional[str] = None):
        sequencer = self.name_sets.sequencer(self._active_name(name_set))
        if index is None:
            sequencer.append(element)
        else:
            sequencer.insert(index, element)
        self.selections.sync(self.project, [element])

    def remove_from_template(self, index: int, name_set: Optional[str] = None) -> str:
        return self.name_sets.sequencer(self._active_name(name_set)).remove_at(index)

    def filter_name_sets(self, group: str = ALL_GROUPS, tag: str = "") -> List[str]:
        return self.name_sets.filter(group, tag)

    def groups(self) -> List[str]:
        return self.name_sets.groups()

    def update_meta(self, field: str, value, name_set: Optional[str] = None) -> NameSet:
        return self.name_sets.update_meta(self._active_name(name_set), field, value)

    def set_delimiter(self, delimiter: str, name_set: Optional[str] = None) -> NameSet:
        return self.name_sets.set_delimiter(self._active_name(name_set), delimiter)

    # -------------------------------------------------------------------------
    # Preview
    # -------------------------------------------------------------------------

    def select(self, element: str, term: str):
        self.selections.select(self.project, element, term)

    def preview(self, name_set: Optional[str] = None) -> str:
        return render_preview(self.name_set(name_set), self.selections.as_dict())

    def template_preview(self, name_set: Optional[str] = None) -> str:
        return render_template(self.name_set(name_set))

    # -------------------------------------------------------------------------
    # Generation & Export
    # -------------------------------------------------------------------------

    def generator(self, name_set: Optional[str] = None) -> CombinatorialGenerator:
        return CombinatorialGenerator(self.name_set(name_set), self.project.elements)

    def total_count(self, name_set: Optional[str] = None) -> int:
        return self.generator(name_set).total_count

    def _export_generator(self, name_set: Optional[str], limit: Optional[int],
                          force: bool) -> CombinatorialGenerator:
        gen = self.generator(name_set)
        if limit is None and not force:
            gen.check_size(get_setting('export.max_rows', 250000))
        gen.warn_if_empty()
        return gen

    def export_csv(self, path: Union[str, Path],
                   name_set: Optional[str] = None,
                   header: Optional[bool] = None,
                   include_name: Optional[bool] = None,
                   limit: Optional[int] = None,
                   force: bool = False) -> int:
        """
        Export every name of a NameSet to a CSV file.

        Raises EnumerationTooLargeError before writing anything when the
        NameSet expands beyond `export.max_rows`, unless a row limit is
        given or force is set.
        """
        gen = self._export_generator(name_set, limit, force)
        if header is None:
            header = get_setting('export.csv_header', True)
        if include_name is None:
            include_name = get_setting('export.name_column', False)
        return export_csv(gen, path, header=header, include_name=include_name, limit=limit)

    def clipboard_text(self, name_set: Optional[str] = None,
                       limit: Optional[int] = None,
                       force: bool = False,
                       unique: bool = False) -> str:
        gen = self._export_generator(name_set, limit, force)
        return to_clipboard_text(gen, limit=limit, unique=unique)

    def summary(self) -> Dict[str, object]:
        return {
            'project_name': self.project.project_name,
            'active': self.active,
            'name_sets': len(self.project.name_sets),
            'elements': len(self.project.elements),
        }


__all__ = [
    '__version__',
    'Ludonomia',
    # Model
    'Project',
    'Element',
    'NameSet',
    'default_project',
    # Components
    'migrate',
    'parse_project_text',
    'ElementRegistry',
    'NameSetRegistry',
    'TemplateSequencer',
    'ALL_GROUPS',
    'parse_tags',
    'SelectionState',
    'render_preview',
    'render_template',
    'CombinatorialGenerator',
    'write_csv',
    'export_csv',
    'to_csv_text',
    'to_clipboard_text',
    'load_project',
    'loads_project',
    'save_project',
    'dumps_project',
    # Errors
    'LudonomiaError',
    'DuplicateNameError',
    'InvalidProjectFormatError',
    'IndexOutOfRangeError',
    'UnknownElementError',
    'UnknownNameSetError',
    'EnumerationTooLargeError',
    'EmptyEnumerationWarning',
]
