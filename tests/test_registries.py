"""
Tests for Element & NameSet Registries
======================================
Tests for the data model (ludonomia/models.py), element and term edits
(ludonomia/elements.py) and namesets, filtering and template
reordering (ludonomia/namesets.py).
"""

import itertools
import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ludonomia.elements import ElementRegistry
from ludonomia.errors import (
    DuplicateNameError,
    IndexOutOfRangeError,
    InvalidProjectFormatError,
    UnknownElementError,
    UnknownNameSetError,
)
from ludonomia.models import Element, NameSet, Project, default_project
from ludonomia.namesets import NameSetRegistry, TemplateSequencer, parse_tags


@pytest.fixture
def project():
    return default_project()


@pytest.fixture
def elements(project):
    return ElementRegistry(project.elements)


@pytest.fixture
def name_sets(project, elements):
    return NameSetRegistry(project.name_sets, elements)


class TestModel:
    """Tests for Project/Element/NameSet dataclasses."""

    def test_default_project(self, project):
        """Test the built-in sample project."""
        assert project.project_name == "Ludonomia"
        assert list(project.name_sets) == ["Locomotion", "Weapons"]
        assert project.elements["Distance"].terms == ["Close", "Med", "Far"]

    def test_default_project_is_fresh(self):
        """Test that each call returns an independent copy."""
        a = default_project()
        a.elements["Distance"].add_term("VeryFar")
        assert "VeryFar" not in default_project().elements["Distance"].terms

    def test_element_dedupes_terms(self):
        """Test that duplicate terms collapse keeping first occurrence."""
        el = Element("E", ["a", "b", "a", "c", "b"])
        assert el.terms == ["a", "b", "c"]

    def test_to_dict_from_dict(self, project):
        """Test that a project survives dict conversion."""
        clone = Project.from_dict(project.to_dict())
        assert clone == project

    def test_dangling_reference_rejected(self):
        """Test that templates referencing unknown elements fail validation."""
        data = {
            "project_name": "P",
            "nameSets": {"A": {"template": ["Ghost"], "delimiter": "_", "group": "", "tags": []}},
            "elements": {},
        }
        with pytest.raises(InvalidProjectFormatError) as exc:
            Project.from_dict(data)
        assert "Ghost" in str(exc.value)

    def test_wrong_types_rejected(self):
        """Test that badly typed fields fail with a format error."""
        data = {
            "project_name": "P",
            "nameSets": {},
            "elements": {"E": {"terms": "abc"}},
        }
        with pytest.raises(InvalidProjectFormatError):
            Project.from_dict(data)


class TestElementRegistry:
    """Tests for ElementRegistry."""

    def test_create(self, elements):
        """Test that new elements start empty."""
        el = elements.create("Layer")
        assert el.terms == []
        assert "Layer" in elements

    def test_create_strips_name(self, elements):
        """Test that surrounding whitespace is removed."""
        assert elements.create("  Layer ").name == "Layer"

    def test_create_duplicate(self, elements, project):
        """Test duplicate names are rejected without change."""
        before = project.elements["Action"].terms[:]
        with pytest.raises(DuplicateNameError):
            elements.create("Action")
        assert project.elements["Action"].terms == before

    def test_create_blank(self, elements):
        """Test that blank names are rejected."""
        with pytest.raises(ValueError):
            elements.create("   ")

    def test_names_case_sensitive(self, elements):
        """Test that element names are case-sensitive keys."""
        elements.create("action")
        assert "action" in elements and "Action" in elements

    def test_add_term_appends(self, elements):
        """Test that terms are appended at the end."""
        assert elements.add_term("Distance", "VeryFar") is True
        assert elements.terms("Distance") == ["Close", "Med", "Far", "VeryFar"]

    def test_add_term_duplicate_noop(self, elements):
        """Test that adding an existing term changes nothing."""
        assert elements.add_term("Distance", "Med") is False
        assert elements.terms("Distance") == ["Close", "Med", "Far"]

    def test_add_term_case_sensitive(self, elements):
        """Test that 'med' and 'Med' are distinct terms."""
        assert elements.add_term("Distance", "med") is True

    def test_add_term_unknown_element(self, elements):
        """Test adding to an unknown element."""
        with pytest.raises(UnknownElementError):
            elements.add_term("Nope", "x")

    def test_remove_term(self, elements):
        """Test exact-match removal."""
        assert elements.remove_term("Distance", "Med") is True
        assert elements.terms("Distance") == ["Close", "Far"]
        assert elements.remove_term("Distance", "Med") is False

    def test_remove_term_strips(self, elements):
        """Test removal strips the term the same way add_term does."""
        elements.add_term("Distance", " VeryFar ")
        assert elements.remove_term("Distance", " VeryFar ") is True
        assert elements.terms("Distance") == ["Close", "Med", "Far"]


class TestNameSetCreate:
    """Tests for NameSetRegistry.create()."""

    def test_create_blank(self, name_sets):
        """Test a fresh nameset has an empty template and default delimiter."""
        ns = name_sets.create("Empty")
        assert ns.template == []
        assert ns.delimiter == "_"
        assert name_sets.names()[-1] == "Empty"

    def test_clone_copies_template_and_delimiter(self, name_sets, project):
        """Test cloning copies layout but not metadata."""
        project.name_sets["Weapons"].delimiter = "-"
        ns = name_sets.create("Guns2", clone_from="Weapons")
        assert ns.template == project.name_sets["Weapons"].template
        assert ns.delimiter == "-"
        assert ns.group == ""
        assert ns.tags == []

    def test_clone_is_independent(self, name_sets, project):
        """Test that the cloned template is a separate list."""
        ns = name_sets.create("Copy", clone_from="Locomotion")
        ns.template.pop()
        assert len(project.name_sets["Locomotion"].template) == 4

    def test_duplicate_name(self, name_sets):
        """Test that duplicate nameset names are rejected."""
        with pytest.raises(DuplicateNameError):
            name_sets.create("Weapons")

    def test_unknown_clone_source(self, name_sets):
        """Test cloning from a missing nameset."""
        with pytest.raises(UnknownNameSetError):
            name_sets.create("X", clone_from="Nope")
        assert "X" not in name_sets


class TestReorder:
    """Tests for TemplateSequencer.reorder()."""

    def test_move_forward(self, name_sets):
        """Test moving the first slot to the end."""
        seq = name_sets.sequencer("Locomotion")
        seq.reorder(0, 3)
        assert seq.template == ["CharacterID", "SurfaceType", "Action", "Sound Type"]

    def test_move_backward(self, name_sets):
        """Test moving the last slot to the front."""
        seq = name_sets.sequencer("Locomotion")
        seq.reorder(3, 0)
        assert seq.template == ["Action", "Sound Type", "CharacterID", "SurfaceType"]

    def test_same_index_noop(self, name_sets):
        """Test that from == to changes nothing."""
        seq = name_sets.sequencer("Locomotion")
        before = seq.template[:]
        seq.reorder(2, 2)
        assert seq.template == before

    @pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 4), (4, 0), (0, -1), (10, 10)])
    def test_out_of_range(self, name_sets, from_index, to_index):
        """Test invalid indices raise and leave the template alone."""
        seq = name_sets.sequencer("Locomotion")
        before = seq.template[:]
        with pytest.raises(IndexOutOfRangeError):
            seq.reorder(from_index, to_index)
        assert seq.template == before

    def test_index_error_subclass(self, name_sets):
        """Test that callers can catch it as IndexError."""
        with pytest.raises(IndexError):
            name_sets.sequencer("Weapons").reorder(0, 99)

    def test_preserves_multiset_for_all_pairs(self, project, elements):
        """Test sorted(before) == sorted(after) for every valid pair."""
        template = ["Action", "Distance", "Action", "FireMode", "Sound Type"]
        for i, j in itertools.product(range(len(template)), repeat=2):
            ns = NameSet("T", template=template[:])
            TemplateSequencer(ns, elements).reorder(i, j)
            assert sorted(ns.template) == sorted(template)
            assert ns.template[j] == template[i]


class TestTemplateEdits:
    """Tests for appending, inserting and removing template slots."""

    def test_append(self, name_sets):
        """Test appending a known element."""
        seq = name_sets.sequencer("Weapons")
        seq.append("Action")
        assert seq.template[-1] == "Action"

    def test_append_duplicate_reference(self, name_sets):
        """Test that the same element may appear twice."""
        seq = name_sets.sequencer("Weapons")
        seq.append("Sound Type")
        assert seq.template.count("Sound Type") == 2

    def test_append_unknown_rejected(self, name_sets):
        """Test that dangling references are refused."""
        seq = name_sets.sequencer("Weapons")
        with pytest.raises(UnknownElementError):
            seq.append("Ghost")
        assert "Ghost" not in seq.template

    def test_insert_and_remove(self, name_sets):
        """Test inserting at a position and removing it again."""
        seq = name_sets.sequencer("Weapons")
        seq.insert(1, "Action")
        assert seq.template[1] == "Action"
        assert seq.remove_at(1) == "Action"
        assert "Action" not in seq.template

    def test_replace_validates_first(self, name_sets):
        """Test that replace() leaves the template alone on error."""
        seq = name_sets.sequencer("Weapons")
        before = seq.template[:]
        with pytest.raises(UnknownElementError):
            seq.replace(["Action", "Ghost"])
        assert seq.template == before


class TestFilter:
    """Tests for NameSetRegistry.filter()."""

    @pytest.fixture
    def registry(self, project, elements):
        registry = NameSetRegistry(project.name_sets, elements)
        registry.create("Shotgun Pack", clone_from="Weapons")
        registry.update_meta("Shotgun Pack", "group", "Combat")
        registry.update_meta("Shotgun Pack", "tags", "shells, Foley")
        registry.create("Misc")
        return registry

    def test_all_and_blank(self, registry):
        """Test that filter('All', '') returns every nameset in order."""
        assert registry.filter("All", "") == ["Locomotion", "Weapons", "Shotgun Pack", "Misc"]

    def test_group_and_tag(self, registry):
        """Test filter('Combat', 'gun') matches group and tag substring."""
        assert registry.filter("Combat", "gun") == ["Weapons"]

    def test_group_only(self, registry):
        """Test exact group match."""
        assert registry.filter("Combat", "") == ["Weapons", "Shotgun Pack"]
        assert registry.filter("combat", "") == []

    def test_tag_case_insensitive(self, registry):
        """Test that tag matching ignores case and ORs across tags."""
        assert registry.filter("All", "FOLEY") == ["Locomotion", "Shotgun Pack"]

    def test_whitespace_tag_matches_all(self, registry):
        """Test a whitespace-only tag filter counts as blank."""
        assert len(registry.filter("All", "   ")) == 4

    def test_groups(self, registry):
        """Test distinct groups in first-seen order."""
        assert registry.groups() == ["Movement", "Combat"]


class TestMeta:
    """Tests for update_meta() and parse_tags()."""

    def test_parse_tags(self):
        """Test splitting, trimming and dropping blanks."""
        assert parse_tags(" ui, core ,, ui ,") == ["ui", "core"]
        assert parse_tags("") == []
        assert parse_tags(["a", " b ", ""]) == ["a", "b"]

    def test_update_group(self, name_sets):
        """Test replacing the group."""
        ns = name_sets.update_meta("Locomotion", "group", "Foley")
        assert ns.group == "Foley"

    def test_update_tags_replaces(self, name_sets):
        """Test that tags are replaced wholesale."""
        ns = name_sets.update_meta("Locomotion", "tags", "a, b")
        assert ns.tags == ["a", "b"]

    def test_unknown_field(self, name_sets, project):
        """Test that only group and tags can be updated."""
        with pytest.raises(ValueError):
            name_sets.update_meta("Locomotion", "delimiter", "-")
        assert project.name_sets["Locomotion"].delimiter == "_"

    def test_set_delimiter(self, name_sets):
        """Test changing the delimiter."""
        assert name_sets.set_delimiter("Weapons", "-").delimiter == "-"
