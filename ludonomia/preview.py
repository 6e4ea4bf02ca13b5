#!/usr/bin/env python3
"""Single-name preview of a NameSet."""

from typing import Mapping, Optional

from .models import NameSet


def placeholder(element: str) -> str:
    return f"[{element}]"


def render_preview(name_set: NameSet, selections: Optional[Mapping[str, str]] = None) -> str:
    """
    Render one filename from the current selections.

    Slots without a selection show as "[ElementName]". Never raises.
    """
    selections = selections or {}
    parts = []
    for element in name_set.template:
        value = selections.get(element)
        parts.append(value if value else placeholder(element))
    return name_set.delimiter.join(parts)


def render_template(name_set: NameSet) -> str:
    """The all-placeholder form, e.g. "[Sound Type]_[Action]"."""
    return render_preview(name_set, {})


__all__ = ['render_preview', 'render_template', 'placeholder']
