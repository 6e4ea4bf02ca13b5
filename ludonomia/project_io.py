#!/usr/bin/env python3
"""
Project I/O
===========
Reads and writes Project JSON documents.

Loading always goes text -> JSON -> migrate -> Project -> validate, and
returns a brand-new Project; callers swap it in only once this returns.
Saving writes to a temporary file next to the target and renames it over
the target, so an interrupted save never leaves a half-written file.
"""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Union

from .migrate import parse_project_text
from .models import Project

logger = logging.getLogger(__name__)


def loads_project(text: str) -> Project:
    """
    Build a Project from JSON text of any supported schema version.

    Raises:
        InvalidProjectFormatError: malformed JSON, missing mappings,
            wrongly typed fields, or templates referencing unknown elements
    """
    return Project.from_dict(parse_project_text(text))


def load_project(path: Union[str, Path]) -> Project:
    """Read a project file. FileNotFoundError propagates unchanged."""
    path = Path(path)
    project = loads_project(path.read_text(encoding="utf-8"))
    logger.info(
        f"Loaded project '{project.project_name}' from {path} "
        f"({len(project.name_sets)} namesets, {len(project.elements)} elements)"
    )
    return project


def dumps_project(project: Project) -> str:
    return json.dumps(project.to_dict(), indent=2, ensure_ascii=False)


def save_project(project: Project, path: Union[str, Path]) -> Path:
    """Write a project file atomically; returns the path written."""
    path = Path(path)
    text = dumps_project(project) + "\n"

    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        # Keep the permissions of the file being replaced
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        if tmp.exists():
            tmp.unlink()
        raise

    logger.info(f"Saved project '{project.project_name}' to {path}")
    return path


__all__ = [
    'loads_project',
    'load_project',
    'dumps_project',
    'save_project',
]
