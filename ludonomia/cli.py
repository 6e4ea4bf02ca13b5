#!/usr/bin/env python3
"""
Ludonomia CLI
=============
Command-line interface for browsing and editing naming projects and for
generating filename lists.

Usage:
    ludonomia init project.json
    ludonomia namesets --group Combat --tag gun -p project.json
    ludonomia preview Weapons --select Distance=Far
    ludonomia count Weapons
    ludonomia export Weapons -o weapons.csv --name-column
    ludonomia add-term Distance VeryFar -p project.json

Read-only commands fall back to the built-in sample project when no
--project is given; editing commands require one and save it back.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import Ludonomia, __version__
from .errors import LudonomiaError
from .migrate import needs_migration
from .models import default_project
from .project_io import save_project
from .settings import get_setting

logger = logging.getLogger(__name__)

EDIT_COMMANDS = {
    'add-element', 'add-term', 'remove-term', 'add-nameset',
    'reorder', 'meta', 'delimiter', 'template',
}

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, markup=False, **kwargs)

    def raw(self, text: str):
        """Write text unconditionally and unstyled (for piping)."""
        sys.stdout.write(text)
        if text and not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False)

    def success(self, msg: str):
        if not self.quiet:
            self.console.print(f"OK: {msg}", markup=False)

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return
        table = Table(title=title, show_lines=False)
        for i, h in enumerate(headers):
            table.add_column(str(h), no_wrap=(i == 0))
        for row in rows:
            # Text cells are never parsed as markup
            table.add_row(*(Text(str(c)) for c in row))
        self.console.print(table)


def setup_logging(verbose: bool = False, quiet: bool = False):
    level_name = get_setting('logging.level', 'WARNING')
    level = getattr(logging, str(level_name).upper(), logging.WARNING)
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format=get_setting('logging.format', "%(levelname)s %(name)s: %(message)s"),
    )


def parse_selections(pairs: Optional[List[str]]) -> List[tuple]:
    """Split "Element=Term" arguments."""
    result = []
    for pair in pairs or []:
        if '=' not in pair:
            raise ValueError(f"expected Element=Term, got '{pair}'")
        element, term = pair.split('=', 1)
        result.append((element.strip(), term.strip()))
    return result


def open_app(args) -> Ludonomia:
    app = Ludonomia()
    if args.project:
        app.load(args.project)
    return app


# =============================================================================
# Commands
# =============================================================================

def cmd_init(args, out: Output):
    """Write the built-in sample project to a file."""
    path = Path(args.path)
    if path.exists() and not args.force:
        out.error(f"{path} already exists (use --force to overwrite)")
        return 1
    save_project(default_project(), path)
    out.success(f"Wrote sample project to {path}")
    return 0


def cmd_show(args, out: Output):
    """Show project summary."""
    app = open_app(args)
    info = app.summary()
    out.print(f"Project:  {info['project_name']}")
    out.print(f"NameSets: {info['name_sets']}")
    out.print(f"Elements: {info['elements']}")
    if app.groups():
        out.print(f"Groups:   {', '.join(app.groups())}")
    return 0


def cmd_elements(args, out: Output):
    """List elements and their terms."""
    app = open_app(args)
    rows = [[el.name, len(el.terms), ', '.join(el.terms) or '-'] for el in app.elements]
    out.table(['Element', '#', 'Terms'], rows)
    return 0


def cmd_namesets(args, out: Output):
    """List (filtered) namesets."""
    app = open_app(args)
    names = app.filter_name_sets(args.group, args.tag or "")
    if not names:
        out.print("No namesets match.")
        return 0

    rows = []
    for name in names:
        ns = app.name_set(name)
        rows.append([
            name,
            ns.group or '-',
            ', '.join(ns.tags) or '-',
            app.template_preview(name),
            f"{app.total_count(name):,}",
        ])
    out.table(['NameSet', 'Group', 'Tags', 'Template', 'Names'], rows)
    return 0


def cmd_preview(args, out: Output):
    """Render one name from selections."""
    app = open_app(args)
    app.set_active(args.nameset)
    for element, term in parse_selections(args.select):
        app.select(element, term)
    out.raw(app.preview())
    return 0


def cmd_count(args, out: Output):
    """Print how many names a nameset expands to."""
    app = open_app(args)
    gen = app.generator(args.nameset)
    out.raw(str(gen.total_count))
    if gen.is_empty and gen.empty_elements:
        out.error(f"no terms in: {', '.join(gen.empty_elements)}")
    return 0


def cmd_generate(args, out: Output):
    """Print every name, one per line."""
    app = open_app(args)
    text = app.clipboard_text(args.nameset, limit=args.limit, force=args.force,
                              unique=args.unique)
    if text:
        out.raw(text)
    return 0


def cmd_export(args, out: Output):
    """Export every name to CSV."""
    app = open_app(args)
    count = app.export_csv(
        args.output,
        name_set=args.nameset,
        header=False if args.no_header else None,
        include_name=True if args.name_column else None,
        limit=args.limit,
        force=args.force,
    )
    out.success(f"Exported {count:,} rows to {args.output}")
    return 0


def cmd_add_element(args, out: Output):
    app = open_app(args)
    app.create_element(args.name)
    app.save(args.project)
    out.success(f"Created element '{args.name.strip()}'")
    return 0


def cmd_add_term(args, out: Output):
    app = open_app(args)
    if app.add_term(args.element, args.term):
        app.save(args.project)
        out.success(f"Added '{args.term.strip()}' to '{args.element}'")
    else:
        out.print(f"'{args.term.strip()}' already in '{args.element}'")
    return 0


def cmd_remove_term(args, out: Output):
    app = open_app(args)
    if not app.remove_term(args.element, args.term):
        out.error(f"'{args.term}' is not a term of '{args.element}'")
        return 1
    app.save(args.project)
    out.success(f"Removed '{args.term}' from '{args.element}'")
    return 0


def cmd_add_nameset(args, out: Output):
    app = open_app(args)
    if args.clone_from:
        app.set_active(args.clone_from)
    app.create_name_set(args.name, clone_from_active=bool(args.clone_from))
    app.save(args.project)
    out.success(f"Created nameset '{app.active}'")
    return 0


def cmd_reorder(args, out: Output):
    app = open_app(args)
    app.reorder(args.from_index, args.to_index, name_set=args.nameset)
    app.save(args.project)
    out.print(app.template_preview(args.nameset))
    return 0


def cmd_template(args, out: Output):
    """Append or remove template slots."""
    app = open_app(args)
    if args.append:
        for element in args.append:
            app.add_to_template(element, name_set=args.nameset)
    if args.remove is not None:
        app.remove_from_template(args.remove, name_set=args.nameset)
    app.save(args.project)
    out.print(app.template_preview(args.nameset))
    return 0


def cmd_meta(args, out: Output):
    app = open_app(args)
    if args.group is None and args.tags is None:
        out.error("nothing to update (give --group and/or --tags)")
        return 1
    if args.group is not None:
        app.update_meta('group', args.group, name_set=args.nameset)
    if args.tags is not None:
        app.update_meta('tags', args.tags, name_set=args.nameset)
    app.save(args.project)
    ns = app.name_set(args.nameset)
    out.success(f"{ns.name}: group={ns.group or '-'} tags={', '.join(ns.tags) or '-'}")
    return 0


def cmd_delimiter(args, out: Output):
    app = open_app(args)
    app.set_delimiter(args.delimiter, name_set=args.nameset)
    app.save(args.project)
    out.print(app.template_preview(args.nameset))
    return 0


def cmd_migrate(args, out: Output):
    """Upgrade an old project file to the current schema."""
    import json

    source = Path(args.input)
    raw = json.loads(source.read_text(encoding="utf-8"))
    changed = needs_migration(raw)

    app = Ludonomia()
    app.load_dict(raw)
    target = Path(args.output) if args.output else source
    app.save(target)
    if changed:
        out.success(f"Migrated {source} -> {target}")
    else:
        out.success(f"{source} already current; wrote {target}")
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ludonomia',
        description='Ludonomia - naming templates and filename list generation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s init project.json
  %(prog)s namesets -p project.json --group Combat
  %(prog)s preview Locomotion --select Action=Jump
  %(prog)s export Weapons -o weapons.csv -p project.json
        """,
    )
    parser.add_argument('--version', '-V', action='version', version=f'ludonomia {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    # Shared --project option for all subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--project', '-p', help='Project JSON file (default: built-in sample)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- init ---
    p = subparsers.add_parser('init', help='Write the sample project to a file')
    p.add_argument('path', help='Output path')
    p.add_argument('--force', '-f', action='store_true', help='Overwrite existing file')

    # --- browse ---
    subparsers.add_parser('show', parents=[common], help='Project summary')
    subparsers.add_parser('elements', aliases=['el'], parents=[common], help='List elements and terms')

    p = subparsers.add_parser('namesets', aliases=['ns'], parents=[common], help='List namesets')
    p.add_argument('--group', '-g', default='All', help='Exact group (default: All)')
    p.add_argument('--tag', '-t', help='Case-insensitive tag substring')

    p = subparsers.add_parser('preview', parents=[common], help='Render one name')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('--select', '-s', action='append', metavar='ELEMENT=TERM',
                   help='Choose a term (repeatable)')

    p = subparsers.add_parser('count', parents=[common], help='Number of names in a nameset')
    p.add_argument('nameset', help='NameSet name')

    # --- generation ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], parents=[common],
                              help='Print every name, one per line')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('--limit', '-n', type=int, help='Stop after N names')
    p.add_argument('--force', '-f', action='store_true', help='Ignore export.max_rows')
    p.add_argument('--unique', '-u', action='store_true', help='Drop names rendered twice')

    p = subparsers.add_parser('export', parents=[common], help='Export every name to CSV')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('--output', '-o', required=True, help='CSV file path')
    p.add_argument('--no-header', action='store_true', help='Omit the header row')
    p.add_argument('--name-column', action='store_true', help='Append the rendered name')
    p.add_argument('--limit', '-n', type=int, help='Stop after N rows')
    p.add_argument('--force', '-f', action='store_true', help='Ignore export.max_rows')

    # --- editing ---
    p = subparsers.add_parser('add-element', parents=[common], help='Create an element')
    p.add_argument('name', help='Element name')

    p = subparsers.add_parser('add-term', parents=[common], help='Add a term to an element')
    p.add_argument('element', help='Element name')
    p.add_argument('term', help='Term to add')

    p = subparsers.add_parser('remove-term', parents=[common], help='Remove a term')
    p.add_argument('element', help='Element name')
    p.add_argument('term', help='Term to remove')

    p = subparsers.add_parser('add-nameset', parents=[common], help='Create a nameset')
    p.add_argument('name', help='NameSet name')
    p.add_argument('--clone-from', '-c', help='Copy template and delimiter from this nameset')

    p = subparsers.add_parser('reorder', parents=[common], help='Move a template slot')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('from_index', type=int, help='Current position (0-based)')
    p.add_argument('to_index', type=int, help='New position (0-based)')

    p = subparsers.add_parser('template', parents=[common], help='Append/remove template slots')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('--append', '-a', action='append', metavar='ELEMENT', help='Append a slot')
    p.add_argument('--remove', '-r', type=int, metavar='INDEX', help='Remove the slot at INDEX')

    p = subparsers.add_parser('meta', parents=[common], help='Set group and/or tags')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('--group', '-g', help='Group (empty string clears)')
    p.add_argument('--tags', '-t', help='Comma-separated tags (replaces all)')

    p = subparsers.add_parser('delimiter', parents=[common], help='Set the delimiter')
    p.add_argument('nameset', help='NameSet name')
    p.add_argument('delimiter', help='New delimiter')

    p = subparsers.add_parser('migrate', help='Upgrade an old project file')
    p.add_argument('input', help='Project file to migrate')
    p.add_argument('--output', '-o', help='Write here instead of in place')

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        'el': 'elements',
        'ns': 'namesets',
        'gen': 'generate', 'g': 'generate',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if command in EDIT_COMMANDS and not args.project:
        out.error(f"'{command}' edits a project file; pass --project PATH")
        return 1

    # Dispatch
    commands = {
        'init': cmd_init,
        'show': cmd_show,
        'elements': cmd_elements,
        'namesets': cmd_namesets,
        'preview': cmd_preview,
        'count': cmd_count,
        'generate': cmd_generate,
        'export': cmd_export,
        'add-element': cmd_add_element,
        'add-term': cmd_add_term,
        'remove-term': cmd_remove_term,
        'add-nameset': cmd_add_nameset,
        'reorder': cmd_reorder,
        'template': cmd_template,
        'meta': cmd_meta,
        'delimiter': cmd_delimiter,
        'migrate': cmd_migrate,
    }

    handler = commands.get(command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args, out)
    except KeyboardInterrupt:
        out.print("\nCancelled.")
        return 130
    except (LudonomiaError, ValueError, OSError) as e:
        out.error(str(e))
        if args.verbose:
            logger.exception("Command failed")
        return 1


if __name__ == '__main__':
    sys.exit(main())
