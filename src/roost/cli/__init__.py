"""Roost CLI — inspect wrapper resolution for existing handlers.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="Roost — declarative wrapper templates for handler hierarchies.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- roost wrappers ---------------------------------------------------
    wrappers_parser = subparsers.add_parser(
        "wrappers",
        help="Show the wrapper each action of a handler resolves to",
    )
    wrappers_parser.add_argument("handler", help="Import string (e.g. myapp.handlers:PostsHandler)")
    wrappers_parser.add_argument(
        "actions",
        nargs="*",
        help="Actions to resolve (default: every public action method)",
    )
    wrappers_parser.add_argument(
        "--template-dir",
        default="templates",
        help="Template root directory (default: templates)",
    )
    wrappers_parser.add_argument(
        "--wrapper-dir",
        default="wrapperss",
        help="Wrapper directory under the template root (default: wrapperss)",
    )

    # -- roost tree -------------------------------------------------------
    tree_parser = subparsers.add_parser(
        "tree",
        help="Print a handler hierarchy with each class's wrapper declaration",
    )
    tree_parser.add_argument("handler", help="Import string (e.g. myapp.handlers:BaseHandler)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "wrappers":
        from roost.cli._wrappers import run_wrappers

        run_wrappers(args)
    elif args.command == "tree":
        from roost.cli._tree import run_tree

        run_tree(args)
