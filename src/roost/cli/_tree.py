"""``roost tree`` — print a handler hierarchy with wrapper declarations.

Classes without their own declaration are marked ``(inherits)``; layered
wrappers are joined with ``+``.
"""

import argparse
import sys
from collections.abc import Iterator

from roost.cli._resolve import resolve_handler
from roost.registry import REGISTRY


def run_tree(args: argparse.Namespace) -> None:
    """Print the registered subclasses of a handler, depth first."""
    try:
        root = resolve_handler(args.handler)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for depth, cls in _walk(root, 0):
        declarations = REGISTRY.descriptor(cls).declarations
        if declarations is None:
            label = "(inherits)"
        else:
            label = " + ".join(d.describe() for d in declarations)
        print(f"{'  ' * depth}{cls.__name__}  wrapper={label}")


def _walk(cls: type, depth: int) -> Iterator[tuple[int, type]]:
    yield depth, cls
    for child in REGISTRY.children(cls):
        yield from _walk(child, depth + 1)
