"""``roost wrappers`` — show the wrapper each action resolves to.

Resolves an import string to a handler class and prints a table of
ACTION and WRAPPER, using the templates under ``--template-dir``.
Layered wrappers are listed outermost first, separated by ``>``.
"""

import argparse
import sys

from roost.cli._resolve import resolve_handler
from roost.config import ViewConfig
from roost.errors import RoostError
from roost.handler import action_methods
from roost.rendering import Renderer


def run_wrappers(args: argparse.Namespace) -> None:
    """Print the resolved wrappers for each requested action."""
    try:
        handler_cls = resolve_handler(args.handler)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    actions = list(args.actions) or sorted(action_methods(handler_cls))
    if not actions:
        print(f"{handler_cls.__qualname__} has no actions.")
        return

    renderer = Renderer(ViewConfig(template_dir=args.template_dir, wrapper_dir=args.wrapper_dir))

    rows: list[tuple[str, str]] = []
    for action in actions:
        handler = handler_cls(action, renderer=renderer)
        try:
            wrappers = handler.wrappers_for()
        except RoostError as exc:
            print(f"Error: {action}: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc
        rows.append((action, " > ".join(wrappers) or "(none)"))

    width = max(max(len(action) for action, _ in rows), 6)  # "ACTION" header
    fmt = f"{{:<{width}}}  {{}}"
    print(fmt.format("ACTION", "WRAPPER"))
    print("-" * min(width + 2 + max(len(w) for _, w in rows), 80))
    for action, wrapper in rows:
        print(fmt.format(action, wrapper))
