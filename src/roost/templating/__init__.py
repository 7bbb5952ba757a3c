"""Kida template integration — environment setup, lookup, and wrapping."""

from roost.templating.integration import (
    FoundTemplate,
    KidaLookup,
    create_environment,
    render_wrapped,
)

__all__ = [
    "FoundTemplate",
    "KidaLookup",
    "create_environment",
    "render_wrapped",
]
