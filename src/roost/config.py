"""View configuration.

ViewConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ViewConfig:
    """Template and wrapper configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ViewConfig(template_dir="views", wrapper_dir="layouts")
    """

    # Templates
    template_dir: str | Path = "templates"
    component_dirs: tuple[str | Path, ...] = ()  # Additional template roots (partials, shared)
    template_suffixes: tuple[str, ...] = (".html",)  # Tried in order during lookup
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    debug: bool = False  # Enables kida auto_reload

    # Wrappers
    wrapper_dir: str = "wrapperss"  # Conventional wrapper directory, prefixed onto every name
    content_block: str = "content"  # Block in the wrapper that receives the action's HTML

    # Naming convention
    handler_suffixes: tuple[str, ...] = ("Handler", "Controller")  # Stripped from class names
