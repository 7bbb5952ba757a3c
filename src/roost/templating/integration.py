"""Kida environment setup and template lookup.

Creates a kida Environment from roost's ViewConfig and implements the
``find_all(name, prefixes)`` lookup the resolver uses to test whether
a naming-convention wrapper exists.  The environment is created once
per ``Renderer`` and shared by every request.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader
from kida.environment.exceptions import TemplateNotFoundError

from roost.config import ViewConfig


def create_environment(config: ViewConfig) -> Environment:
    """Create a kida Environment from view configuration.

    Supports multiple template directories via ``config.component_dirs``
    for partials and shared wrappers.
    """
    loaders = [FileSystemLoader(str(config.template_dir))]
    loaders.extend(FileSystemLoader(str(d)) for d in config.component_dirs)

    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )


@dataclass(frozen=True, slots=True)
class FoundTemplate:
    """A template located by ``KidaLookup``.

    Attributes:
        name: Identifier without suffix (``"wrapperss/bank"``).
        filename: Name kida loads (``"wrapperss/bank.html"``).
    """

    name: str
    filename: str


class KidaLookup:
    """Template existence checks against a kida Environment.

    ``find_all("bank", ["wrapperss"])`` tries ``wrapperss/bank`` with
    each configured suffix and returns every match, in prefix order.
    """

    __slots__ = ("_env", "_search_paths", "_suffixes")

    def __init__(
        self,
        env: Environment,
        suffixes: Sequence[str] = (".html",),
        search_paths: Sequence[str] = (),
    ) -> None:
        self._env = env
        self._suffixes = tuple(suffixes)
        self._search_paths = tuple(search_paths)

    @property
    def search_paths(self) -> tuple[str, ...]:
        return self._search_paths

    def find_all(self, name: str, prefixes: Sequence[str] = ()) -> list[FoundTemplate]:
        """Return every template matching *name* under *prefixes*.

        With no prefixes, *name* is looked up as given.
        """
        if prefixes:
            candidates = [f"{prefix.rstrip('/')}/{name}" for prefix in prefixes]
        else:
            candidates = [name]

        found: list[FoundTemplate] = []
        for candidate in candidates:
            filename = self._first_existing(candidate)
            if filename is not None:
                found.append(FoundTemplate(candidate, filename))
        return found

    def _first_existing(self, candidate: str) -> str | None:
        for suffix in self._suffixes:
            filename = candidate if candidate.endswith(suffix) else f"{candidate}{suffix}"
            try:
                self._env.get_template(filename)
            except TemplateNotFoundError:
                continue
            return filename
        return None


def render_wrapped(
    env: Environment,
    filename: str,
    content_html: str,
    context: dict[str, Any],
    *,
    block: str = "content",
) -> str:
    """Render the wrapper *filename* with *block* replaced by *content_html*."""
    template = env.get_template(filename)
    return template.render_with_blocks({block: content_html}, **context)
