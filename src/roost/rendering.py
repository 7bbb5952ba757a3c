"""Action rendering — content first, then the resolved wrapper around it.

The ``Renderer`` owns the kida Environment, the template lookup, and
the wrapper ``Resolver``.  A handler calls ``render()`` with the same
options it would give a web framework's render call::

    handler.render()                          # <handler path>/<action>.html
    handler.render("posts/feed.html", wrapper="print")
    handler.render(text="ok")                 # never wrapped
    handler.render(partial="posts/_row.html", wrapper=True)

Thread safety:
    The environment and lookup are built lazily under a Lock with a
    double check, so concurrent first renders create exactly one
    environment.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from roost.config import ViewConfig
from roost.errors import WrapperNotFound
from roost.naming import handler_path
from roost.registry import REGISTRY, Registry
from roost.resolver import DEFAULT, Resolver
from roost.templating.integration import KidaLookup, create_environment, render_wrapped

if TYPE_CHECKING:
    from kida import Environment

    from roost.resolver import HandlerLike

logger = logging.getLogger("roost.rendering")


class Renderer:
    """Renders handler actions inside their wrappers.

    Args:
        config: View configuration; defaults to ``ViewConfig()``.
        env: A pre-built kida Environment.  Built from *config* on first
            use when omitted.
        registry: Wrapper declarations; defaults to the global registry.
    """

    __slots__ = ("_config", "_env", "_lock", "_registry", "_resolver")

    def __init__(
        self,
        config: ViewConfig | None = None,
        *,
        env: Environment | None = None,
        registry: Registry | None = None,
    ) -> None:
        self._config = config or ViewConfig()
        self._env = env
        self._registry = registry if registry is not None else REGISTRY
        self._resolver: Resolver | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> ViewConfig:
        return self._config

    @property
    def env(self) -> Environment:
        """The kida Environment, created on first access."""
        self._ensure_ready()
        assert self._env is not None
        return self._env

    @property
    def resolver(self) -> Resolver:
        """The wrapper resolver bound to this renderer's lookup."""
        self._ensure_ready()
        assert self._resolver is not None
        return self._resolver

    @property
    def lookup(self) -> KidaLookup:
        return self.resolver.lookup  # type: ignore[return-value]

    def _ensure_ready(self) -> None:
        if self._resolver is not None:
            return
        with self._lock:
            if self._resolver is not None:
                return
            if self._env is None:
                self._env = create_environment(self._config)
            search_paths = (
                str(self._config.template_dir),
                *(str(d) for d in self._config.component_dirs),
            )
            lookup = KidaLookup(self._env, self._config.template_suffixes, search_paths)
            self._resolver = Resolver(lookup, self._config, self._registry)

    # -- Template names -----------------------------------------------------

    def template_for(self, handler: HandlerLike, action_name: str | None = None) -> str:
        """Default content template for an action: ``<handler path>/<action><suffix>``."""
        action = action_name or handler.action_name
        descriptor = self._registry.descriptor(type(handler))
        base = handler_path(
            descriptor.handler,
            namespace=descriptor.namespace,
            suffixes=self._config.handler_suffixes,
        )
        return self._with_suffix(f"{base}/{action}")

    def _with_suffix(self, name: str) -> str:
        if any(name.endswith(suffix) for suffix in self._config.template_suffixes):
            return name
        return f"{name}{self._config.template_suffixes[0]}"

    # -- Rendering ----------------------------------------------------------

    def render(
        self,
        handler: HandlerLike,
        template: str | None = None,
        /,
        *,
        wrapper: Any = DEFAULT,
        text: str | None = None,
        inline: str | None = None,
        partial: str | None = None,
        **context: Any,
    ) -> str:
        """Render *handler*'s current action and wrap it.

        Args:
            handler: The handler being rendered.
            template: Content template; defaults to ``template_for(handler)``.
            wrapper: Call-site wrapper override (see ``Resolver.resolve``).
            text: Literal body, never wrapped unless *wrapper* is given.
            inline: Template source rendered from a string.
            partial: Partial template name, unwrapped by default.
            **context: Template variables.  ``handler`` is added unless given.

        Returns:
            The rendered HTML.

        Raises:
            WrapperNotFound: A resolved wrapper has no template.
        """
        context.setdefault("handler", handler)
        options: dict[str, Any] = {
            key: value
            for key, value in (("text", text), ("inline", inline), ("partial", partial))
            if value is not None
        }
        if wrapper is not DEFAULT:
            options["wrapper"] = wrapper

        html = self._render_content(handler, template, text, inline, partial, context)
        wrapper_names = self.resolver.all_for_options(handler, options)
        if not wrapper_names:
            return html
        return self.wrap(handler, wrapper_names, html, context)

    def _render_content(
        self,
        handler: HandlerLike,
        template: str | None,
        text: str | None,
        inline: str | None,
        partial: str | None,
        context: dict[str, Any],
    ) -> str:
        if text is not None:
            return text
        if inline is not None:
            return self.env.from_string(inline).render(context)
        name = partial or template or self.template_for(handler)
        return self.env.get_template(self._with_suffix(name)).render(context)

    def wrap(
        self,
        handler: HandlerLike,
        wrapper_names: str | Sequence[str],
        html: str,
        context: dict[str, Any],
    ) -> str:
        """Render *wrapper_names* around *html*.

        Names are ordered outermost first; the last one is rendered
        directly around *html* and each earlier one around the result.
        Every wrapper is located before any is rendered.
        """
        if isinstance(wrapper_names, str):
            wrapper_names = (wrapper_names,)

        filenames: list[str] = []
        for name in wrapper_names:
            found = self.lookup.find_all(name)
            if not found:
                raise WrapperNotFound(
                    type(handler),
                    [name],
                    self.lookup.search_paths,
                    detail=f"Wrapper {name!r} for {type(handler).__qualname__} has no template",
                )
            filenames.append(found[0].filename)

        for filename in reversed(filenames):
            logger.debug(
                "wrapping %s#%s in %s",
                type(handler).__qualname__,
                handler.action_name,
                filename,
            )
            html = render_wrapped(
                self.env,
                filename,
                html,
                context,
                block=self._config.content_block,
            )
        return html
