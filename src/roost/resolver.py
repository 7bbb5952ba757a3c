"""Wrapper resolution — which template wraps a given response.

Resolution order for one render call:

1. Render options that produce a body directly (``text``, ``inline``,
   ``partial``, ...) skip wrappers unless ``wrapper`` is given explicitly.
2. A call-site ``wrapper=`` override wins over the class declaration.
3. ``handler.action_has_wrapper = False`` disables the default wrapper.
4. The class's effective declaration is evaluated.  An inactive
   ``only``/``except`` condition, an unset spec, or a dynamic spec that
   returns ``None`` falls through to the naming convention: look for
   ``wrapperss/<handler path>``, else ask the parent class.
5. Every resulting name is prefixed into the wrapper directory.

``resolve()`` answers with the primary wrapper only.  ``resolve_all()``
adds the class's layered declarations (see ``Registry.add``), each kept
only when its own conditions are active, outermost first.

The resolver is a pure function of its inputs.  Template existence
checks go through the ``TemplateLookup`` capability, which may cache.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Final, Protocol

from roost.config import ViewConfig
from roost.errors import ConfigurationError, WrapperNotFound
from roost.naming import handler_path, normalize_wrapper, wrapper_prefixes
from roost.registry import (
    REGISTRY,
    HandlerDescriptor,
    InlineFn,
    LiteralSpec,
    MethodRef,
    Registry,
    Suppressed,
    WrapperSpec,
)

logger = logging.getLogger("roost.resolver")

# Render options that produce the response body without a template.
DIRECT_RENDER_OPTIONS: Final = frozenset({"text", "inline", "partial", "body", "plain", "html"})


class _Default:
    """Marker for "use the class-level declaration"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT: Final = _Default()

# Internal: a dynamic spec returned None, continue with the naming convention.
_FALL_THROUGH: Final = object()


class HandlerLike(Protocol):
    """What the resolver needs from a handler instance."""

    action_name: str | None
    action_has_wrapper: bool


class FoundTemplate(Protocol):
    """A template located by a ``TemplateLookup``."""

    @property
    def name(self) -> str: ...


class TemplateLookup(Protocol):
    """Template existence capability consumed by the resolver."""

    @property
    def search_paths(self) -> tuple[str, ...]: ...

    def find_all(self, name: str, prefixes: Sequence[str] = ()) -> Sequence[FoundTemplate]: ...


def include_wrapper(options: Mapping[str, Any]) -> bool:
    """Whether a render call with *options* should be wrapped at all."""
    return "wrapper" in options or not (DIRECT_RENDER_OPTIONS & options.keys())


def call_with_optional_handler(fn: Callable[..., Any], handler: object) -> Any:
    """Call *fn* with *handler* if it takes a required positional parameter."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return fn(handler)
    takes_handler = any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        and (p.default is p.empty or p.kind is p.VAR_POSITIONAL)
        for p in params
    )
    return fn(handler) if takes_handler else fn()


class Resolver:
    """Compute the effective wrapper for a handler instance and action.

    Usage::

        resolver = Resolver(lookup, ViewConfig())
        resolver.resolve(handler, "index")             # "wrapperss/bank"
        resolver.resolve(handler, "index", "print")    # "wrapperss/print"
        resolver.resolve(handler, "index", False)      # None
        resolver.resolve_all(handler, "edit")          # ["wrapperss/bank", "wrapperss/admin"]
    """

    __slots__ = ("_config", "_lookup", "_registry")

    def __init__(
        self,
        lookup: TemplateLookup,
        config: ViewConfig | None = None,
        registry: Registry | None = None,
    ) -> None:
        self._lookup = lookup
        self._config = config or ViewConfig()
        self._registry = registry if registry is not None else REGISTRY

    @property
    def config(self) -> ViewConfig:
        return self._config

    @property
    def lookup(self) -> TemplateLookup:
        return self._lookup

    @property
    def registry(self) -> Registry:
        return self._registry

    # -- Public API ---------------------------------------------------------

    def for_options(self, handler: HandlerLike, options: Mapping[str, Any]) -> str | None:
        """Resolve the wrapper for a render call's option mapping.

        Direct body renders (``text=``, ``partial=``, ...) without an
        explicit ``wrapper`` option are never wrapped.
        """
        if not include_wrapper(options):
            return None
        return self.resolve(handler, override=options.get("wrapper", DEFAULT))

    def all_for_options(self, handler: HandlerLike, options: Mapping[str, Any]) -> list[str]:
        """Like ``for_options``, returning every layered wrapper."""
        if not include_wrapper(options):
            return []
        return self.resolve_all(handler, override=options.get("wrapper", DEFAULT))

    def resolve(
        self,
        handler: HandlerLike,
        action_name: str | None = None,
        override: Any = DEFAULT,
        *,
        required: bool = False,
    ) -> str | None:
        """Resolve the wrapper identifier for *handler*'s current action.

        Args:
            handler: The handler instance being rendered.
            action_name: Action to resolve for; defaults to
                ``handler.action_name``.
            override: Call-site override.  A ``str`` or callable wins over
                the class declaration, ``False`` disables the wrapper,
                ``True`` requires the default wrapper, ``None`` and
                ``DEFAULT`` use the class declaration.  A list or tuple
                of overrides answers with its first resolved entry.
            required: Raise instead of returning ``None`` when the default
                resolution finds no wrapper.

        Returns:
            A normalized identifier such as ``"wrapperss/bank"``, or
            ``None`` when the response is not wrapped.

        Raises:
            ConfigurationError: For invalid overrides or dynamic specs that
                return something other than ``str``, ``False``, or ``None``.
            WrapperNotFound: When *required* and nothing was found.
        """
        if action_name is None:
            action_name = handler.action_name

        if isinstance(override, (list, tuple)):
            names = self.resolve_all(handler, action_name, override)
            return names[0] if names else None
        if override is True:
            return self._resolve_default(handler, action_name, required=True)
        if override is not DEFAULT and override is not None:
            return self._resolve_override(handler, action_name, override)
        return self._resolve_default(handler, action_name, required=required)

    def resolve_all(
        self,
        handler: HandlerLike,
        action_name: str | None = None,
        override: Any = DEFAULT,
        *,
        required: bool = False,
    ) -> list[str]:
        """Resolve every wrapper for *handler*'s current action, outermost first.

        The first entry is what ``resolve()`` returns.  Layered
        declarations follow in declaration order; a layer whose
        conditions are inactive, or whose spec yields no name, is
        skipped rather than falling through to the naming convention.
        A list or tuple *override* replaces the declared layers entry
        by entry.  Duplicate names are dropped.
        """
        if action_name is None:
            action_name = handler.action_name

        if isinstance(override, (list, tuple)):
            resolved = (self._resolve_override(handler, action_name, item) for item in override)
            return _unique(name for name in resolved if name is not None)

        primary = self.resolve(handler, action_name, override, required=required)
        names = [] if primary is None else [primary]
        uses_declarations = override is DEFAULT or override is None or override is True
        if uses_declarations and handler.action_has_wrapper:
            layers = self._registry.effective_all(type(handler))[1:]
            for declaration in layers:
                if not declaration.conditions.is_active(action_name):
                    continue
                name = self._resolve_layer(handler, declaration.spec)
                if name is not None:
                    names.append(name)

        names = _unique(names)
        if len(names) > 1:
            logger.debug(
                "%s#%s: wrappers %s",
                type(handler).__qualname__,
                action_name,
                ", ".join(names),
            )
        return names

    def normalize(self, name: str) -> str:
        """Prefix *name* into the wrapper directory."""
        return normalize_wrapper(name, self._config.wrapper_dir)

    def implied_name(self, descriptor: HandlerDescriptor) -> str:
        """The naming-convention path for the descriptor's class."""
        return handler_path(
            descriptor.handler,
            namespace=descriptor.namespace,
            suffixes=self._config.handler_suffixes,
        )

    # -- Overrides ----------------------------------------------------------

    def _resolve_override(
        self,
        handler: HandlerLike,
        action_name: str | None,
        override: Any,
    ) -> str | None:
        if override is False:
            return None
        if isinstance(override, str):
            if not override:
                msg = "Wrapper overrides must not be empty; pass False for no wrapper"
                raise ConfigurationError(msg)
            return self.normalize(override)
        if callable(override):
            value = call_with_optional_handler(override, handler)
            if value is None:
                return self._resolve_default(handler, action_name, required=False)
            if value is False:
                return None
            if isinstance(value, str) and value:
                return self.normalize(value)
            msg = (
                f"Your wrapper override {override!r} returned {value!r}. "
                "It should have returned a non-empty str, False, or None"
            )
            raise ConfigurationError(msg)
        msg = f"str, callable, or False expected for 'wrapper'; you passed {override!r}"
        raise ConfigurationError(msg)

    # -- Default resolution -------------------------------------------------

    def _resolve_default(
        self,
        handler: HandlerLike,
        action_name: str | None,
        *,
        required: bool,
    ) -> str | None:
        cls = type(handler)
        if not handler.action_has_wrapper:
            logger.debug("%s#%s: action_has_wrapper is off", cls.__qualname__, action_name)
            return None

        searched: list[str] = []
        value = self._resolve_class(cls, handler, action_name, searched)
        if value is None:
            if required:
                raise WrapperNotFound(cls, searched, self._lookup.search_paths)
            logger.debug("%s#%s: no wrapper", cls.__qualname__, action_name)
            return None

        name = self.normalize(value)
        logger.debug("%s#%s: wrapper %s", cls.__qualname__, action_name, name)
        return name

    def _resolve_class(
        self,
        cls: type,
        handler: HandlerLike,
        action_name: str | None,
        searched: list[str],
    ) -> str | None:
        """Evaluate *cls*'s effective declaration for one action."""
        declaration = self._registry.effective(cls)
        if not declaration.conditions.is_active(action_name):
            return self._implied_or_parent(cls, handler, action_name, searched)

        spec = declaration.spec
        if isinstance(spec, Suppressed):
            return None
        if isinstance(spec, LiteralSpec):
            return spec.name
        if isinstance(spec, MethodRef):
            value = self._call_method(handler, spec.name)
        elif isinstance(spec, InlineFn):
            value = self._call_inline(handler, spec.fn)
        else:
            value = _FALL_THROUGH

        if value is _FALL_THROUGH:
            return self._implied_or_parent(cls, handler, action_name, searched)
        return None if value is False else value

    def _resolve_layer(self, handler: HandlerLike, spec: WrapperSpec) -> str | None:
        """Evaluate a layered declaration; no naming-convention fallback."""
        if isinstance(spec, LiteralSpec):
            value: Any = spec.name
        elif isinstance(spec, MethodRef):
            value = self._call_method(handler, spec.name)
        elif isinstance(spec, InlineFn):
            value = self._call_inline(handler, spec.fn)
        else:
            return None

        if value is _FALL_THROUGH or value is False:
            return None
        return self.normalize(value)

    def _implied_or_parent(
        self,
        cls: type,
        handler: HandlerLike,
        action_name: str | None,
        searched: list[str],
    ) -> str | None:
        """Naming-convention lookup for *cls*, else the parent's resolution."""
        descriptor = self._registry.descriptor(cls)
        if not descriptor.abstract:
            name = self.implied_name(descriptor)
            prefixes = wrapper_prefixes(name, self._config.wrapper_dir)
            searched.append("/".join((*prefixes, name)))
            found = self._lookup.find_all(name, prefixes)
            if found:
                return found[0].name

        if descriptor.parent is None:
            return None
        return self._resolve_class(descriptor.parent, handler, action_name, searched)

    # -- Dynamic specs ------------------------------------------------------

    def _call_method(self, handler: HandlerLike, method_name: str) -> Any:
        method = getattr(handler, method_name, None)
        if method is None or not callable(method):
            msg = (
                f"{type(handler).__qualname__} declares wrapper method {method_name!r} "
                "but does not define it"
            )
            raise ConfigurationError(msg)
        return self._check_result(method(), f"Your wrapper method {method_name!r}")

    def _call_inline(self, handler: HandlerLike, fn: Callable[..., Any]) -> Any:
        value = call_with_optional_handler(fn, handler)
        label = f"Your wrapper function {getattr(fn, '__qualname__', fn)!r}"
        return self._check_result(value, label)

    @staticmethod
    def _check_result(value: Any, label: str) -> Any:
        if value is None:
            return _FALL_THROUGH
        if value is False or (isinstance(value, str) and value):
            return value
        msg = (
            f"{label} returned {value!r}. "
            "It should have returned a non-empty str, False, or None"
        )
        raise ConfigurationError(msg)


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))
