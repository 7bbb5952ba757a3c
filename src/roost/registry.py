"""Wrapper declarations — specs, conditions, and the per-class registry.

Every handler class gets a ``HandlerDescriptor`` when it is defined.
Descriptors form a parent-pointer tree that mirrors the class hierarchy;
each carries the class's own ``Declaration`` tuple (or ``None`` to
inherit).

A subclass that never declares a wrapper sees its nearest ancestor's
declaration, but naming-convention lookups still use the subclass's
own derived path.  That is what makes ``CurrencyHandler`` look for
``wrapperss/currency`` before falling back to its parent's wrapper.

Free-threading safety:
    - Specs, conditions, declarations, and descriptors are frozen
    - ``Registry`` writers hold a lock and swap whole descriptors in,
      so readers never observe a half-applied declaration
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any, TypeAlias

from roost.errors import ConfigurationError

logger = logging.getLogger("roost.registry")


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LiteralSpec:
    """A fixed wrapper name: ``wrapper="information"``."""

    name: str


@dataclass(frozen=True, slots=True)
class MethodRef:
    """Call the handler method *name* at resolution time.

    The method returns a template name, ``False`` for no wrapper, or
    ``None`` to fall back to the naming convention::

        class VaultHandler(BankHandler, wrapper=MethodRef("access_level_wrapper")):
            def access_level_wrapper(self):
                return "admin" if self.is_admin else None
    """

    name: str


@dataclass(frozen=True, slots=True)
class InlineFn:
    """A callable evaluated at resolution time.

    Called with the handler instance when it takes a required positional
    parameter, with no arguments otherwise.
    """

    fn: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class Suppressed:
    """``wrapper=False`` — never wrap, regardless of ancestors."""

    def __repr__(self) -> str:
        return "Suppressed"


@dataclass(frozen=True, slots=True)
class Unset:
    """``wrapper=None`` — naming-convention lookup, then the parent's wrapper."""

    def __repr__(self) -> str:
        return "Unset"


SUPPRESSED = Suppressed()
UNSET = Unset()

WrapperSpec: TypeAlias = LiteralSpec | MethodRef | InlineFn | Suppressed | Unset

_SPEC_TYPES = (LiteralSpec, MethodRef, InlineFn, Suppressed, Unset)


def as_spec(value: Any) -> WrapperSpec:
    """Coerce a declaration value to a ``WrapperSpec``.

    ``str`` → ``LiteralSpec``, ``False`` → ``Suppressed``, ``None`` →
    ``Unset``, other callables → ``InlineFn``.  ``True``, an empty name,
    and anything else raise ``ConfigurationError``.
    """
    if isinstance(value, str):
        value = LiteralSpec(value)
    if isinstance(value, LiteralSpec) and not value.name:
        msg = "Wrapper names must not be empty; use False for no wrapper"
        raise ConfigurationError(msg)
    if isinstance(value, _SPEC_TYPES):
        return value
    if value is False:
        return SUPPRESSED
    if value is None:
        return UNSET
    if callable(value):
        return InlineFn(value)
    msg = (
        "Wrappers must be specified as a str, MethodRef, callable, False, or None; "
        f"got {value!r}"
    )
    raise ConfigurationError(msg)


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


def _action_set(value: str | Iterable[Any] | None) -> frozenset[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return frozenset((value,))
    if isinstance(value, Iterable):
        return frozenset(str(v) for v in value)
    return frozenset((str(value),))


@dataclass(frozen=True, slots=True)
class Conditions:
    """``only``/``except`` filters restricting when a declaration applies.

    When both are given, ``only`` wins and ``except_`` is ignored.
    """

    only: frozenset[str] | None = None
    except_: frozenset[str] | None = None

    @classmethod
    def build(
        cls,
        only: str | Iterable[Any] | None = None,
        except_: str | Iterable[Any] | None = None,
    ) -> Conditions:
        """Build conditions from scalars or iterables of action names."""
        return cls(only=_action_set(only), except_=_action_set(except_))

    def is_active(self, action_name: str | None) -> bool:
        """Whether the declaration applies to *action_name*."""
        if self.only is not None:
            return action_name in self.only
        if self.except_ is not None:
            return action_name not in self.except_
        return True

    def __bool__(self) -> bool:
        return self.only is not None or self.except_ is not None


@dataclass(frozen=True, slots=True)
class Declaration:
    """A declared spec together with its conditions."""

    spec: WrapperSpec = UNSET
    conditions: Conditions = field(default_factory=Conditions)

    def describe(self) -> str:
        """Short human-readable form, as written in a class declaration."""
        spec = self.spec
        if isinstance(spec, LiteralSpec):
            text = repr(spec.name)
        elif isinstance(spec, MethodRef):
            text = f"MethodRef({spec.name!r})"
        elif isinstance(spec, InlineFn):
            text = f"<fn {getattr(spec.fn, '__qualname__', repr(spec.fn))}>"
        elif isinstance(spec, Suppressed):
            text = "False"
        else:
            text = "None"

        if self.conditions.only is not None:
            text += f" only={sorted(self.conditions.only)}"
        elif self.conditions.except_ is not None:
            text += f" except={sorted(self.conditions.except_)}"
        return text


_ROOT_DECLARATION = Declaration()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """Registry entry for one handler class.

    Attributes:
        handler: The handler class.
        parent: Nearest registered ancestor class, ``None`` at the root.
        declarations: The class's own declarations, outermost wrapper
            first; ``None`` inherits.
        namespace: Path segments prepended to the derived name.
        abstract: Skip naming-convention lookup for this class.
    """

    handler: type
    parent: type | None = None
    declarations: tuple[Declaration, ...] | None = None
    namespace: str | None = None
    abstract: bool = False


class Registry:
    """Wrapper declarations keyed by handler class.

    Populated at class-definition time through ``register()`` (called
    from ``Handler.__init_subclass__``), ``declare()`` and ``add()``.

    The first declaration of a class is its primary wrapper.  Further
    declarations added with ``add()`` are layered inside it, each with
    its own conditions.
    """

    __slots__ = ("_descriptors", "_lock")

    def __init__(self) -> None:
        self._descriptors: dict[type, HandlerDescriptor] = {}
        self._lock = threading.Lock()

    def register(
        self,
        cls: type,
        *,
        namespace: str | None = None,
        abstract: bool = False,
    ) -> HandlerDescriptor:
        """Create the descriptor for a newly defined class.

        The parent is the nearest class in the MRO that is already
        registered.  A namespace is inherited from the parent unless
        given explicitly.
        """
        with self._lock:
            parent = next((base for base in cls.__mro__[1:] if base in self._descriptors), None)
            if namespace is None and parent is not None:
                namespace = self._descriptors[parent].namespace
            descriptor = HandlerDescriptor(
                handler=cls,
                parent=parent,
                namespace=namespace,
                abstract=abstract,
            )
            self._descriptors[cls] = descriptor

        logger.debug(
            "registered %s (parent=%s)",
            cls.__qualname__,
            parent.__qualname__ if parent is not None else None,
        )
        return descriptor

    def declare(
        self,
        cls: type,
        spec: Any,
        *,
        only: str | Iterable[Any] | None = None,
        except_: str | Iterable[Any] | None = None,
    ) -> Declaration:
        """Declare the wrapper for *cls*, replacing any earlier declaration.

        Raises:
            ConfigurationError: If *spec* is ``True`` or an unsupported
                value, or *cls* was never registered.
        """
        declaration = Declaration(as_spec(spec), Conditions.build(only, except_))
        with self._lock:
            current = self._registered(cls)
            self._descriptors[cls] = replace(current, declarations=(declaration,))

        logger.debug("%s declares wrapper %r", cls.__qualname__, declaration)
        return declaration

    def add(
        self,
        cls: type,
        *specs: Any,
        only: str | Iterable[Any] | None = None,
        except_: str | Iterable[Any] | None = None,
    ) -> tuple[Declaration, ...]:
        """Append wrappers to *cls*'s declarations, sharing one condition set.

        The class's current declarations, inherited ones included, are
        copied and extended; ancestors are left untouched.

        Returns:
            The class's declarations after the append.

        Raises:
            ConfigurationError: If no spec is given, a spec is invalid, or
                *cls* was never registered.
        """
        if not specs:
            msg = f"{cls.__qualname__}: add() needs at least one wrapper"
            raise ConfigurationError(msg)
        conditions = Conditions.build(only, except_)
        added = tuple(Declaration(as_spec(spec), conditions) for spec in specs)
        with self._lock:
            current = self._registered(cls)
            declarations = (*self.effective_all(cls), *added)
            self._descriptors[cls] = replace(current, declarations=declarations)

        logger.debug("%s adds wrappers %r", cls.__qualname__, added)
        return declarations

    def _registered(self, cls: type) -> HandlerDescriptor:
        current = self._descriptors.get(cls)
        if current is None:
            msg = f"{cls.__qualname__} is not a registered handler class"
            raise ConfigurationError(msg)
        return current

    def descriptor(self, cls: type) -> HandlerDescriptor:
        """Return the descriptor for *cls*.

        Raises ``KeyError`` if the class was never registered.
        """
        return self._descriptors[cls]

    def effective(self, cls: type) -> Declaration:
        """Primary declaration of *cls* or its nearest declaring ancestor."""
        declarations = self.effective_all(cls)
        return declarations[0] if declarations else _ROOT_DECLARATION

    def effective_all(self, cls: type) -> tuple[Declaration, ...]:
        """All declarations of *cls* or its nearest declaring ancestor."""
        for descriptor in self.lineage(cls):
            if descriptor.declarations is not None:
                return descriptor.declarations
        return ()

    def lineage(self, cls: type) -> Iterator[HandlerDescriptor]:
        """Yield descriptors from *cls* up to the root."""
        current: type | None = cls
        while current is not None:
            descriptor = self._descriptors[current]
            yield descriptor
            current = descriptor.parent

    def children(self, cls: type) -> list[type]:
        """Registered classes whose parent is *cls*, in definition order."""
        return [d.handler for d in list(self._descriptors.values()) if d.parent is cls]

    def __contains__(self, cls: object) -> bool:
        return cls in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


REGISTRY = Registry()
