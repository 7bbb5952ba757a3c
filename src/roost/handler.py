"""Handler base class with declarative wrappers.

Subclasses declare their wrapper with class keywords::

    class BankHandler(Handler):                       # wrapperss/bank if it exists
        def index(self): ...

    class InformationHandler(BankHandler, wrapper="information"):
        ...

    class EmployeeHandler(InformationHandler, wrapper=None):
        ...                                           # wrapperss/employee, else "information"

    class WeblogHandler(Handler, wrapper="weblog_standard", except_="rss"):
        ...

    class VaultHandler(BankHandler, wrapper=MethodRef("_access_level_wrapper")):
        def _access_level_wrapper(self):
            return "vault" if self.is_admin else None

    class TillHandler(BankHandler, wrapper=False):    # never wrapped
        ...

or after the class body with ``declare_wrapper()``::

    WeblogHandler.declare_wrapper(lambda h: "writer" if h.logged_in else "reader")

``add_wrapper()`` layers more wrappers inside the declared one, each
call with its own conditions::

    BankHandler.add_wrapper("sidebar", except_="print")
    BankHandler.add_wrapper("audit", only=["edit", "update"])

Every subclass is registered when it is defined, so a handler that
declares nothing still resolves through its own naming-convention
path before inheriting its parent's wrapper.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Iterable
from typing import Any

from roost.errors import ActionNotFound, ConfigurationError
from roost.registry import REGISTRY, Declaration
from roost.rendering import Renderer
from roost.resolver import DEFAULT

_NOT_GIVEN: Any = object()


@functools.cache
def default_renderer() -> Renderer:
    """Shared renderer for handlers created without one."""
    return Renderer()


class Handler:
    """Base class for request handlers.

    Attributes:
        action_name: The action being processed (``"index"``).
        action_has_wrapper: Set to ``False`` before rendering to skip the
            default wrapper for this request.  Explicit ``wrapper=``
            overrides still apply.
        renderer: The ``Renderer`` used by ``render()``.
    """

    def __init_subclass__(
        cls,
        *,
        wrapper: Any = _NOT_GIVEN,
        only: str | Iterable[str] | None = None,
        except_: str | Iterable[str] | None = None,
        namespace: str | None = None,
        abstract: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        REGISTRY.register(cls, namespace=namespace, abstract=abstract)
        if wrapper is not _NOT_GIVEN:
            REGISTRY.declare(cls, wrapper, only=only, except_=except_)
        elif only is not None or except_ is not None:
            msg = f"{cls.__qualname__}: 'only' and 'except_' require a 'wrapper' declaration"
            raise ConfigurationError(msg)

    @classmethod
    def declare_wrapper(
        cls,
        spec: Any,
        *,
        only: str | Iterable[str] | None = None,
        except_: str | Iterable[str] | None = None,
    ) -> Declaration:
        """Declare this class's wrapper, replacing any earlier declaration.

        *spec* is a template name, a ``MethodRef``, a callable, ``False``
        (no wrapper), or ``None`` (naming convention, then the parent).
        ``True`` raises ``ConfigurationError``.
        """
        return REGISTRY.declare(cls, spec, only=only, except_=except_)

    @classmethod
    def add_wrapper(
        cls,
        *specs: Any,
        only: str | Iterable[str] | None = None,
        except_: str | Iterable[str] | None = None,
    ) -> tuple[Declaration, ...]:
        """Append wrappers to this class's declarations.

        Inherited declarations are copied onto the class first, so the
        parent keeps its own list.
        """
        return REGISTRY.add(cls, *specs, only=only, except_=except_)

    def __init__(self, action_name: str | None = None, *, renderer: Renderer | None = None) -> None:
        self.action_name = action_name
        self.action_has_wrapper = True
        self.renderer = renderer if renderer is not None else default_renderer()

    def wrapper_for(
        self,
        action_name: str | None = None,
        override: Any = DEFAULT,
        *,
        required: bool = False,
    ) -> str | None:
        """Resolve the wrapper identifier for *action_name* (default: current action)."""
        return self.renderer.resolver.resolve(self, action_name, override, required=required)

    def wrappers_for(
        self,
        action_name: str | None = None,
        override: Any = DEFAULT,
        *,
        required: bool = False,
    ) -> list[str]:
        """Every wrapper for *action_name*, outermost first."""
        return self.renderer.resolver.resolve_all(self, action_name, override, required=required)

    def render(self, template: str | None = None, /, **options: Any) -> str:
        """Render the current action; see ``Renderer.render`` for *options*."""
        return self.renderer.render(self, template, **options)

    def process(self, action: str, /, **kwargs: Any) -> Any:
        """Run *action* and return its response.

        An action that returns ``None`` renders its default template.

        Raises:
            ActionNotFound: *action* is not a public action method.
        """
        if action not in action_methods(type(self)):
            raise ActionNotFound(type(self), action)

        self.action_name = action
        result = getattr(self, action)(**kwargs)
        if result is None:
            return self.render()
        return result


REGISTRY.register(Handler, abstract=True)


def action_methods(cls: type[Handler]) -> frozenset[str]:
    """Public methods of *cls* that can be dispatched as actions.

    Excludes underscore-prefixed names and everything ``Handler`` itself
    defines.
    """
    return frozenset(
        name
        for name in dir(cls)
        if not name.startswith("_")
        and not hasattr(Handler, name)
        and inspect.isfunction(inspect.getattr_static(cls, name))
    )
