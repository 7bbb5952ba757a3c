"""Roost exception hierarchy.

Shared across the registry, resolver, renderer, and handler so every
module raises and catches the same types.
"""

from collections.abc import Sequence


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when a wrapper declaration or override is invalid.

    Declaration-time errors (``wrapper=True``) surface when the handler
    class is defined.  Resolution-time errors (a wrapper method that
    returns something other than ``str``, ``False``, or ``None``) abort
    the render in progress.
    """


class WrapperNotFound(RoostError):  # noqa: N818 — mirrors template-engine naming
    """A wrapper was required but no template could be found.

    Attributes:
        handler: The handler class that was being resolved.
        searched: Candidate template names that were tried, in order.
        search_paths: The template roots the lookup searched.
    """

    def __init__(
        self,
        handler: type,
        searched: Sequence[str] = (),
        search_paths: Sequence[str] = (),
        detail: str = "",
    ) -> None:
        self.handler = handler
        self.searched = tuple(searched)
        self.search_paths = tuple(search_paths)
        message = detail or f"There was no default wrapper for {handler.__qualname__}"
        if self.searched:
            message += f"; tried {list(self.searched)!r}"
        if self.search_paths:
            message += f" in {list(self.search_paths)!r}"
        super().__init__(message)


class ActionNotFound(RoostError):  # noqa: N818 — conventional name in web frameworks
    """The requested action is not a public method of the handler."""

    def __init__(self, handler: type, action: str) -> None:
        self.handler = handler
        self.action = action
        super().__init__(f"The action {action!r} could not be found for {handler.__qualname__}")
