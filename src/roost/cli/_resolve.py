"""Handler import resolution — resolves ``"module:Class"`` strings to handler classes.

Shared utility used by ``roost wrappers`` and ``roost tree``.
"""

import importlib

from roost.handler import Handler


def resolve_handler(import_string: str) -> type[Handler]:
    """Resolve an import string to a ``Handler`` subclass.

    Args:
        import_string: Dotted module path and class name separated by a
            colon (e.g. ``"myapp.handlers:PostsHandler"``).

    Returns:
        The handler class.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the class does not exist on the module.
        TypeError: If the import string has no ``:Class`` part or the
            resolved object is not a ``Handler`` subclass.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        msg = f"{import_string!r} must be of the form 'module:HandlerClass'"
        raise TypeError(msg)

    module = importlib.import_module(module_path)
    obj = module
    for part in attr_name.split("."):
        obj = getattr(obj, part)

    if not (isinstance(obj, type) and issubclass(obj, Handler)):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a roost.Handler subclass"
        raise TypeError(msg)

    return obj
