"""Roost — declarative wrapper templates for handler hierarchies.

A wrapper is the page shell rendered around an action's content.
Handlers declare one with class keywords, inherit it from their
parents, and override it per render call.
Built for Python 3.14t with free-threading support.

Basic usage::

    from roost import Handler

    class BankHandler(Handler):          # uses templates/wrapperss/bank.html
        def index(self):
            return self.render(balance=100)

    class TillHandler(BankHandler, wrapper=False):
        ...

    BankHandler("index").wrapper_for()   # "wrapperss/bank"
"""

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "DEFAULT",
    "ActionNotFound",
    "ConfigurationError",
    "Handler",
    "MethodRef",
    "Renderer",
    "Resolver",
    "RoostError",
    "ViewConfig",
    "WrapperNotFound",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "DEFAULT": "roost.resolver",
    "ActionNotFound": "roost.errors",
    "ConfigurationError": "roost.errors",
    "Handler": "roost.handler",
    "MethodRef": "roost.registry",
    "Renderer": "roost.rendering",
    "Resolver": "roost.resolver",
    "RoostError": "roost.errors",
    "ViewConfig": "roost.config",
    "WrapperNotFound": "roost.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
