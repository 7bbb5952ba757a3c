"""Naming convention — template paths derived from handler classes.

A handler class maps to a slash-separated path: namespace segments
first, then the class's qualified name with any ``<locals>`` prefix
removed, the trailing handler suffix stripped, and every segment
converted from CamelCase to snake_case::

    class PostsHandler(Handler, namespace="weblog"): ...
    handler_path(PostsHandler, namespace="weblog", suffixes=("Handler",))
    # "weblog/posts"
"""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """Convert a CamelCase identifier to snake_case (``HTTPStatus`` → ``http_status``)."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def handler_path(
    cls: type,
    *,
    namespace: str | None = None,
    suffixes: tuple[str, ...] = (),
) -> str:
    """Derive the lookup path for *cls* from its qualified name.

    A suffix equal to the whole class name is kept, so a class named
    ``Handler`` maps to ``"handler"`` rather than an empty path.
    """
    qualname = cls.__qualname__.rpartition("<locals>.")[2]
    segments = qualname.split(".")

    last = segments[-1]
    for suffix in suffixes:
        if last.endswith(suffix) and last != suffix:
            last = last[: -len(suffix)]
            break
    segments[-1] = last

    if namespace:
        segments = [*namespace.strip("/").split("/"), *segments]

    return "/".join(underscore(segment) for segment in segments)


def is_prefixed(name: str, wrapper_dir: str) -> bool:
    """Return True if *name* already lives under *wrapper_dir*."""
    return name == wrapper_dir or name.startswith(f"{wrapper_dir}/")


def normalize_wrapper(name: str, wrapper_dir: str) -> str:
    """Prefix *name* with the wrapper directory unless it is already there.

    ``"foo"`` becomes ``"wrapperss/foo"``; ``"wrapperss/foo"`` is returned
    unchanged.  An empty *wrapper_dir* disables prefixing.
    """
    if not wrapper_dir or is_prefixed(name, wrapper_dir):
        return name
    return f"{wrapper_dir}/{name}"


def wrapper_prefixes(name: str, wrapper_dir: str) -> tuple[str, ...]:
    """Search prefixes for a naming-convention lookup of *name*."""
    if not wrapper_dir or is_prefixed(name, wrapper_dir):
        return ()
    return (wrapper_dir,)
