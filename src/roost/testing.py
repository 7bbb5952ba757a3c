"""Test utilities for roost handlers.

Builds renderers over in-memory templates so tests never touch the
filesystem::

    from roost.testing import make_renderer

    renderer = make_renderer({
        "wrapperss/bank.html": "<main>{% block content %}{% end %}</main>",
        "bank/index.html": "Welcome",
    })
    BankHandler("index", renderer=renderer).render()
"""

from collections.abc import Mapping
from typing import Any

from kida import DictLoader, Environment

from roost.config import ViewConfig
from roost.registry import Registry
from roost.rendering import Renderer


def template_env(templates: Mapping[str, str], *, autoescape: bool = True) -> Environment:
    """Build a kida Environment over an in-memory mapping of templates."""
    return Environment(loader=DictLoader(dict(templates)), autoescape=autoescape)


def make_renderer(
    templates: Mapping[str, str],
    *,
    registry: Registry | None = None,
    **config_overrides: Any,
) -> Renderer:
    """Build a ``Renderer`` over in-memory *templates*.

    Keyword arguments other than *registry* override ``ViewConfig`` fields.
    """
    config = ViewConfig(**config_overrides)
    env = template_env(templates, autoescape=config.autoescape)
    return Renderer(config, env=env, registry=registry)
