"""Tests for roost.rendering and roost.templating — content inside wrappers."""

from pathlib import Path

import pytest

from roost.config import ViewConfig
from roost.errors import WrapperNotFound
from roost.handler import Handler
from roost.rendering import Renderer
from roost.templating import FoundTemplate, KidaLookup, create_environment
from roost.testing import make_renderer, template_env

TEMPLATES = {
    "wrapperss/bank.html": "<main>{% block content %}{% end %}</main>",
    "wrapperss/print.html": "<pre>{% block content %}{% end %}</pre>",
    "wrapperss/titled.html": "<h1>{{ title }}</h1><main>{% block content %}{% end %}</main>",
    "bank/index.html": "Balance: {{ balance }}",
    "bank/plain.html": "Plain",
    "bank/_row.html": "Row {{ n }}",
}


class BankHandler(Handler):
    pass


class TillHandler(BankHandler, wrapper=False):
    pass


class GhostHandler(BankHandler, wrapper="ghost"):
    pass


class TitledHandler(BankHandler, wrapper="titled"):
    pass


def _bank(action: str = "index", templates: dict[str, str] | None = None) -> BankHandler:
    return BankHandler(action, renderer=make_renderer(TEMPLATES if templates is None else templates))


# =============================================================================
# Lookup
# =============================================================================


class TestKidaLookup:
    def _lookup(self) -> KidaLookup:
        return KidaLookup(template_env(TEMPLATES), (".html",), ("memory",))

    def test_finds_with_prefix(self) -> None:
        found = self._lookup().find_all("bank", ["wrapperss"])
        assert found == [FoundTemplate("wrapperss/bank", "wrapperss/bank.html")]

    def test_missing_returns_empty(self) -> None:
        assert self._lookup().find_all("vault", ["wrapperss"]) == []

    def test_bare_name_without_prefixes(self) -> None:
        found = self._lookup().find_all("wrapperss/print")
        assert [t.name for t in found] == ["wrapperss/print"]

    def test_name_with_suffix(self) -> None:
        found = self._lookup().find_all("wrapperss/print.html")
        assert [t.filename for t in found] == ["wrapperss/print.html"]

    def test_every_prefix_searched(self) -> None:
        found = self._lookup().find_all("bank", ["missing", "wrapperss"])
        assert [t.name for t in found] == ["wrapperss/bank"]

    def test_search_paths(self) -> None:
        assert self._lookup().search_paths == ("memory",)


class TestFilesystemEnvironment:
    def test_lookup_over_template_dir(self, tmp_path: Path) -> None:
        (tmp_path / "wrapperss").mkdir()
        (tmp_path / "wrapperss" / "bank.html").write_text(
            "<main>{% block content %}{% end %}</main>"
        )
        (tmp_path / "bank").mkdir()
        (tmp_path / "bank" / "index.html").write_text("From disk")

        renderer = Renderer(ViewConfig(template_dir=tmp_path))
        assert renderer.lookup.search_paths == (str(tmp_path),)
        handler = BankHandler("index", renderer=renderer)
        assert handler.wrapper_for() == "wrapperss/bank"

        html = handler.render()
        assert "<main>" in html
        assert "From disk" in html

    def test_component_dirs_searched(self, tmp_path: Path) -> None:
        shared = tmp_path / "shared"
        (shared / "wrapperss").mkdir(parents=True)
        (shared / "wrapperss" / "bank.html").write_text("<main>{% block content %}{% end %}</main>")
        (tmp_path / "views").mkdir()

        config = ViewConfig(template_dir=tmp_path / "views", component_dirs=(shared,))
        env = create_environment(config)
        lookup = KidaLookup(env)
        assert [t.name for t in lookup.find_all("bank", ["wrapperss"])] == ["wrapperss/bank"]


# =============================================================================
# Renderer
# =============================================================================


class TestRender:
    def test_default_template_wrapped(self) -> None:
        html = _bank().render(balance=5)
        assert html.startswith("<main>")
        assert "Balance: 5" in html

    def test_template_for(self) -> None:
        handler = _bank("show")
        assert handler.renderer.template_for(handler) == "bank/show.html"
        assert handler.renderer.template_for(handler, "index") == "bank/index.html"

    def test_explicit_template_without_suffix(self) -> None:
        html = _bank().render("bank/plain")
        assert "Plain" in html
        assert "<main>" in html

    def test_wrapper_override(self) -> None:
        html = _bank().render(balance=1, wrapper="print")
        assert html.startswith("<pre>")
        assert "Balance: 1" in html

    def test_wrapper_false(self) -> None:
        assert _bank().render(balance=2, wrapper=False) == "Balance: 2"

    def test_suppressed_class_unwrapped(self) -> None:
        handler = TillHandler("index", renderer=make_renderer(TEMPLATES))
        assert handler.render("bank/plain.html") == "Plain"

    def test_action_has_wrapper_off(self) -> None:
        handler = _bank()
        handler.action_has_wrapper = False
        assert handler.render(balance=3) == "Balance: 3"

    def test_text_not_wrapped(self) -> None:
        assert _bank().render(text="ok") == "ok"

    def test_text_with_explicit_wrapper(self) -> None:
        html = _bank().render(text="ok", wrapper="print")
        assert html.startswith("<pre>")
        assert "ok" in html

    def test_partial_not_wrapped(self) -> None:
        assert _bank().render(partial="bank/_row.html", n=4) == "Row 4"

    def test_partial_with_required_wrapper(self) -> None:
        html = _bank().render(partial="bank/_row.html", wrapper=True, n=4)
        assert html.startswith("<main>")
        assert "Row 4" in html

    def test_inline_not_wrapped(self) -> None:
        assert _bank().render(inline="Hi {{ name }}", name="Ada") == "Hi Ada"

    def test_context_reaches_wrapper(self) -> None:
        handler = TitledHandler("index", renderer=make_renderer(TEMPLATES))
        html = handler.render("bank/plain.html", title="Statement")
        assert "<h1>Statement</h1>" in html
        assert "Plain" in html

    def test_handler_in_context(self) -> None:
        html = _bank().render(inline="{{ handler.action_name }}")
        assert html == "index"

    def test_declared_wrapper_without_template(self) -> None:
        handler = GhostHandler("index", renderer=make_renderer(TEMPLATES))
        with pytest.raises(WrapperNotFound, match="wrapperss/ghost"):
            handler.render("bank/plain.html")

    def test_custom_content_block(self) -> None:
        templates = {
            "wrapperss/bank.html": "<body>{% block body %}{% end %}</body>",
            "bank/index.html": "Inner",
        }
        renderer = make_renderer(templates, content_block="body")
        html = BankHandler("index", renderer=renderer).render()
        assert html == "<body>Inner</body>"


class TestLayeredRender:
    def test_wrappers_nest_innermost_last(self) -> None:
        class VestibuleHandler(BankHandler, wrapper="bank"):
            pass

        VestibuleHandler.add_wrapper("print")
        html = VestibuleHandler("index", renderer=make_renderer(TEMPLATES)).render(
            "bank/plain.html"
        )
        assert html == "<main><pre>Plain</pre></main>"

    def test_layer_conditions_per_action(self) -> None:
        class AtriumHandler(BankHandler, wrapper="bank"):
            pass

        AtriumHandler.add_wrapper("print", only="show")
        renderer = make_renderer(TEMPLATES)
        assert AtriumHandler("index", renderer=renderer).render("bank/plain.html") == (
            "<main>Plain</main>"
        )
        assert AtriumHandler("show", renderer=renderer).render("bank/plain.html") == (
            "<main><pre>Plain</pre></main>"
        )

    def test_context_reaches_every_layer(self) -> None:
        class GalleryHandler(BankHandler, wrapper="titled"):
            pass

        GalleryHandler.add_wrapper("print")
        html = GalleryHandler("index", renderer=make_renderer(TEMPLATES)).render(
            "bank/plain.html", title="Gallery"
        )
        assert html == "<h1>Gallery</h1><main><pre>Plain</pre></main>"

    def test_list_override_nests(self) -> None:
        html = _bank().render("bank/plain.html", wrapper=["bank", "print"])
        assert html == "<main><pre>Plain</pre></main>"

    def test_missing_layer_raises_before_rendering(self) -> None:
        class CloisterHandler(BankHandler, wrapper="bank"):
            pass

        CloisterHandler.add_wrapper("ghost")
        handler = CloisterHandler("index", renderer=make_renderer(TEMPLATES))
        with pytest.raises(WrapperNotFound, match="wrapperss/ghost"):
            handler.render("bank/plain.html")

    def test_wrap_accepts_single_name(self) -> None:
        handler = _bank()
        html = handler.renderer.wrap(handler, "wrapperss/print", "x", {})
        assert html == "<pre>x</pre>"


class TestLazyEnvironment:
    def test_environment_built_once(self, tmp_path: Path) -> None:
        renderer = Renderer(ViewConfig(template_dir=tmp_path))
        assert renderer.env is renderer.env
        assert renderer.resolver is renderer.resolver

    def test_given_environment_used(self) -> None:
        env = template_env(TEMPLATES)
        renderer = Renderer(env=env)
        assert renderer.env is env
