"""Tests for roost.cli._resolve — handler import resolution."""

import sys
import types

import pytest

from roost.cli._resolve import resolve_handler
from roost.handler import Handler


class PostsHandler(Handler):
    class CommentsHandler(Handler):
        pass


@pytest.fixture
def _fake_module(monkeypatch: pytest.MonkeyPatch) -> None:
    mod = types.ModuleType("_fake_roost_resolve")
    mod.PostsHandler = PostsHandler  # type: ignore[attr-defined]
    mod.not_a_handler = "just a string"  # type: ignore[attr-defined]
    mod.SomeClass = dict  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_roost_resolve", mod)


@pytest.mark.usefixtures("_fake_module")
class TestResolveHandler:
    def test_class(self) -> None:
        assert resolve_handler("_fake_roost_resolve:PostsHandler") is PostsHandler

    def test_nested_class(self) -> None:
        cls = resolve_handler("_fake_roost_resolve:PostsHandler.CommentsHandler")
        assert cls is PostsHandler.CommentsHandler

    def test_missing_class_part(self) -> None:
        with pytest.raises(TypeError, match="module:HandlerClass"):
            resolve_handler("_fake_roost_resolve")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_handler("nonexistent_module_xyz:PostsHandler")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_handler("_fake_roost_resolve:DoesNotExist")

    def test_not_a_handler(self) -> None:
        with pytest.raises(TypeError, match=r"not a roost\.Handler subclass"):
            resolve_handler("_fake_roost_resolve:not_a_handler")

    def test_unrelated_class(self) -> None:
        with pytest.raises(TypeError, match="SomeClass"):
            resolve_handler("_fake_roost_resolve:SomeClass")
