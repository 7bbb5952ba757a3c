"""Tests for roost.__init__ — lazy import registry covers all public names."""

import tomllib
from pathlib import Path

import pytest

import roost


@pytest.mark.parametrize("name", roost.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(roost, name)
    assert obj is not None, f"roost.{name} resolved to None"


def test_all_names_in_lazy_registry() -> None:
    """Every name in __all__ has a corresponding entry in _LAZY_IMPORTS."""
    missing = set(roost.__all__) - set(roost._LAZY_IMPORTS)
    assert not missing, (
        f"Names in __all__ but not in _LAZY_IMPORTS: {sorted(missing)}. "
        f"Add them to _LAZY_IMPORTS in roost/__init__.py."
    )


def test_lazy_registry_no_extras() -> None:
    """Every name in _LAZY_IMPORTS should be in __all__ (public API contract)."""
    extras = set(roost._LAZY_IMPORTS) - set(roost.__all__)
    assert not extras, f"Names in _LAZY_IMPORTS but not in __all__: {sorted(extras)}."


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        roost.__getattr__("ThisDoesNotExist")


def test_version() -> None:
    assert roost.__version__ == "0.1.0"


def test_declares_free_threading_support() -> None:
    assert roost._Py_mod_gil == 0
    assert "free-threading" in (roost.__doc__ or "")


def test_python_floor_matches_kida() -> None:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    project = tomllib.loads(pyproject.read_text())["project"]
    assert project["requires-python"] == ">=3.14"
