"""Tests for redirect factories."""

import pytest

from autoredirects.core.factory import (
    CallableRedirectFactory,
    DefaultRedirectFactory,
    load_factory,
)
from autoredirects.core.redirects import Redirect
from autoredirects.core.types import PageId, URLPath


class TestDefaultRedirectFactory:
    """Tests for DefaultRedirectFactory."""

    def test__default__makes_permanent_redirect(self) -> None:
        """Produce a permanent redirect by default."""
        redirect = DefaultRedirectFactory().make_redirect(
            PageId("a"),
            URLPath("/old"),
            URLPath("/new"),
        )

        assert redirect == Redirect("/old", "/new", is_permanent=True)

    def test__not_permanent__makes_temporary_redirect(self) -> None:
        """Honour the configured permanence."""
        redirect = DefaultRedirectFactory(permanent=False).make_redirect(
            PageId("a"),
            URLPath("/old"),
            URLPath("/new"),
        )

        assert redirect.is_permanent is False


class TestLoadFactory:
    """Tests for load_factory()."""

    def test__function__is_wrapped(self) -> None:
        """Wrap a plain function."""
        factory = load_factory("tests.custom_factories:temporary_redirect")

        assert isinstance(factory, CallableRedirectFactory)
        redirect = factory.make_redirect(PageId("x"), URLPath("/a"), URLPath("/b"))
        assert redirect == Redirect("/a", "/b", is_permanent=False, extra={"pageId": "x"})

    def test__class__is_instantiated(self) -> None:
        """Instantiate a factory class without arguments."""
        factory = load_factory("tests.custom_factories:ForcedRedirectFactory")

        redirect = factory.make_redirect(PageId("x"), URLPath("/a"), URLPath("/b"))
        assert redirect.extra == {"force": True}

    def test__instance__is_used_directly(self) -> None:
        """Use an object exposing make_redirect as-is."""
        from tests.custom_factories import forced

        assert load_factory("tests.custom_factories:forced") is forced

    @pytest.mark.parametrize(
        "reference",
        ["no_colon", ":attr", "module:", ""],
    )
    def test__malformed_reference__raises_error(self, reference: str) -> None:
        """Reject references without module and attribute."""
        with pytest.raises(ValueError, match="Invalid factory reference"):
            load_factory(reference)

    def test__missing_module__raises_error(self) -> None:
        """Report modules that cannot be imported."""
        with pytest.raises(ValueError, match="Cannot import factory module"):
            load_factory("tests.does_not_exist:factory")

    def test__missing_attribute__raises_error(self) -> None:
        """Report attributes that do not exist."""
        with pytest.raises(ValueError, match="has no attribute"):
            load_factory("tests.custom_factories:missing")

    def test__not_callable__raises_error(self) -> None:
        """Reject attributes that are not factories."""
        with pytest.raises(ValueError, match="is not a redirect factory"):
            load_factory("tests.custom_factories:NOT_A_FACTORY")
