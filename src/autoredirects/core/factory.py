"""Redirect factories.

The factory decides what a recorded redirect looks like: its status and any
metadata a serving layer needs. Custom factories are referenced from the
configuration as ``"package.module:attribute"`` import strings.
"""

import importlib
from collections.abc import Callable
from dataclasses import dataclass

from autoredirects.core.redirects import Redirect, RedirectFactory
from autoredirects.core.types import PageId, URLPath


@dataclass(frozen=True)
class DefaultRedirectFactory:
    """Factory producing plain redirects with a fixed permanence."""

    permanent: bool = True

    def make_redirect(
        self,
        page_id: PageId,
        from_path: URLPath,
        to_path: URLPath,
    ) -> Redirect:
        return Redirect(
            from_path=from_path,
            to_path=to_path,
            is_permanent=self.permanent,
        )


class CallableRedirectFactory:
    """Adapts a ``(page_id, from_path, to_path)`` function to a factory."""

    def __init__(self, func: Callable[[PageId, URLPath, URLPath], Redirect]) -> None:
        self._func = func

    def make_redirect(
        self,
        page_id: PageId,
        from_path: URLPath,
        to_path: URLPath,
    ) -> Redirect:
        return self._func(page_id, from_path, to_path)


def load_factory(import_string: str) -> RedirectFactory:
    """Load a redirect factory from an import string.

    The attribute may be a factory class (instantiated without arguments),
    an object with a ``make_redirect`` method, or a plain function taking
    ``(page_id, from_path, to_path)``.

    Args:
        import_string: Reference such as "mysite.redirects:make_redirect"

    Returns:
        RedirectFactory instance

    Raises:
        ValueError: If the string is malformed or does not name a factory
    """
    module_name, sep, attr_name = import_string.partition(":")
    if not sep or not module_name or not attr_name:
        raise ValueError(
            f"Invalid factory reference {import_string!r}, "
            "expected 'package.module:attribute'",
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import factory module {module_name!r}: {e}") from e

    target = getattr(module, attr_name, None)
    if target is None:
        raise ValueError(f"Module {module_name!r} has no attribute {attr_name!r}")

    if isinstance(target, type):
        target = target()
    if hasattr(target, "make_redirect"):
        return target
    if callable(target):
        return CallableRedirectFactory(target)

    raise ValueError(f"{import_string!r} is not a redirect factory")
