"""Grouping of routes into modules and deduplication of generated identifiers."""

from collections.abc import Callable, Iterable
from typing import Any

from .utils import simple_name, to_lower_camel


class UniqueNamer:
    """Hands out identifiers, suffixing repeats with ``<separator><n>``."""

    def __init__(self, separator: str = "$") -> None:
        self.separator = separator
        self._taken: set[str] = set()
        self._counters: dict[str, int] = {}

    def take(self, name: str) -> str:
        """Reserve ``name``, or the first free suffixed variant of it."""
        candidate = name
        while candidate in self._taken:
            count = self._counters.get(name, 0) + 1
            self._counters[name] = count
            candidate = f"{name}{self.separator}{count}"
        self._taken.add(candidate)
        return candidate


def fix_module_name(bean: str) -> str:
    """Identifier for the module of a bean: ``test.FooController`` -> ``fooController``."""
    return to_lower_camel(simple_name(bean)) or "unknownModule"


def group_by_bean(routes: Iterable[Any], bean_of: Callable[[Any], str]) -> dict[str, list[Any]]:
    """
    Group items by bean, keeping first-appearance order of beans and items.

    Returns a dict mapping bean -> list of items.
    """
    groups: dict[str, list[Any]] = {}
    for route in routes:
        groups.setdefault(bean_of(route), []).append(route)
    return groups


def matches_apis(bean: str, route_name: str, apis: Iterable[str]) -> bool:
    """Whether a route is selected by an ``apis`` filter entry."""
    candidates = {bean, simple_name(bean), f"{bean}.{route_name}", f"{bean}#{route_name}"}
    return any(api in candidates for api in apis)
