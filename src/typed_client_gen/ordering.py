"""Declaration ordering: supertypes before subtypes."""

import logging
from collections.abc import Callable, Iterable

from .models import Class, Declaration

logger = logging.getLogger(__name__)


def superclass_chain(clz: Class, lookup: Callable[[str], Declaration | None], stop: set[str]) -> list[Class]:
    """
    Walk from ``clz`` outward through its superclasses.

    The walk ends at a class without a superclass, an unresolved name, a class
    in ``stop``, or a class already visited on this walk (a cycle). Returns the
    chain starting with ``clz`` itself.
    """
    chain = [clz]
    visited = {clz.name}
    current = clz
    while current.superclass is not None and current.name not in stop:
        parent = lookup(current.superclass.name)
        if not isinstance(parent, Class):
            logger.debug("Superclass %s of %s is not a known class", current.superclass.name, current.name)
            break
        if parent.name in visited:
            logger.debug("Superclass cycle at %s, walk stops at %s", parent.name, current.name)
            break
        chain.append(parent)
        visited.add(parent.name)
        current = parent
    return chain


def order_declarations(classes: Iterable[Class], lookup: Callable[[str], Declaration | None]) -> list[Class]:
    """Order classes so that every resolvable ancestor precedes its descendants.

    Unrelated classes keep their input order.
    """
    ordered: list[Class] = []
    emitted: set[str] = set()
    for clz in classes:
        if clz.name in emitted:
            continue
        for item in reversed(superclass_chain(clz, lookup, emitted)):
            if item.name not in emitted:
                emitted.add(item.name)
                ordered.append(item)
    return ordered
