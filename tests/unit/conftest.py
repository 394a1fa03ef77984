"""Pytest configuration for the client code generator unit tests."""

import pytest

SPRING = "org.springframework.web.bind.annotation"


def annotation(iface: str, /, **attributes):
    """Build an annotation record; short names are taken from Spring's web bind package."""
    qualified = iface if "." in iface else f"{SPRING}.{iface}"
    return {"type": qualified, "attributes": attributes}


@pytest.fixture
def ann():
    """Factory for annotation records."""
    return annotation


@pytest.fixture
def single_route_defs():
    """Build a raw graph holding one route plus optional classes and enums."""

    def factory(parameters=None, return_type=None, classes=None, enums=None, **route_fields):
        route = {"bean": "test.FooModule", "name": "foo", "parameters": parameters or []}
        if return_type is not None:
            route["returnType"] = return_type
        route.update(route_fields)
        return {"routes": [route], "classes": classes or [], "enums": enums or []}

    return factory
