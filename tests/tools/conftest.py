"""Helpers for exercising registered tools and routes without a running server."""

from types import SimpleNamespace

import pytest


class CaptureMCP:
    """Records what the register_* functions attach to a FastMCP server."""

    def __init__(self):
        self.tools = {}
        self.routes = {}

    def tool(self, *args, **kwargs):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn

        return decorator

    def custom_route(self, path, methods):
        def decorator(fn):
            self.routes[path] = (fn, list(methods))
            return fn

        return decorator


@pytest.fixture
def mcp():
    return CaptureMCP()


def make_ctx(**lifespan):
    """A stand-in for the injected Context exposing ``lifespan_context``."""
    return SimpleNamespace(lifespan_context=lifespan)
