"""
Shared test fixtures and helpers for the actionctl test suite.
"""

from unittest.mock import MagicMock

import pytest

from actionctl.app import Application
from actionctl.config import ResolverConfig
from actionctl.controller.resolver import ActionControllerResolver
from actionctl.request import Request


# ============================================================================
# Application
# ============================================================================


@pytest.fixture
def config():
    """Default configuration, independent of the process environment."""
    return ResolverConfig()


@pytest.fixture
def app(config):
    return Application(config=config)


@pytest.fixture
def fallback():
    """Stand-in for the resolver being decorated."""
    resolver = MagicMock(name="fallback_resolver")
    resolver.get_controller.return_value = ("fallback-controller", "fallback")
    resolver.get_arguments.return_value = ["fallback-argument"]
    return resolver


@pytest.fixture
def resolver(fallback, app):
    return ActionControllerResolver(fallback, app)


# ============================================================================
# Request Helpers
# ============================================================================


def make_request(controller=None, action=None, path="/", **attributes):
    """Build a request carrying the routing attributes."""
    req = Request.create(path)
    if controller is not None:
        req.attributes.set("_controller", controller)
    if action is not None:
        req.attributes.set("action", action)
    for key, value in attributes.items():
        req.attributes.set(key, value)
    return req
