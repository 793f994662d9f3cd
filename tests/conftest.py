"""Shared test fixtures for runtimecfg."""

import pytest

from runtimecfg.models.enums import LogLevel
from runtimecfg.net.netlink import InterfaceInfo
from runtimecfg.utils.logger import configure_logging


class StubResolver:
    """
    In-memory resolver.

    `routed` and `default` are either a list of addresses returned on every
    call, or a list of such lists consumed one per call (the last one
    repeats). `interfaces` maps VIP strings to InterfaceInfo.
    """

    def __init__(self, routed=None, default=None, interfaces=None, error=None):
        self.routed = routed or []
        self.default = default or []
        self.interfaces = interfaces or {}
        self.error = error
        self.routed_calls = []
        self.default_calls = 0
        self.interface_calls = []

    @staticmethod
    def _next(results, calls):
        if results and isinstance(results[0], list):
            return list(results[min(calls, len(results) - 1)])
        return list(results)

    def addresses_routing_to(self, targets, validity):
        self.routed_calls.append(list(targets))
        if self.error:
            raise self.error
        return self._next(self.routed, len(self.routed_calls) - 1)

    def addresses_on_default_route(self, validity):
        self.default_calls += 1
        if self.error:
            raise self.error
        return self._next(self.default, self.default_calls - 1)

    def suitable_interface(self, vip):
        self.interface_calls.append(vip)
        if self.error:
            raise self.error
        return self.interfaces.get(str(vip), InterfaceInfo())


class FakeMsg(dict):
    """Stand-in for a pyroute2 netlink message."""

    def __init__(self, attrs=None, **fields):
        super().__init__(fields)
        self.attrs = attrs or {}

    def get_attr(self, name, default=None):
        return self.attrs.get(name, default)


@pytest.fixture
def stub_resolver():
    return StubResolver


@pytest.fixture
def fake_msg():
    return FakeMsg


@pytest.fixture(autouse=True)
def reset_logging():
    """Point loguru back at the current stderr after each test."""
    yield
    configure_logging(LogLevel.INFO)
