"""Pytest hooks and fixtures."""

import pytest

from bifrost.client.gateway import CallGateway
from bifrost.client.transport import LoopbackTransport
from bifrost.server.dispatcher import Dispatcher
from bifrost.server.host import PythonHostRuntime
from bifrost.utils.exceptions import UnknownModule

import sample_lib


class LibHost:
    """Host runtime serving a fixed module map; member lookup as in production."""

    def __init__(self, modules):
        self.modules = modules
        self.members = PythonHostRuntime()

    def resolve_module(self, name):
        try:
            return self.modules[name]
        except KeyError:
            raise UnknownModule(name) from None

    def resolve_member(self, obj, name):
        return self.members.resolve_member(obj, name)


@pytest.fixture
def dispatcher():
    return Dispatcher(LibHost({"lib": sample_lib}))


@pytest.fixture
def gateway(dispatcher):
    return CallGateway(LoopbackTransport(dispatcher))


@pytest.fixture
def lib(gateway):
    return gateway.import_module("lib")
