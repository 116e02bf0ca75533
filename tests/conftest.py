"""
Shared test fixtures for the circuit request controller test suite.
"""

import pytest

from crc.config.settings import Settings
from crc.core.store import RegistryStore
from crc.core.group_store import GroupStore
from crc.core.controller_registry import ControllerRegistry
from crc.core.translator import SignalTranslator
from crc.core.runtime import RequestRuntime
from crc.drivers.simulator import HostSimulator, InMemorySink
from crc.drivers.sync_adapter import SyncAdapter

PLATFORM = 1


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def store():
    return RegistryStore()


@pytest.fixture
def simulator():
    host = HostSimulator()
    host.add_owner(PLATFORM)
    return host


@pytest.fixture
def sink():
    return InMemorySink()


@pytest.fixture
def group_store(store, simulator, settings):
    return GroupStore(store, simulator, settings)


@pytest.fixture
def registry(store, simulator, settings):
    return ControllerRegistry(store, simulator, settings)


@pytest.fixture
def translator(store, settings):
    return SignalTranslator(store, settings)


@pytest.fixture
def sync_adapter(store, simulator, sink):
    return SyncAdapter(store, simulator, sink)


@pytest.fixture
def runtime(simulator, sink, settings):
    """Full runtime on the simulated host (clock not started)."""
    return RequestRuntime(host=simulator, sink=sink, settings=settings)


@pytest.fixture
def group_id(group_store):
    return group_store.create_group(PLATFORM, "Test Group")


@pytest.fixture
def entity(simulator):
    return simulator.build_entity()
