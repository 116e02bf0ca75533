"""
Host Simulator
===============
Simulates the host environment and a downstream request sink for
development and testing without a running game:

  - Owners (platforms) that can appear and vanish
  - Controller entities that can be built and destroyed
  - Red / green input channels with per-item readings
  - A sink that records registered requests per owner

Use HostSimulator as the HostBackend and InMemorySink as the
RequestSink when composing a RequestRuntime offline.
"""

import logging

from crc.core.models import Signal
from crc.drivers.host import GREEN_CHANNEL, RED_CHANNEL

logger = logging.getLogger(__name__)


class HostSimulator:
    """
    Simulated host with owners, entities and channel readings.

    Entity and owner ids are plain integers, mirroring the host's
    unit numbers and platform indices.
    """

    def __init__(self):
        self._owners: set[int] = set()
        self._entities: set[int] = set()
        self._channels: dict[int, dict[str, dict[tuple, int]]] = {}
        self._next_entity = 1000

    # ── HostBackend Protocol Implementation ──────────────────

    def is_entity_valid(self, entity_id: int) -> bool:
        return entity_id in self._entities

    def owner_exists(self, owner: int) -> bool:
        return owner in self._owners

    def read_signals(self, entity_id: int) -> dict[str, list[Signal]]:
        """Current readings on every channel wired to the entity."""
        channels = self._channels.get(entity_id, {})
        return {
            channel: [
                Signal(name=name, count=count, type=signal_type)
                for (signal_type, name), count in readings.items()
            ]
            for channel, readings in channels.items()
        }

    # ── Simulation Controls ──────────────────────────────────

    def add_owner(self, owner: int):
        self._owners.add(owner)

    def remove_owner(self, owner: int):
        """Simulate a platform being destroyed."""
        self._owners.discard(owner)

    def build_entity(self, entity_id: int = None) -> int:
        """Place a controller entity, returning its id."""
        if entity_id is None:
            self._next_entity += 1
            entity_id = self._next_entity
        self._entities.add(entity_id)
        self._channels.setdefault(
            entity_id, {RED_CHANNEL: {}, GREEN_CHANNEL: {}}
        )
        return entity_id

    def destroy_entity(self, entity_id: int):
        """Simulate the entity being mined or destroyed."""
        self._entities.discard(entity_id)
        self._channels.pop(entity_id, None)

    def set_signal(self, entity_id: int, name: str, count: int,
                   channel: str = RED_CHANNEL, signal_type: str = "item"):
        """Set (or clear, with count 0) one reading on a channel."""
        readings = self._channels.setdefault(entity_id, {}).setdefault(channel, {})
        if count == 0:
            readings.pop((signal_type, name), None)
        else:
            readings[(signal_type, name)] = count

    def clear_signals(self, entity_id: int):
        for readings in self._channels.get(entity_id, {}).values():
            readings.clear()


class InMemorySink:
    """
    Downstream sink that records requests per owner.

    With legacy=True it behaves like an older sink that has no
    maximum parameter and rejects the combined call.
    """

    available = True

    def __init__(self, legacy: bool = False):
        self.legacy = legacy
        self.requests: dict[int, dict[str, tuple]] = {}

    def get_requests(self, owner: int) -> dict:
        return dict(self.requests.get(owner, {}))

    def remove_request(self, owner: int, entry: str) -> None:
        self.requests.get(owner, {}).pop(entry, None)

    def register_request(self, owner: int, entry: str, minimum: int,
                         maximum: int = None) -> None:
        if self.legacy and maximum is not None:
            raise TypeError("register_request() takes no maximum argument")
        self.requests.setdefault(owner, {})[entry] = (minimum, maximum)
