"""
Request Runtime
================
Wires the store, group store, controller registry, translator,
sync adapter and cycle driver together and exposes:

    1. Lifecycle hooks consumed from the host
         on_init, on_entity_built, on_entity_removed, on_tick
    2. The inbound command surface for other integrations
         create_group, register_controller, set_item_override, ...
    3. A standalone tick clock (start / stop / single_tick)

Every public operation holds the store's lock for its full
duration, so a threaded host sees each operation as atomic.
"""

import time
import logging
import threading
from typing import Optional

from crc.config.settings import Settings
from crc.core.controller_registry import ControllerRegistry
from crc.core.errors import Outcome
from crc.core.group_store import GroupStore
from crc.core.models import Controller, LogisticsGroup, Override
from crc.core.scheduler import CycleDriver
from crc.core.store import RegistryStore
from crc.core.translator import SignalTranslator
from crc.drivers.host import HostBackend, RequestSink
from crc.drivers.sync_adapter import SyncAdapter

logger = logging.getLogger(__name__)


class RequestRuntime:
    """
    Circuit request controller runtime.

    Owns one RegistryStore for the lifetime of the process and
    injects it, with the host and optional sink, into every
    component.
    """

    def __init__(
        self,
        host: HostBackend,
        sink: Optional[RequestSink] = None,
        settings: Optional[Settings] = None,
        store: Optional[RegistryStore] = None,
    ):
        self.settings = settings or Settings()
        self.store = store or RegistryStore()
        self.host = host

        self.groups = GroupStore(self.store, host, self.settings)
        self.registry = ControllerRegistry(self.store, host, self.settings)
        self.translator = SignalTranslator(self.store, self.settings)
        self.sync = SyncAdapter(self.store, host, sink)
        self.driver = CycleDriver(
            self.store, host, self.settings,
            self.registry, self.groups, self.translator, self.sync,
        )

        # Standalone clock state
        self._running = False
        self._tick = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def tick(self) -> int:
        return self._tick

    # ── Lifecycle Hooks ──────────────────────────────────────

    def on_init(self) -> int:
        """Host (re)load: bring the ownership index back in line."""
        with self.store.lock:
            return self.store.repair_ownership()

    def on_entity_built(self, entity_id: int):
        """Nothing to do until the entity is registered to a group."""
        logger.debug("Controller entity %s built", entity_id)

    def on_entity_removed(self, entity_id: int) -> bool:
        with self.store.lock:
            return self.registry.unregister(entity_id)

    def on_tick(self, tick: int):
        with self.store.lock:
            self._tick = tick
            self.driver.on_tick(tick)

    # ── Standalone Tick Clock ────────────────────────────────

    def start(self, blocking: bool = True):
        """Start feeding ticks at settings.ticks_per_second."""
        self._running = True
        logger.info(
            "Request runtime starting (%d ticks/s)", self.settings.ticks_per_second,
        )
        if blocking:
            self._tick_loop()
        else:
            self._thread = threading.Thread(target=self._tick_loop, daemon=True)
            self._thread.start()

    def stop(self):
        logger.info("Request runtime stopping...")
        self._running = False
        if self._thread:
            self._thread.join(timeout=5.0)
        logger.info("Request runtime stopped at tick %d", self._tick)

    def single_tick(self):
        """Advance exactly one tick (for testing)."""
        self.on_tick(self._tick + 1)

    def _tick_loop(self):
        period = 1.0 / self.settings.ticks_per_second

        while self._running:
            t_start = time.monotonic()
            try:
                self.single_tick()
            except Exception:
                logger.exception("Tick %d exception", self._tick)

            elapsed = time.monotonic() - t_start
            sleep_time = period - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)
            else:
                logger.warning(
                    "Tick overrun: %.1f ms (target: %.1f ms)",
                    elapsed * 1000.0, period * 1000.0,
                )

    # ── Command Surface ──────────────────────────────────────

    def create_group(self, owner: int, name: str = None) -> Optional[str]:
        with self.store.lock:
            return self.groups.create_group(owner, name)

    def delete_group(self, group_id: str) -> bool:
        with self.store.lock:
            return self.groups.delete_group(group_id)

    def list_groups_for_owner(self, owner: int) -> list[LogisticsGroup]:
        with self.store.lock:
            return self.groups.list_groups_for_owner(owner)

    def get_group(self, group_id: str) -> Optional[LogisticsGroup]:
        with self.store.lock:
            return self.groups.get_group(group_id)

    def is_group_locked(self, group_id: str) -> bool:
        with self.store.lock:
            return self.groups.is_group_locked(group_id)

    def register_controller(self, controller_id: int, group_id: str,
                            target: str = None) -> Outcome:
        with self.store.lock:
            return self.registry.register(controller_id, group_id, target)

    def unregister_controller(self, controller_id: int) -> bool:
        with self.store.lock:
            return self.registry.unregister(controller_id)

    def get_controller(self, controller_id: int) -> Optional[Controller]:
        with self.store.lock:
            return self.registry.get_controller(controller_id)

    def set_default_multiplier(self, controller_id: int, multiplier: float) -> Outcome:
        with self.store.lock:
            return self.registry.set_default_multiplier(controller_id, multiplier)

    def set_item_override(self, controller_id: int, item: str,
                          override: Optional[Override]) -> Outcome:
        with self.store.lock:
            return self.registry.set_override(controller_id, item, override)

    def remove_item_override(self, controller_id: int, item: str) -> Outcome:
        return self.set_item_override(controller_id, item, None)

    def get_item_overrides(self, controller_id: int) -> dict[str, Override]:
        with self.store.lock:
            return self.registry.get_overrides(controller_id)

    def update_group_multipliers(self, group_id: str,
                                 multipliers: dict[str, float]) -> Outcome:
        with self.store.lock:
            return self.groups.update_multipliers(group_id, multipliers)

    def set_item_enabled(self, group_id: str, item: str, enabled: bool) -> Outcome:
        with self.store.lock:
            return self.groups.set_entry_enabled(group_id, item, enabled)

    def is_item_enabled(self, group_id: str, item: str) -> bool:
        with self.store.lock:
            return self.groups.is_entry_enabled(group_id, item)

    def get_status(self) -> dict:
        """Return a status snapshot of the registry and cycle driver."""
        with self.store.lock:
            return {
                "tick": self._tick,
                "groups": len(self.store.groups),
                "controllers": len(self.store.controllers),
                "locked_groups": sum(1 for g in self.store.groups.values() if g.locked),
                "cycles": self.driver.cycle_count,
                "cleanups": self.driver.cleanup_count,
                "cycle_failures": self.driver.failure_count,
                "sink_available": self.sync.sink_available,
            }
