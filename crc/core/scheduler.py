"""
Cycle Driver
=============
Runs the two periodic actions off the host's tick counter:

    every process_interval_ticks  (≈ 1 s)
        for each controller:
            entity gone?  → queue for unregistration
            otherwise     → read channels → aggregate → translate → sync

    every cleanup_interval_ticks  (≈ 5 min)
        delete groups whose owner is gone
        unregister controllers whose entity or group is gone

One controller's failure is logged and skipped; the sweep always
continues with the next controller. A skipped or interrupted cycle
leaves the registry as of the last completed controller and only
delays the next refresh.
"""

import logging

from crc.config.settings import Settings
from crc.core.controller_registry import ControllerRegistry
from crc.core.group_store import GroupStore
from crc.core.store import RegistryStore
from crc.core.translator import SignalTranslator, aggregate_signals
from crc.drivers.host import HostBackend
from crc.drivers.sync_adapter import SyncAdapter

logger = logging.getLogger(__name__)


class CycleDriver:
    """Periodic translation/sync cycle and consistency sweep."""

    def __init__(
        self,
        store: RegistryStore,
        host: HostBackend,
        settings: Settings,
        registry: ControllerRegistry,
        groups: GroupStore,
        translator: SignalTranslator,
        sync: SyncAdapter,
    ):
        self.store = store
        self.host = host
        self.settings = settings
        self.registry = registry
        self.groups = groups
        self.translator = translator
        self.sync = sync

        self._cycle_count = 0
        self._cleanup_count = 0
        self._failure_count = 0

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def cleanup_count(self) -> int:
        return self._cleanup_count

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def on_tick(self, tick: int):
        """Dispatch the periodic actions due on this tick."""
        self.store.tick = tick
        if tick % self.settings.process_interval_ticks == 0:
            self.process_controllers()
        if tick % self.settings.cleanup_interval_ticks == 0:
            self.cleanup()

    def process_controllers(self):
        """One translation + sync pass over every registered controller."""
        self._cycle_count += 1
        to_remove = []

        for controller_id in list(self.store.controllers):
            if not self.host.is_entity_valid(controller_id):
                to_remove.append(controller_id)
                continue
            try:
                self._process_one(controller_id)
            except Exception:
                self._failure_count += 1
                logger.exception("Cycle failed for controller %s", controller_id)

        for controller_id in to_remove:
            self.registry.unregister(controller_id)

    def _process_one(self, controller_id: int):
        channels = self.host.read_signals(controller_id) or {}
        signals = aggregate_signals(channels.values())
        if self.translator.update_group_from_signals(controller_id, signals):
            controller = self.store.get_controller(controller_id)
            self.sync.sync(controller.group_id)

    def cleanup(self) -> tuple[int, int]:
        """
        Delete groups whose owner is gone, then remove controllers whose
        entity is gone or whose group no longer exists.
        Returns (controllers_removed, groups_removed).
        """
        self._cleanup_count += 1

        dead_groups = [
            gid for gid, group in list(self.store.groups.items())
            if not self.host.owner_exists(group.owner)
        ]
        for group_id in dead_groups:
            self.groups.delete_group(group_id)

        dead_controllers = [
            cid for cid, controller in list(self.store.controllers.items())
            if not self.host.is_entity_valid(cid)
            or controller.group_id not in self.store.groups
        ]
        for controller_id in dead_controllers:
            self.registry.unregister(controller_id)

        if dead_controllers or dead_groups:
            logger.info(
                "Cleanup removed %d controllers, %d groups",
                len(dead_controllers), len(dead_groups),
            )
        return len(dead_controllers), len(dead_groups)
