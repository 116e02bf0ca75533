"""
Controller Registry
====================
Owns controller records and enforces the global rule that a group
is driven by at most one controller.

Controller lifecycle:

    UNREGISTERED ──register()──► REGISTERED ──unregister()──► UNREGISTERED

A prior owner counts as live only while its record exists AND its
host entity is still valid. A stale owner is evicted lazily, at the
next registration attempt for that group.
"""

import logging
from typing import Optional

from crc.config.settings import Settings
from crc.core.errors import ErrorKind, Outcome
from crc.core.models import Controller, Override, is_positive_number
from crc.core.store import RegistryStore
from crc.drivers.host import HostBackend

logger = logging.getLogger(__name__)


class ControllerRegistry:
    """Registration, unregistration and per-controller tuning."""

    def __init__(self, store: RegistryStore, host: HostBackend, settings: Settings):
        self.store = store
        self.host = host
        self.settings = settings

    def is_live(self, controller_id: int) -> bool:
        return (
            controller_id in self.store.controllers
            and self.host.is_entity_valid(controller_id)
        )

    def register(self, controller_id: Optional[int], group_id: Optional[str],
                 target: str = None) -> Outcome:
        """Bind a controller to a group and lock the group."""
        if controller_id is None or not self.host.is_entity_valid(controller_id):
            return Outcome.failure(ErrorKind.INVALID_INPUT, "Invalid controller entity")
        if not group_id:
            return Outcome.failure(ErrorKind.INVALID_INPUT, "No group ID specified")

        group = self.store.get_group(group_id)
        if group is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Group does not exist")

        existing_id = self.store.owner_of(group_id)
        if existing_id is not None and existing_id != controller_id:
            if self.is_live(existing_id):
                logger.warning(
                    "Controller %s rejected: group %s held by controller %s",
                    controller_id, group_id, existing_id,
                )
                return Outcome.failure(
                    ErrorKind.CONFLICT,
                    "Group is already controlled by another circuit controller",
                )
            logger.info(
                "Evicting stale controller %s from group %s", existing_id, group_id
            )
            self.store.controllers.pop(existing_id, None)
            del self.store.ownership[group_id]

        # Moving to another group releases the old one first
        previous = self.store.get_controller(controller_id)
        if previous is not None and previous.group_id != group_id:
            self._release(previous)

        self.store.controllers[controller_id] = Controller(
            id=controller_id,
            group_id=group_id,
            target=target or self.settings.default_target,
            default_buffer_multiplier=self.settings.default_buffer_multiplier,
        )
        self.store.ownership[group_id] = controller_id
        group.locked = True

        logger.info("Controller %s registered on group %s", controller_id, group_id)
        return Outcome.success("Controller registered successfully")

    def unregister(self, controller_id: Optional[int]) -> bool:
        """Remove a controller and unlock its group. False if unknown."""
        if controller_id is None:
            return False
        controller = self.store.controllers.pop(controller_id, None)
        if controller is None:
            return False
        self._release(controller)
        logger.info("Controller %s unregistered", controller_id)
        return True

    def _release(self, controller: Controller):
        """Clear the ownership entry and unlock, if still held by this controller."""
        group_id = controller.group_id
        if self.store.ownership.get(group_id) != controller.id:
            return
        del self.store.ownership[group_id]
        group = self.store.get_group(group_id)
        if group is not None:
            group.locked = False

    def get_controller(self, controller_id: int) -> Optional[Controller]:
        return self.store.get_controller(controller_id)

    # ── Tuning ───────────────────────────────────────────────

    def set_default_multiplier(self, controller_id: int, value: float) -> Outcome:
        controller = self.store.get_controller(controller_id)
        if controller is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Controller not found")
        if not is_positive_number(value):
            return Outcome.failure(
                ErrorKind.INVALID_INPUT, "Multiplier must be greater than 0"
            )
        controller.default_buffer_multiplier = float(value)
        return Outcome.success()

    def set_override(self, controller_id: int, entry: str,
                     override: Optional[Override]) -> Outcome:
        """Set an item override. Passing None reverts the item to the default."""
        controller = self.store.get_controller(controller_id)
        if controller is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Controller not found")

        if override is None:
            controller.item_overrides.pop(entry, None)
            return Outcome.success()

        problem = override.validate()
        if problem:
            return Outcome.failure(ErrorKind.INVALID_INPUT, problem)

        controller.item_overrides[entry] = Override(
            buffer_multiplier=override.buffer_multiplier,
            maximum_quantity=override.maximum_quantity,
        )
        return Outcome.success()

    def get_overrides(self, controller_id: int) -> dict[str, Override]:
        controller = self.store.get_controller(controller_id)
        if controller is None:
            return {}
        return dict(controller.item_overrides)
