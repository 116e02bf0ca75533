"""
Group Store
============
Creates, looks up and edits logistics groups. Groups are keyed by
an id of the form `group_<owner>_<n>`, where n comes from a
process-wide monotonic counter so two groups created within the
same tick never collide.
"""

import math
import logging
from typing import Optional

from crc.config.settings import Settings
from crc.core.errors import ErrorKind, Outcome
from crc.core.models import LogisticsGroup, is_positive_number
from crc.core.store import RegistryStore
from crc.drivers.host import HostBackend

logger = logging.getLogger(__name__)


class GroupStore:
    """Group lifecycle and per-entry edits."""

    def __init__(self, store: RegistryStore, host: HostBackend, settings: Settings):
        self.store = store
        self.host = host
        self.settings = settings

    def create_group(self, owner: Optional[int], name: str = None) -> Optional[str]:
        """Create an empty, unlocked group. Returns None if the owner is invalid."""
        if owner is None or not self.host.owner_exists(owner):
            logger.warning("Cannot create group: invalid owner %r", owner)
            return None

        group_id = "%s_%s_%d" % (
            self.settings.group_id_prefix, owner, self.store.next_group_number(),
        )
        self.store.groups[group_id] = LogisticsGroup(
            id=group_id,
            name=name or self.settings.default_group_name,
            owner=owner,
            created_tick=self.store.tick,
            default_buffer_multiplier=self.settings.default_buffer_multiplier,
        )
        logger.info(
            "Created group %s (%s) for owner %s",
            group_id, self.store.groups[group_id].name, owner,
        )
        return group_id

    def delete_group(self, group_id: str) -> bool:
        """Remove a group and its ownership entry. Idempotent."""
        if not group_id:
            return False
        if self.store.groups.pop(group_id, None) is not None:
            logger.info("Deleted group %s", group_id)
        self.store.ownership.pop(group_id, None)
        return True

    def get_group(self, group_id: str) -> Optional[LogisticsGroup]:
        return self.store.get_group(group_id)

    def list_groups_for_owner(self, owner: Optional[int]) -> list[LogisticsGroup]:
        if owner is None:
            return []
        return [g for g in self.store.groups.values() if g.owner == owner]

    def is_group_locked(self, group_id: str) -> bool:
        group = self.store.get_group(group_id)
        return bool(group and group.locked)

    def set_entry_enabled(self, group_id: str, entry: str, enabled: bool) -> Outcome:
        """Enable or disable one entry without removing it."""
        group = self.store.get_group(group_id)
        if group is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Group not found")
        request = group.requests.get(entry)
        if request is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Item not in group")
        request.enabled = bool(enabled)
        return Outcome.success()

    def is_entry_enabled(self, group_id: str, entry: str) -> bool:
        group = self.store.get_group(group_id)
        if group is None or entry not in group.requests:
            return False
        return group.requests[entry].enabled is not False

    def update_multipliers(self, group_id: str, multipliers: dict[str, float]) -> Outcome:
        """
        Recompute maximum = floor(minimum × multiplier) for entries
        already in the group. Unknown entries are skipped. Allowed
        while the group is locked.
        """
        group = self.store.get_group(group_id)
        if group is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Group not found")
        if not all(is_positive_number(m) for m in multipliers.values()):
            return Outcome.failure(
                ErrorKind.INVALID_INPUT, "Multiplier must be greater than 0"
            )

        for entry, multiplier in multipliers.items():
            request = group.requests.get(entry)
            if request is None:
                continue
            request.maximum_quantity = math.floor(request.minimum_quantity * multiplier)
        return Outcome.success()
