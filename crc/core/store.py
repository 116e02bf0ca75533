"""
Registry Store
===============
Single owner of all mutable registry state:

  - groups:     group_id → LogisticsGroup
  - controllers: controller_id → Controller
  - ownership:  group_id → controller_id

The ownership index is the single source of truth for the
one-controller-per-group rule. A group is locked iff the index
maps it to a controller record that exists.

The store is created once per process and injected into every
component. Execution is tick-driven and single-threaded by
default; when a threaded host drives it, callers hold `lock`
around each full operation (registration, translation, sync,
cleanup).
"""

import itertools
import logging
import threading
from dataclasses import asdict
from typing import Optional

from crc.core.models import Controller, LogisticsGroup, Override, RequestEntry

logger = logging.getLogger(__name__)


class RegistryStore:
    """Groups, controllers and the group ownership index."""

    def __init__(self):
        self.lock = threading.RLock()
        self.groups: dict[str, LogisticsGroup] = {}
        self.controllers: dict[int, Controller] = {}
        self.ownership: dict[str, int] = {}
        self.tick = 0
        self._group_seq = itertools.count(1)

    def next_group_number(self) -> int:
        """Monotonic counter used to build unique group ids."""
        return next(self._group_seq)

    def get_group(self, group_id: str) -> Optional[LogisticsGroup]:
        return self.groups.get(group_id)

    def get_controller(self, controller_id: int) -> Optional[Controller]:
        return self.controllers.get(controller_id)

    def owner_of(self, group_id: str) -> Optional[int]:
        """Controller id currently holding the group, if any."""
        return self.ownership.get(group_id)

    # ── Consistency ──────────────────────────────────────────

    def repair_ownership(self) -> int:
        """
        Rebuild the ownership index from the controller records and
        reset every group's locked flag to match.

        Controllers whose group no longer exists are dropped. If two
        controllers claim the same group, the first one seen keeps it.
        Returns the number of corrections made.
        """
        fixes = 0
        rebuilt: dict[str, int] = {}

        for controller_id in list(self.controllers):
            controller = self.controllers[controller_id]
            if controller.group_id not in self.groups:
                logger.warning(
                    "Dropping controller %s: group %s does not exist",
                    controller_id, controller.group_id,
                )
                del self.controllers[controller_id]
                fixes += 1
            elif controller.group_id in rebuilt:
                logger.warning(
                    "Dropping controller %s: group %s already owned by %s",
                    controller_id, controller.group_id,
                    rebuilt[controller.group_id],
                )
                del self.controllers[controller_id]
                fixes += 1
            else:
                rebuilt[controller.group_id] = controller_id

        if rebuilt != self.ownership:
            fixes += len(set(rebuilt.items()) ^ set(self.ownership.items()))
        self.ownership = rebuilt

        for group_id, group in self.groups.items():
            locked = group_id in rebuilt
            if group.locked != locked:
                group.locked = locked
                fixes += 1

        if fixes:
            logger.info("Ownership index repaired (%d corrections)", fixes)
        return fixes

    # ── Snapshot / Restore ───────────────────────────────────

    def snapshot(self) -> dict:
        """Return the registry state as plain dicts."""
        with self.lock:
            return {
                "tick": self.tick,
                "groups": {gid: asdict(g) for gid, g in self.groups.items()},
                "controllers": {
                    str(cid): asdict(c) for cid, c in self.controllers.items()
                },
                "ownership": dict(self.ownership),
            }

    def restore(self, data: dict) -> int:
        """
        Replace the registry state with a snapshot, then repair the
        ownership index. Returns the number of corrections made.
        """
        with self.lock:
            self.tick = int(data.get("tick", 0))
            self.groups = {}
            for gid, raw in data.get("groups", {}).items():
                requests = {
                    name: RequestEntry(**entry)
                    for name, entry in raw.get("requests", {}).items()
                }
                self.groups[gid] = LogisticsGroup(
                    **{**raw, "requests": requests}
                )

            self.controllers = {}
            for cid, raw in data.get("controllers", {}).items():
                overrides = {
                    name: Override(**ov)
                    for name, ov in raw.get("item_overrides", {}).items()
                }
                self.controllers[int(cid)] = Controller(
                    **{**raw, "item_overrides": overrides}
                )

            self.ownership = {
                gid: int(cid) for gid, cid in data.get("ownership", {}).items()
            }

            # Counter resumes past every id already handed out
            highest = 0
            for gid in self.groups:
                suffix = gid.rsplit("_", 1)[-1]
                if suffix.isdigit():
                    highest = max(highest, int(suffix))
            self._group_seq = itertools.count(highest + 1)

            return self.repair_ownership()
