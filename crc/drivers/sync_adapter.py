"""
Sync Adapter
=============
Pushes a group's requests to the downstream sink. Handles:

  - Resolving the group's owner (fails if the owner is gone)
  - Clearing every request the sink holds for that owner
  - Registering each enabled entry as (minimum, maximum)
  - Falling back to a min-only call for sinks that reject maximum

Sync is best-effort. With no sink installed it is a successful
no-op; a single rejected entry never aborts the rest.
"""

import logging
from typing import Optional

from crc.core.models import LogisticsGroup, RequestEntry
from crc.core.store import RegistryStore
from crc.drivers.host import HostBackend, NullRequestSink, RequestSink

logger = logging.getLogger(__name__)


class SyncAdapter:
    """Bridges group requests to a pluggable request sink."""

    def __init__(self, store: RegistryStore, host: HostBackend,
                 sink: Optional[RequestSink] = None):
        self.store = store
        self.host = host
        self.sink = sink or NullRequestSink()
        if not self.sink_available:
            logger.info("No request sink installed; sync is a no-op")

    @property
    def sink_available(self) -> bool:
        return getattr(self.sink, "available", True)

    def sync(self, group_id: str) -> bool:
        """Replace the owner's downstream requests with the group's enabled entries."""
        group = self.store.get_group(group_id)
        if group is None:
            return False
        if not self.host.owner_exists(group.owner):
            logger.debug("Sync skipped: owner %s of %s is gone", group.owner, group_id)
            return False
        if not self.sink_available:
            return True

        for entry in list(self.sink.get_requests(group.owner)):
            self.sink.remove_request(group.owner, entry)

        failed = 0
        for entry, request in group.requests.items():
            if request.enabled is False:
                continue
            if not self._register(group, entry, request):
                failed += 1

        logger.debug(
            "Synced group %s to owner %s (%d entries, %d failed)",
            group_id, group.owner, len(group.requests), failed,
        )
        return failed == 0

    def _register(self, group: LogisticsGroup, entry: str, request: RequestEntry) -> bool:
        maximum = request.maximum_quantity
        if maximum is None:
            maximum = request.requested_quantity
        try:
            self.sink.register_request(
                group.owner, entry, request.minimum_quantity, maximum,
            )
            return True
        except Exception:
            logger.debug("Sink rejected min+max for %s; using min-only call", entry)

        try:
            self.sink.register_request(
                group.owner, entry, request.requested_quantity or request.minimum_quantity,
            )
            return True
        except Exception:
            logger.warning("Sink write failed: %s/%s", group.id, entry)
            return False
