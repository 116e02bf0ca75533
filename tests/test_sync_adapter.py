"""
Tests for the Sync Adapter.
"""

import logging

from crc.core.models import RequestEntry
from crc.drivers.host import NullRequestSink
from crc.drivers.simulator import InMemorySink
from crc.drivers.sync_adapter import SyncAdapter

PLATFORM = 1


class TestSyncAdapter:

    def _fill(self, store, group_id):
        group = store.groups[group_id]
        group.requests = {
            "iron-plate": RequestEntry(1000, 2000, 1000),
            "gear": RequestEntry(10, 20, 10, enabled=False),
        }
        return group

    def test_sync_replaces_sink_requests(self, sync_adapter, sink, store, group_id):
        self._fill(store, group_id)
        sink.register_request(PLATFORM, "stale", 1, 2)

        assert sync_adapter.sync(group_id) is True
        assert sink.requests[PLATFORM] == {"iron-plate": (1000, 2000)}

    def test_disabled_entries_skipped(self, sync_adapter, sink, store, group_id):
        self._fill(store, group_id)
        sync_adapter.sync(group_id)
        assert "gear" not in sink.requests[PLATFORM]

    def test_legacy_sink_fallback(self, store, simulator, group_id):
        legacy = InMemorySink(legacy=True)
        adapter = SyncAdapter(store, simulator, legacy)
        self._fill(store, group_id)

        assert adapter.sync(group_id) is True
        assert legacy.requests[PLATFORM] == {"iron-plate": (1000, None)}

    def test_legacy_fallback_is_not_warned(self, store, simulator, group_id, caplog):
        adapter = SyncAdapter(store, simulator, InMemorySink(legacy=True))
        self._fill(store, group_id)

        with caplog.at_level(logging.DEBUG, logger="crc.drivers.sync_adapter"):
            for _ in range(3):
                assert adapter.sync(group_id)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_missing_group(self, sync_adapter):
        assert sync_adapter.sync("group_1_404") is False

    def test_missing_owner(self, sync_adapter, sink, simulator, store, group_id):
        self._fill(store, group_id)
        simulator.remove_owner(PLATFORM)
        assert sync_adapter.sync(group_id) is False
        assert sink.requests == {}

    def test_no_sink_is_success(self, store, simulator, group_id):
        adapter = SyncAdapter(store, simulator)
        self._fill(store, group_id)
        assert isinstance(adapter.sink, NullRequestSink)
        assert adapter.sink_available is False
        assert adapter.sync(group_id) is True

    def test_rejected_entry_does_not_stop_others(self, store, simulator, group_id):
        class PickySink(InMemorySink):
            def register_request(self, owner, entry, minimum, maximum=None):
                if entry == "iron-plate":
                    raise RuntimeError("unknown item")
                super().register_request(owner, entry, minimum, maximum)

        picky = PickySink()
        adapter = SyncAdapter(store, simulator, picky)
        group = self._fill(store, group_id)
        group.requests["copper-plate"] = RequestEntry(5, 10, 5)

        assert adapter.sync(group_id) is False
        assert picky.requests[PLATFORM] == {"copper-plate": (5, 10)}
