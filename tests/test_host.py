"""
Tests for the host and sink interfaces.
"""

from crc.drivers import host
from crc.drivers.host import NullRequestSink


class TestNullRequestSink:

    def test_is_unavailable_noop(self):
        sink = NullRequestSink()
        assert sink.available is False
        sink.register_request(1, "gear", 10, 20)
        sink.remove_request(1, "gear")
        assert sink.get_requests(1) == {}

    def test_module_has_no_logger(self):
        assert not hasattr(host, "logger")
