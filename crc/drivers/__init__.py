from crc.drivers.host import HostBackend, RequestSink, NullRequestSink
from crc.drivers.sync_adapter import SyncAdapter
from crc.drivers.simulator import HostSimulator, InMemorySink

__all__ = [
    "HostBackend",
    "RequestSink",
    "NullRequestSink",
    "SyncAdapter",
    "HostSimulator",
    "InMemorySink",
]
