"""
Host and Sink Interfaces
=========================
The registry never holds handles to host objects. It keeps ids and
asks the host, every time, whether they are still alive.

  HostBackend:  liveness checks and raw signal readings
  RequestSink:  downstream consumer of computed requests

The sink is optional. Composition injects NullRequestSink when no
downstream integration is present, so sync never has to check for
one at call time.
"""

from typing import Protocol

RED_CHANNEL = "red"
GREEN_CHANNEL = "green"


class HostBackend(Protocol):
    """
    Protocol for host environment implementations.

    read_signals returns channel name → list of Signal readings.
    """

    def is_entity_valid(self, entity_id: int) -> bool: ...
    def owner_exists(self, owner: int) -> bool: ...
    def read_signals(self, entity_id: int) -> dict[str, list]: ...


class RequestSink(Protocol):
    """
    Protocol for downstream request consumers.

    Older sinks accept only (owner, entry, minimum) and reject the
    maximum argument.
    """

    available: bool

    def get_requests(self, owner: int) -> dict: ...
    def remove_request(self, owner: int, entry: str) -> None: ...
    def register_request(self, owner: int, entry: str, minimum: int, maximum: int = None) -> None: ...


class NullRequestSink:
    """Sink used when no downstream integration is installed."""

    available = False

    def get_requests(self, owner: int) -> dict:
        return {}

    def remove_request(self, owner: int, entry: str) -> None:
        pass

    def register_request(self, owner: int, entry: str, minimum: int, maximum: int = None) -> None:
        pass
