"""
Operation Outcomes
===================
Registry operations never abort the cycle driver. They report an
explicit outcome instead: a success flag, a human-readable reason,
and (on failure) the kind of error.

    INVALID_INPUT            malformed / absent ids, bad multipliers
    NOT_FOUND                unknown group, controller or entry
    CONFLICT                 group owned by another live controller
    INTEGRATION_UNAVAILABLE  optional sink missing (never a failure)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    INVALID_INPUT = "InvalidInput"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    INTEGRATION_UNAVAILABLE = "IntegrationUnavailable"


@dataclass(frozen=True)
class Outcome:
    """Result of a registry operation. Truthy exactly when it succeeded."""
    ok: bool
    reason: str = ""
    kind: Optional[ErrorKind] = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, reason: str = "") -> "Outcome":
        return cls(ok=True, reason=reason)

    @classmethod
    def failure(cls, kind: ErrorKind, reason: str) -> "Outcome":
        return cls(ok=False, reason=reason, kind=kind)
