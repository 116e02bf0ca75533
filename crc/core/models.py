"""
Registry Data Model
====================
Records held by the RegistryStore:

  - LogisticsGroup: named set of request entries for one owner
  - RequestEntry:   minimum / maximum quantity for one item
  - Controller:     the single authority driving one group
  - Override:       per-item multiplier or fixed maximum
  - Signal:         one raw reading from an input channel

A Controller refers to its group by id only; deleting a group
never requires walking the controllers.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Optional


def is_positive_number(value) -> bool:
    """True for a finite real number > 0. Bools do not count."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


@dataclass
class RequestEntry:
    """One requested item within a group."""
    minimum_quantity: int = 0
    maximum_quantity: int = 0
    requested_quantity: int = 0    # Min-only value for legacy sinks
    enabled: bool = True


@dataclass
class LogisticsGroup:
    """A named collection of requests tied to one owning collection."""
    id: str
    name: str
    owner: int
    requests: dict[str, RequestEntry] = field(default_factory=dict)
    locked: bool = False
    created_tick: int = 0
    default_buffer_multiplier: float = 2.0


@dataclass
class Override:
    """
    Per-item customization of a controller's request math.

    A fixed maximum wins over any multiplier; a multiplier here
    wins over the controller default.
    """
    buffer_multiplier: Optional[float] = None
    maximum_quantity: Optional[int] = None

    def validate(self) -> Optional[str]:
        """Return a reason string if the override is invalid."""
        if self.buffer_multiplier is not None and not is_positive_number(self.buffer_multiplier):
            return "Multiplier must be greater than 0"
        if self.maximum_quantity is not None:
            if isinstance(self.maximum_quantity, bool) or not isinstance(self.maximum_quantity, int):
                return "Maximum quantity must be a whole number"
            if self.maximum_quantity < 0:
                return "Maximum quantity must not be negative"
        return None


@dataclass
class Controller:
    """Controller record, keyed by the id of its host entity."""
    id: int
    group_id: str
    target: str = "nauvis"
    last_update_tick: int = 0
    default_buffer_multiplier: float = 2.0
    item_overrides: dict[str, Override] = field(default_factory=dict)


@dataclass(frozen=True)
class Signal:
    """A single (type, name) reading from one input channel."""
    name: str
    count: int
    type: str = "item"

    @property
    def key(self) -> tuple:
        return (self.type, self.name)
