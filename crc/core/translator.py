"""
Signal Translator
==================
Turns raw channel readings into request entries for a controller's
group. Each signal count is the MINIMUM wanted quantity; the maximum
is derived from it:

    multiplier = override.buffer_multiplier or controller default
    maximum    = floor(minimum × multiplier)
    maximum    = override.maximum_quantity    (if set, wins outright)

The new mapping replaces the group's requests each cycle, so items
no longer signalled drop out. The enabled flag of an item that is
still signalled carries over from the previous cycle.
"""

import math
import logging
from typing import Iterable, Optional

from crc.config.settings import Settings
from crc.core.models import Controller, RequestEntry, Signal
from crc.core.store import RegistryStore

logger = logging.getLogger(__name__)


def aggregate_signals(channels: Iterable[Iterable[Signal]]) -> list[Signal]:
    """Sum readings with the same (type, name) across channels, in first-seen order."""
    totals: dict[tuple, Signal] = {}
    for readings in channels:
        for signal in readings:
            seen = totals.get(signal.key)
            if seen is None:
                totals[signal.key] = signal
            else:
                totals[signal.key] = Signal(
                    name=seen.name, count=seen.count + signal.count, type=seen.type,
                )
    return list(totals.values())


def translate(
    controller: Controller,
    signals: Iterable[Signal],
    previous: Optional[dict[str, RequestEntry]] = None,
    signal_type: str = "item",
) -> dict[str, RequestEntry]:
    """Compute the full request mapping for one controller."""
    previous = previous or {}
    requests: dict[str, RequestEntry] = {}

    for signal in signals:
        if signal.type != signal_type or signal.count <= 0:
            continue

        minimum = int(signal.count)
        override = controller.item_overrides.get(signal.name)

        multiplier = controller.default_buffer_multiplier
        if override is not None and override.buffer_multiplier is not None:
            multiplier = override.buffer_multiplier

        maximum = math.floor(minimum * multiplier)
        if override is not None and override.maximum_quantity is not None:
            maximum = override.maximum_quantity

        prior = previous.get(signal.name)
        requests[signal.name] = RequestEntry(
            minimum_quantity=minimum,
            maximum_quantity=maximum,
            requested_quantity=minimum,
            enabled=prior.enabled if prior is not None else True,
        )

    return requests


class SignalTranslator:
    """Applies translated signals to the controller's group in the store."""

    def __init__(self, store: RegistryStore, settings: Settings):
        self.store = store
        self.settings = settings

    def update_group_from_signals(self, controller_id: int,
                                  signals: Iterable[Signal]) -> bool:
        """Replace the group's requests. False if controller or group is unknown."""
        controller = self.store.get_controller(controller_id)
        if controller is None:
            return False
        group = self.store.get_group(controller.group_id)
        if group is None:
            return False

        group.requests = translate(
            controller, signals, group.requests, self.settings.signal_type,
        )
        controller.last_update_tick = self.store.tick
        logger.debug(
            "Controller %s → group %s: %d requests",
            controller_id, group.id, len(group.requests),
        )
        return True
