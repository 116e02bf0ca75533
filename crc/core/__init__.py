from crc.core.models import Controller, LogisticsGroup, Override, RequestEntry, Signal
from crc.core.errors import ErrorKind, Outcome
from crc.core.store import RegistryStore
from crc.core.group_store import GroupStore
from crc.core.controller_registry import ControllerRegistry
from crc.core.translator import SignalTranslator

__all__ = [
    "Controller",
    "LogisticsGroup",
    "Override",
    "RequestEntry",
    "Signal",
    "ErrorKind",
    "Outcome",
    "RegistryStore",
    "GroupStore",
    "ControllerRegistry",
    "SignalTranslator",
]
