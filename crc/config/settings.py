"""
Runtime Settings for the Circuit Request Controller
=====================================================
All tunable constants of the registry and its cycle driver.
These can be adjusted at runtime and persisted to disk as JSON.

Tick intervals assume the host runs at 60 ticks per second:
  - 60 ticks     ≈ 1 second   (signal → request cycle)
  - 18000 ticks  ≈ 5 minutes  (consistency sweep)
"""

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Values outside these bounds are rejected by update() and load()
_POSITIVE = ("default_buffer_multiplier",)
_AT_LEAST_ONE = (
    "process_interval_ticks", "cleanup_interval_ticks", "ticks_per_second",
)


@dataclass
class Settings:
    """Tunable settings for groups, controllers and the cycle driver."""

    # ── Cycle Driver ─────────────────────────────────────────
    process_interval_ticks: int = 60       # Signal read + translate + sync
    cleanup_interval_ticks: int = 18000    # Stale controller / group sweep
    ticks_per_second: int = 60             # Standalone tick clock rate

    # ── Groups ───────────────────────────────────────────────
    default_group_name: str = "Logistics Group"
    group_id_prefix: str = "group"         # group_<owner>_<n>

    # ── Controllers ──────────────────────────────────────────
    default_buffer_multiplier: float = 2.0  # maximum = minimum × multiplier
    default_target: str = "nauvis"          # Home destination label

    # ── Signals ──────────────────────────────────────────────
    signal_type: str = "item"              # Only these become requests

    # ── Persistence ──────────────────────────────────────────
    _config_path: str = field(
        default="config/settings.json", repr=False
    )

    def save(self, path: str = None):
        """Persist current settings to JSON."""
        filepath = Path(path or self._config_path)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(json.dumps(self.as_dict(), indent=2))

    @classmethod
    def load(cls, path: str = None) -> "Settings":
        """Load settings from JSON, falling back to defaults."""
        filepath = Path(path or "config/settings.json")
        settings = cls()
        if filepath.exists():
            data = json.loads(filepath.read_text())
            for key, value in data.items():
                if not hasattr(settings, key) or key.startswith("_"):
                    continue
                if not settings.update(key, value):
                    logger.warning(
                        "Ignoring setting %s=%r; keeping %r",
                        key, value, getattr(settings, key),
                    )
        return settings

    def update(self, key: str, value) -> bool:
        """Update a single setting, returning True on success."""
        if not hasattr(self, key) or key.startswith("_"):
            return False
        expected_type = type(getattr(self, key))
        try:
            coerced = expected_type(value)
        except (ValueError, TypeError):
            return False
        if key in _POSITIVE and not coerced > 0:
            return False
        if key in _AT_LEAST_ONE and coerced < 1:
            return False
        setattr(self, key, coerced)
        return True

    def as_dict(self) -> dict:
        """Return all settings as a flat dictionary."""
        return {
            k: v for k, v in self.__dict__.items()
            if not k.startswith("_")
        }
