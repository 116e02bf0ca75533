"""
Tests for runtime Settings.
"""

import json

from crc.config.settings import Settings


class TestSettings:

    def test_defaults(self, settings):
        assert settings.process_interval_ticks == 60
        assert settings.cleanup_interval_ticks == 18000
        assert settings.default_buffer_multiplier == 2.0
        assert settings.default_target == "nauvis"
        assert settings.signal_type == "item"

    def test_update(self, settings):
        assert settings.update("default_buffer_multiplier", "1.5")
        assert settings.default_buffer_multiplier == 1.5

    def test_update_unknown_key(self, settings):
        assert not settings.update("nonexistent", 1)

    def test_update_private_key(self, settings):
        assert not settings.update("_config_path", "elsewhere.json")

    def test_update_bad_value(self, settings):
        assert not settings.update("process_interval_ticks", "soon")
        assert settings.process_interval_ticks == 60

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "cfg" / "settings.json"
        settings = Settings()
        settings.update("default_target", "vulcanus")
        settings.save(str(path))

        loaded = Settings.load(str(path))
        assert loaded.default_target == "vulcanus"
        assert "_config_path" not in json.loads(path.read_text())

    def test_load_missing_file_gives_defaults(self, tmp_path):
        loaded = Settings.load(str(tmp_path / "missing.json"))
        assert loaded.as_dict() == Settings().as_dict()

    def test_load_coerces_types(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"process_interval_ticks": "30", "bogus": 1}))
        loaded = Settings.load(str(path))
        assert loaded.process_interval_ticks == 30
        assert not hasattr(loaded, "bogus")

    def test_update_rejects_non_positive_multiplier(self, settings):
        assert not settings.update("default_buffer_multiplier", 0)
        assert not settings.update("default_buffer_multiplier", -2.0)
        assert settings.default_buffer_multiplier == 2.0

    def test_update_rejects_zero_intervals(self, settings):
        for key in ("process_interval_ticks", "cleanup_interval_ticks", "ticks_per_second"):
            assert not settings.update(key, 0)
        assert settings.process_interval_ticks == 60
        assert settings.cleanup_interval_ticks == 18000
        assert settings.ticks_per_second == 60

    def test_load_keeps_defaults_for_out_of_range(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "default_buffer_multiplier": 0,
            "process_interval_ticks": 0,
            "cleanup_interval_ticks": "later",
            "default_target": "fulgora",
        }))
        loaded = Settings.load(str(path))
        assert loaded.default_buffer_multiplier == 2.0
        assert loaded.process_interval_ticks == 60
        assert loaded.cleanup_interval_ticks == 18000
        assert loaded.default_target == "fulgora"
