"""Tests for configuration loading."""

from pathlib import Path

import pytest

from dayplan.config import DATA_DIR, Config, load_config
from dayplan.core.slots import DEFAULT_SLOTS


@pytest.fixture
def write_config(tmp_path):
    def _write(text: str) -> Path:
        path = tmp_path / "dayplan.conf"
        path.write_text(text)
        return path

    return _write


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.conf")
        assert config == Config()

    def test_parses_keys(self, write_config):
        path = write_config(
            """
            # dayplan settings
            DB_PATH = "~/planner/tasks.sqlite3"  # quoted with comment
            DAY_START = 7
            DAY_END = 22:00
            TIMEZONE = Europe/Berlin # inline comment
            LOG_LEVEL = debug
            """
        )
        config = load_config(path)

        assert config.db_path == "~/planner/tasks.sqlite3"
        assert config.day_start == 7
        assert config.day_end == 22
        assert config.timezone == "Europe/Berlin"
        assert config.log_level == "DEBUG"

    def test_parses_slot_list(self, write_config):
        config = load_config(write_config("SLOTS = 07:00, 12:00 ,19:00,"))
        assert config.slots == ["07:00", "12:00", "19:00"]

    def test_invalid_hour_keeps_default(self, write_config):
        config = load_config(write_config("DAY_START = early"))
        assert config.day_start == 8

    def test_skips_lines_without_equals(self, write_config):
        config = load_config(write_config("not a setting\nTIMEZONE = UTC"))
        assert config.timezone == "UTC"


class TestConfigCalendar:
    def test_default_calendar(self):
        assert Config().calendar().slots() == DEFAULT_SLOTS

    def test_hour_range(self):
        assert Config(day_start=9, day_end=11).calendar().slots() == ("09:00", "10:00", "11:00")

    def test_explicit_slots_win(self):
        config = Config(day_start=9, day_end=11, slots=["07:00", "19:00"])
        assert config.calendar().slots() == ("07:00", "19:00")

    def test_invalid_slots_fall_back_to_default(self):
        assert Config(slots=["09:00", "09:00"]).calendar().slots() == DEFAULT_SLOTS
        assert Config(day_start=20, day_end=8).calendar().slots() == DEFAULT_SLOTS


class TestDatabasePath:
    def test_configured_path_expands_user(self):
        config = Config(db_path="~/planner/tasks.sqlite3")
        assert config.database_path() == Path.home() / "planner" / "tasks.sqlite3"

    def test_falls_back_to_data_dir(self):
        assert Config().database_path() == DATA_DIR / "tasks.sqlite3"
