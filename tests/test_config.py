"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest

from flextime.config import (
    DEFAULT_HARVEST_TASK_IDS,
    EXPORT_DIR,
    Config,
    load_config,
)
from flextime.core.taxonomy import Category, ConfigurationError


@pytest.fixture
def write_config(tmp_path):
    path = tmp_path / "flextime.conf"

    def _write(text: str):
        path.write_text(text)
        return path

    return _write


def load_from(path: Path) -> Config:
    with patch("flextime.config.CONFIG_FILE", path):
        return load_config()


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_from(tmp_path / "missing.conf")
        assert config.provider == "harvest"
        assert config.hours_in_day == 7.5
        assert config.harvest_task_ids == DEFAULT_HARVEST_TASK_IDS

    def test_parses_values(self, write_config):
        config = load_from(
            write_config(
                "# flextime settings\n"
                "PROVIDER = AgileDay\n"
                'EXPORT_DIR = "~/exports/agileday" # downloaded nightly\n'
                "HOLIDAY_COUNTRY = se\n"
                "HOURS_IN_DAY = 8\n"
                "AWAY_CATEGORIES = vacation, unpaidLeave, parentalLeave\n"
                "not a setting\n"
            )
        )
        assert config.provider == "agileday"
        assert config.export_dir == "~/exports/agileday"
        assert config.holiday_country == "SE"
        assert config.hours_in_day == 8
        assert config.away() == {Category.VACATION, Category.UNPAID_LEAVE, Category.PARENTAL_LEAVE}

    def test_invalid_hours_keeps_default(self, write_config):
        config = load_from(write_config("HOURS_IN_DAY = seven\n"))
        assert config.hours_in_day == 7.5

    def test_task_ids(self, write_config):
        config = load_from(
            write_config(
                "TASK_ID_VACATION = 42 # annual\n"
                "TASK_ID_SICK_LEAVE_CHILDS_SICKNESS = 43\n"
                "TASK_ID_PUBLIC_HOLIDAY = 44\n"
                "AGILEDAY_TASK_FLEX_LEAVE = Flex Leave\n"
                "TASK_ID_NOT_A_THING = 1\n"
            )
        )
        assert config.harvest_task_ids["vacation"] == "42"
        assert config.harvest_task_ids["sickLeaveChildsSickness"] == "43"
        assert config.harvest_task_ids["publicHoliday"] == "44"
        assert config.agileday_task_names["flexLeave"] == "flex leave"
        assert "not_a_thing" not in config.harvest_task_ids

    def test_headers(self, write_config):
        config = load_from(write_config("BILLABLE_STATS_COLUMN_HEADERS = Projekti, Tunnit\n"))
        assert config.billable_stats_column_headers == ["Projekti", "Tunnit"]


class TestConfig:
    def test_export_path_default(self):
        assert Config(provider="agileday").export_path == EXPORT_DIR / "agileday"

    def test_export_path_expands_user(self):
        path = Config(export_dir="~/dumps").export_path
        assert "~" not in str(path)
        assert path == Path.home() / "dumps"

    def test_calendar(self):
        calendar = Config(hours_in_day=8, holiday_country="SE").calendar()
        assert calendar.hours_in_day == 8
        assert calendar.country == "SE"

    def test_harvest_taxonomy(self):
        taxonomy = Config().taxonomy()
        assert taxonomy.category_for("11369141") == Category.VACATION
        assert not taxonomy.case_insensitive

    def test_agileday_taxonomy(self):
        taxonomy = Config().taxonomy("agileday")
        assert taxonomy.category_for("Annual Holiday") == Category.VACATION

    def test_duplicate_task_ids(self):
        config = Config(harvest_task_ids={"vacation": "1", "sickLeave": "1"})
        with pytest.raises(ConfigurationError):
            config.taxonomy()

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="toggl"):
            Config(provider="toggl").taxonomy()

    def test_unknown_away_category(self):
        with pytest.raises(ConfigurationError):
            Config(away_categories=["vacation", "beach"]).away()
