"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from shift_engine.core.config import Settings, parse_durations


class TestSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.COMPLIANCE_MIN_START == "06:00"
        assert config.COMPLIANCE_MAX_END == "22:00"
        assert config.COMPLIANCE_ALLOWED_DURATIONS == [4, 6, 8, 10, 12]
        assert config.NIGHT_SHIFT_START_HOUR == 22
        assert config.NIGHT_SHIFT_END_HOUR == 6

    def test_compliance_rule(self):
        rule = Settings(_env_file=None).compliance_rule

        assert rule.min_start_minutes == 360
        assert rule.max_end_minutes == 1320
        assert rule.allowed_durations == frozenset({4, 6, 8, 10, 12})

    def test_compliance_limits(self):
        limits = Settings(_env_file=None, WEEKLY_HOUR_LIMIT=38).compliance_limits

        assert limits.weekly_hour_limit == 38
        assert limits.overtime_shift_hours == 8

    def test_durations_from_csv_env(self, monkeypatch):
        monkeypatch.setenv("SHIFT_ENGINE_COMPLIANCE_ALLOWED_DURATIONS", "4, 8")

        config = Settings(_env_file=None)

        assert config.COMPLIANCE_ALLOWED_DURATIONS == [4, 8]
        assert config.compliance_rule.allowed_durations == frozenset({4, 8})

    def test_durations_from_json_env(self, monkeypatch):
        monkeypatch.setenv("SHIFT_ENGINE_COMPLIANCE_ALLOWED_DURATIONS", "[6, 12]")

        assert Settings(_env_file=None).COMPLIANCE_ALLOWED_DURATIONS == [6, 12]

    def test_window_from_env(self, monkeypatch):
        monkeypatch.setenv("SHIFT_ENGINE_COMPLIANCE_MIN_START", "07:30")

        assert Settings(_env_file=None).compliance_rule.min_start == "07:30"

    def test_inverted_window_rejected(self):
        with pytest.raises(ValidationError):
            Settings(
                _env_file=None, COMPLIANCE_MIN_START="22:00", COMPLIANCE_MAX_END="06:00"
            )

    def test_malformed_time_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_SHIFT_START="eight")

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, COMPLIANCE_ALLOWED_DURATIONS=[0, 8])


class TestParseDurations:
    """Test the duration list parser."""

    def test_csv(self):
        assert parse_durations("4,6, 8") == [4, 6, 8]

    def test_list_passes_through(self):
        assert parse_durations([4]) == [4]

    def test_rejects_other_types(self):
        with pytest.raises(ValueError):
            parse_durations(8)
