"""
Tests for time formatting helpers.

Durations are displayed as HH:MM:SS everywhere; hours never wrap.
"""

import pytest

from worktimer.i18n import set_language
from worktimer.utils import format_duration_words, format_time, parse_time


@pytest.fixture(autouse=True)
def english():
    set_language("en")
    yield
    set_language("en")


class TestFormatTime:

    @pytest.mark.parametrize("seconds, expected", [
        (0, "00:00:00"),
        (59, "00:00:59"),
        (65, "00:01:05"),
        (3661, "01:01:01"),
        (86399, "23:59:59"),
        (360000, "100:00:00"),
    ])
    def test_format(self, seconds: int, expected: str):
        assert format_time(seconds) == expected

    def test_negative_is_clamped(self):
        assert format_time(-5) == "00:00:00"

    def test_none_is_zero(self):
        assert format_time(None) == "00:00:00"

    @pytest.mark.parametrize("seconds", [0, 1, 3599, 3600, 45296, 400000])
    def test_parse_inverts_format(self, seconds: int):
        assert parse_time(format_time(seconds)) == seconds


class TestParseTime:

    @pytest.mark.parametrize("text", ["01:60:00", "00:00:60", "-1:00:00", "abc", "01:02"])
    def test_invalid(self, text: str):
        with pytest.raises(ValueError):
            parse_time(text)


class TestDurationWords:

    @pytest.mark.parametrize("seconds, expected", [
        (0, "less than a minute"),
        (59, "less than a minute"),
        (300, "5 min"),
        (7200, "2 h"),
        (7500, "2 h 5 min"),
    ])
    def test_english(self, seconds: int, expected: str):
        assert format_duration_words(seconds) == expected

    def test_arabic(self):
        set_language("ar")
        assert format_duration_words(300) != "5 min"
        assert "5" in format_duration_words(300)
