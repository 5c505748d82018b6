"""Tests for timer display formatting."""

import pytest

from timerwidget.timer.formatter import format_time


class TestFormatTime:

    @pytest.mark.parametrize("seconds, expected", [
        (75, "01:15"),
        (3661, "1:01:01"),
        (-5, "-00:05"),
        (0, "00:00"),
        (59, "00:59"),
        (600, "10:00"),
        (3599, "59:59"),
        (3600, "1:00:00"),
        (36000, "10:00:00"),
        (-3661, "-1:01:01"),
        (-60, "-01:00"),
    ])
    def test_examples(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_hours_are_not_padded(self):
        assert format_time(2 * 3600 + 5).startswith("2:")
