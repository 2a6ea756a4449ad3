from datetime import timedelta

import pytest

from circonus_adapter.core.durations import parse_duration


@pytest.mark.parametrize(
    "text,expected",
    [
        ("5m", timedelta(minutes=5)),
        ("1m30s", timedelta(seconds=90)),
        ("1h", timedelta(hours=1)),
        ("1.5h", timedelta(minutes=90)),
        ("250ms", timedelta(milliseconds=250)),
        ("0", timedelta(0)),
        ("-30s", timedelta(seconds=-30)),
        (" 2m ", timedelta(minutes=2)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "m", "5 m", "1m30", "5d", "-", "abc"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)
