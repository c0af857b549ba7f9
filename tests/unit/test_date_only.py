"""
Unit tests for calendar date parsing and encoding.
"""

from datetime import date, datetime, timezone as dt_timezone
from unittest.mock import patch

import pytest
from django.test import override_settings

from schema_catalog.core.date_only import (
    decode_date_only,
    encode_date_only,
    is_date_only,
    parse_date_only,
    today,
)

pytestmark = pytest.mark.unit


def test_parse_valid_days():
    assert parse_date_only("2024-01-15") == date(2024, 1, 15)
    assert parse_date_only("2024-02-29") == date(2024, 2, 29)


@pytest.mark.parametrize(
    "value",
    ["2023-02-29", "2024-13-01", "2024-1-5", "2024-01-15T10:00:00", "", None, 20240115],
)
def test_parse_rejects_invalid_values(value):
    assert parse_date_only(value) is None
    assert not is_date_only(value)


def test_parse_accepts_date_objects():
    assert parse_date_only(datetime(2024, 5, 6, 12, 30)) == date(2024, 5, 6)


def test_decode_raises_on_invalid():
    with pytest.raises(ValueError):
        decode_date_only("yesterday")


def test_encode_zero_pads():
    assert encode_date_only(date(2024, 3, 7)) == "2024-03-07"


@override_settings(TIME_ZONE="Pacific/Auckland")
def test_today_uses_active_time_zone():
    moment = datetime(2024, 1, 1, 12, 0, tzinfo=dt_timezone.utc)
    with patch("schema_catalog.core.date_only.timezone.now", return_value=moment):
        assert today() == date(2024, 1, 2)
