from datetime import UTC, datetime, timedelta, timezone

from backend.app.core.time import as_utc, epoch_millis, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_naive_values_are_read_as_utc():
    assert as_utc(datetime(2024, 6, 1, 10, 30)) == datetime(2024, 6, 1, 10, 30, tzinfo=UTC)


def test_offset_values_are_converted():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert as_utc(datetime(2024, 6, 1, 16, 0, tzinfo=ist)) == datetime(2024, 6, 1, 10, 30, tzinfo=UTC)


def test_epoch_millis():
    assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=UTC)) == 1500
    assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000
