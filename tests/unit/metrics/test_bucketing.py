from datetime import datetime, timedelta, timezone

import pytest

from bucket_counter.metrics.bucketing import (
    bucket_keys,
    bucket_start,
    enumerate_bucket_starts,
    iter_bucket_starts,
    series_member,
    to_epoch_seconds,
    to_seconds,
)


class TestBucketStart:
    def test_truncates_down_to_width(self):
        assert bucket_start(125, 60) == 120
        assert bucket_start(120, 60) == 120
        assert bucket_start(179.99, 60) == 120

    def test_negative_timestamps_floor(self):
        assert bucket_start(-1, 60) == -60


class TestEnumerateBucketStarts:
    def test_single_point(self):
        assert enumerate_bucket_starts(125, 125, 60) == [120]

    def test_end_on_boundary_is_included(self):
        assert enumerate_bucket_starts(120, 240, 60) == [120, 180, 240]

    def test_start_mid_bucket(self):
        assert enumerate_bucket_starts(150, 200, 60) == [120, 180]


class TestKeys:
    def test_key_layout(self):
        keys = bucket_keys("clicks", 125, 60)
        assert keys.bucket_start == 120
        assert keys.counter_key == "clicks:counter:120"
        assert keys.series_key == "clicks:ts:120"

    def test_member_name(self):
        assert series_member("clicks", 7) == "clicks:7"

    def test_derivation_is_pure(self):
        assert bucket_keys("a", 61, 60) == bucket_keys("a", 119, 60)
        assert bucket_keys("a", 61, 60) != bucket_keys("b", 61, 60)


class TestConversions:
    def test_datetime_to_epoch(self):
        dt = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert to_epoch_seconds(dt) == 1704067200.0

    def test_numeric_passthrough(self):
        assert to_epoch_seconds(12) == 12.0

    def test_rejects_unsupported_types(self):
        with pytest.raises(TypeError):
            to_epoch_seconds("2024-01-01")
        with pytest.raises(TypeError):
            to_epoch_seconds(True)

    def test_duration_seconds(self):
        assert to_seconds(timedelta(minutes=2)) == 120.0
        assert to_seconds(30) == 30.0


class TestIterBucketStarts:
    def test_is_lazy(self):
        buckets = iter_bucket_starts(0, 10**15, 1)
        assert next(buckets) == 0
        assert next(buckets) == 1

    def test_matches_list_form(self):
        assert list(iter_bucket_starts(150, 300, 60)) == enumerate_bucket_starts(150, 300, 60)
