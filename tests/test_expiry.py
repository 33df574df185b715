from __future__ import annotations

import re

from relay_server.expiry import expires_at_for, is_active, now_ms, utc_timestamp


def test_positive_ttl_sets_absolute_expiry():
    assert expires_at_for(1, 10_000) == 11_000
    assert expires_at_for(0.5, 10_000) == 10_500


def test_non_positive_or_non_numeric_ttl_never_expires():
    for ttl in (None, 0, -5, "10", True, [1], float("nan"), float("inf")):
        assert expires_at_for(ttl, 10_000) is None, ttl


def test_is_active_is_strictly_greater_than_now():
    assert is_active(None, 10**15)
    assert is_active(1001, 1000)
    assert not is_active(1000, 1000)
    assert not is_active(999, 1000)


def test_clock_helpers_shape():
    assert now_ms() > 1_600_000_000_000
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", utc_timestamp())


def test_ttl_overflowing_to_infinity_never_expires():
    assert expires_at_for(1e306, 10_000) is None
    assert expires_at_for(float("1.7e308"), 10_000) is None


def test_ttl_integer_too_large_for_float_never_expires():
    assert expires_at_for(10**400, 10_000) is None
    assert expires_at_for(10**306, 10_000) is None
    # large but representable integers still work
    assert expires_at_for(10**12, 0) == 10**15
