from datetime import date

import pytest

from hrhub.common.working_days import count_working_days
from hrhub.core.exceptions import InvalidRangeError


def test_no_weekend_counts_every_day():
    assert count_working_days(date(2024, 3, 1), date(2024, 3, 10), frozenset()) == 10


def test_single_day_range():
    assert count_working_days(date(2024, 3, 14), date(2024, 3, 14)) == 1


def test_friday_saturday_span_has_no_working_days():
    # 2024-03-15 is a Friday
    assert count_working_days(date(2024, 3, 15), date(2024, 3, 16)) == 0


def test_default_weekend_skips_friday_and_saturday():
    # Thu 14 .. Sun 17 -> Thu + Sun
    assert count_working_days(date(2024, 3, 14), date(2024, 3, 17)) == 2


def test_full_week_has_five_working_days():
    assert count_working_days(date(2024, 3, 17), date(2024, 3, 23)) == 5


def test_custom_weekend_set():
    # Saturday/Sunday weekend: Fri 15 .. Mon 18 -> Fri + Mon
    assert count_working_days(date(2024, 3, 15), date(2024, 3, 18), frozenset({5, 6})) == 2


def test_start_after_end_is_rejected():
    with pytest.raises(InvalidRangeError):
        count_working_days(date(2024, 3, 10), date(2024, 3, 9))
