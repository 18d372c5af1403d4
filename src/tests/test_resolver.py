"""
Tests for holiday resolution.

Tests cover:
- Matching records and the first-match tie-break
- Weekend defaults for dates without a record
- Armed Forces Day override
- Range resolution
"""

from datetime import date, timedelta

import pytest

from holidaybook.errors import InvalidRangeError
from holidaybook.models import WEEKEND_CATEGORY, IsHoliday
from holidaybook.parser import parse
from holidaybook.resolver import resolve, resolve_range
from tests.helpers import make_payload, make_record


@pytest.fixture
def dataset(sample_payload):
    return parse(sample_payload)


@pytest.fixture
def empty_dataset():
    return parse(make_payload([]))


class TestResolveMatch:
    """Test dates with a dataset entry."""

    def test_new_year(self):
        """Scenario: New Year's Day is a holiday."""
        dataset = parse('{"result":{"results":[{"date":"20240101","name":"元旦","isHoliday":"是"}]}}')

        day = resolve(dataset, date(2024, 1, 1))

        assert day.is_holiday is IsHoliday.YES
        assert day.name == "元旦"
        assert day.date == "20240101"

    def test_copies_all_fields(self, dataset):
        day = resolve(dataset, date(2024, 10, 10))

        assert day.id == 6
        assert day.name == "國慶日"
        assert day.category == "放假之紀念日及節日"
        assert day.is_holiday is IsHoliday.YES

    def test_makeup_workday_is_not_holiday(self, dataset):
        """A Saturday listed as a work day keeps its record, not the weekend default."""
        day = resolve(dataset, date(2024, 2, 17))

        assert day.is_holiday is IsHoliday.NO
        assert day.category == "補行上班日"

    def test_first_match_wins(self):
        dataset = parse(make_payload([
            make_record("20240101", "first", "是", "A", record_id=10),
            make_record("20240101", "second", "否", "B", record_id=11),
        ]))

        day = resolve(dataset, date(2024, 1, 1))

        assert day.id == 10
        assert day.name == "first"
        assert day.is_holiday is IsHoliday.YES
        assert day.category == "A"


class TestArmedForcesDay:
    """Test the Armed Forces Day override."""

    def test_armed_forces_day_is_not_holiday(self):
        """Scenario: 軍人節 is listed as a holiday but resolves to not a holiday."""
        dataset = parse('{"result":{"results":[{"date":"20240903","name":"軍人節","isHoliday":"是"}]}}')

        day = resolve(dataset, date(2024, 9, 3))

        assert day.is_holiday is IsHoliday.NO
        assert day.name == "軍人節"

    def test_override_keeps_other_fields(self, dataset):
        day = resolve(dataset, date(2024, 9, 3))

        assert day.category == "特定節日"
        assert day.description == "軍人依國防部規定放假。"

    def test_override_does_not_mutate_dataset(self, dataset):
        resolve(dataset, date(2024, 9, 3))

        record = next(r for r in dataset if r.date == "20240903")
        assert record.is_holiday is IsHoliday.YES

    def test_only_exact_name_is_overridden(self):
        dataset = parse(make_payload([make_record("20240903", "軍人節補假", "是")]))
        assert resolve(dataset, date(2024, 9, 3)).is_holiday is IsHoliday.YES


class TestResolveNoMatch:
    """Test dates without a dataset entry."""

    def test_saturday(self, empty_dataset):
        """Scenario: 2024-01-06 is a Saturday."""
        day = resolve(empty_dataset, date(2024, 1, 6))

        assert day.is_holiday is IsHoliday.NO
        assert day.category == WEEKEND_CATEGORY
        assert day.category == "星期六、星期日"
        assert day.name == ""
        assert day.description == ""
        assert day.id == 0

    def test_sunday(self, empty_dataset):
        day = resolve(empty_dataset, date(2024, 1, 7))

        assert day.is_holiday is IsHoliday.NO
        assert day.category == WEEKEND_CATEGORY

    @pytest.mark.parametrize("offset", range(5))
    def test_weekdays(self, empty_dataset, offset):
        monday = date(2024, 1, 8)

        day = resolve(empty_dataset, monday + timedelta(days=offset))

        assert day.is_holiday is IsHoliday.NO
        assert day.category == ""

    def test_date_is_formatted(self, empty_dataset):
        assert resolve(empty_dataset, date(2025, 3, 4)).date == "20250304"


class TestResolveRange:
    """Test range resolution."""

    def test_covers_every_date(self, dataset):
        start, end = date(2024, 1, 1), date(2024, 12, 31)

        days = resolve_range(dataset, start, end)

        assert len(days) == (end - start).days + 1
        expected = [(start + timedelta(days=i)).strftime("%Y%m%d") for i in range(len(days))]
        assert [d.date for d in days] == expected

    def test_single_day(self, dataset):
        days = resolve_range(dataset, date(2024, 1, 1), date(2024, 1, 1))

        assert len(days) == 1
        assert days[0].name == "開國紀念日"

    def test_matches_resolve(self, dataset):
        start, end = date(2024, 1, 1), date(2024, 10, 31)

        days = resolve_range(dataset, start, end)

        for offset, day in enumerate(days):
            assert day == resolve(dataset, start + timedelta(days=offset))

    def test_first_match_in_range(self):
        dataset = parse(make_payload([
            make_record("20240102", "first", "是"),
            make_record("20240102", "second", "否"),
        ]))

        days = resolve_range(dataset, date(2024, 1, 1), date(2024, 1, 3))

        assert [d.name for d in days] == ["", "first", ""]

    def test_applies_override(self, dataset):
        days = resolve_range(dataset, date(2024, 9, 1), date(2024, 9, 5))

        armed_forces = next(d for d in days if d.date == "20240903")
        assert armed_forces.is_holiday is IsHoliday.NO

    def test_crosses_leap_day(self, empty_dataset):
        days = resolve_range(empty_dataset, date(2024, 2, 28), date(2024, 3, 1))
        assert [d.date for d in days] == ["20240228", "20240229", "20240301"]

    def test_start_after_end(self, dataset):
        with pytest.raises(InvalidRangeError):
            resolve_range(dataset, date(2024, 1, 2), date(2024, 1, 1))

    def test_invalid_range_is_value_error(self, dataset):
        with pytest.raises(ValueError):
            resolve_range(dataset, date(2025, 1, 1), date(2024, 1, 1))
