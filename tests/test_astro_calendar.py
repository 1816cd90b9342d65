from datetime import date

import pytest

from wuxing.astro_calendar import REFERENCE_DATE, day_offset, julian_day, normalize_month


class TestNormalizeMonth:
    @pytest.mark.parametrize("year, month, expected", [
        (2000, 1, (2000, 1)),
        (2000, 12, (2000, 12)),
        (2000, 13, (2001, 1)),
        (2000, 25, (2002, 1)),
        (2000, 0, (1999, 12)),
        (2000, -1, (1999, 11)),
        (-1, 0, (-2, 12)),
    ])
    def test_rollover(self, year, month, expected):
        assert normalize_month(year, month) == expected


class TestDayOffset:
    def test_reference_date_is_zero(self):
        assert day_offset(*REFERENCE_DATE) == 0

    def test_neighbours(self):
        assert day_offset(1900, 2, 1) == 1
        assert day_offset(1900, 1, 30) == -1

    @pytest.mark.parametrize("d", [
        date(1582, 10, 15),
        date(1600, 2, 29),
        date(1700, 3, 1),
        date(1900, 3, 1),
        date(1970, 1, 1),
        date(2000, 2, 29),
        date(2000, 5, 15),
        date(2024, 12, 31),
        date(2100, 3, 1),
    ], ids=str)
    def test_matches_proleptic_gregorian_ordinals(self, d):
        expected = d.toordinal() - date(*REFERENCE_DATE).toordinal()
        assert day_offset(d.year, d.month, d.day) == expected

    def test_day_overflow_rolls_into_next_month(self):
        assert day_offset(2000, 1, 32) == day_offset(2000, 2, 1)
        assert day_offset(2001, 2, 29) == day_offset(2001, 3, 1)

    def test_day_zero_is_last_day_of_previous_month(self):
        assert day_offset(2000, 3, 0) == day_offset(2000, 2, 29)

    def test_month_overflow_rolls_into_next_year(self):
        assert day_offset(2000, 13, 1) == day_offset(2001, 1, 1)
        assert day_offset(2000, 0, 15) == day_offset(1999, 12, 15)

    @pytest.mark.parametrize("year", [-4000, -1, 0, 10000, 123456])
    def test_any_year_is_accepted(self, year):
        assert isinstance(day_offset(year, 6, 1), int)

    @pytest.mark.parametrize("year, month, day", [
        (-44, 3, 15),
        (-100, 3, 1),
        (-400, 3, 1),
        (-4, 2, 29),
        (-1, 12, 31),
        (0, 1, 1),
        (-2000, 7, 4),
        (-9999, 1, 1),
    ])
    def test_bc_dates_match_shifted_ordinals(self, year, month, day):
        # Shifting by whole 400-year cycles keeps the Gregorian leap pattern.
        cycles = (1 - year) // 400 + 1
        shifted = date(year + 400 * cycles, month, day).toordinal() - 146097 * cycles
        assert day_offset(year, month, day) == shifted - date(*REFERENCE_DATE).toordinal()

    def test_julius_caesar_date(self):
        # proleptic Gregorian ordinal of -44-03-15 is -16362; 1900-01-31 is 693626
        assert day_offset(-44, 3, 15) == -709988

    @pytest.mark.parametrize("year, leap", [
        (0, True),
        (-1, False),
        (-4, True),
        (-100, False),
        (-200, False),
        (-400, True),
        (-800, True),
        (-1900, False),
    ])
    def test_bc_leap_years(self, year, leap):
        gap = day_offset(year, 3, 1) - day_offset(year, 2, 28)
        assert gap == (2 if leap else 1)

    def test_days_are_contiguous_across_year_zero(self):
        assert day_offset(1, 1, 1) - day_offset(0, 12, 31) == 1
        assert day_offset(0, 1, 1) - day_offset(-1, 12, 31) == 1
        assert day_offset(1, 1, 1) - day_offset(0, 1, 1) == 366


def test_julian_day_of_j2000_epoch():
    # 2000-01-01 12:00 TT is JD 2451545.0, so 0h is half a day earlier.
    assert julian_day(2000, 1, 1) == 2451544.5
