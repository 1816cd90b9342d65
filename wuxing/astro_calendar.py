"""
Calendar utilities for the five-element calculator.
Handles month rollover, Julian Day lookup and the day offset
that drives the day pillar.

Dates are plain calendar dates: no time of day, no timezone.
Out-of-range months and days are normalized, never rejected.
"""

import math

import swisseph as swe


# Day offset 0 maps to stem/branch index 0 (Jia Zi) in the day pillar formula.
REFERENCE_DATE = (1900, 1, 31)

# 400 Gregorian years hold exactly 146097 days.
DAYS_PER_GREGORIAN_CYCLE = 146097


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """
    Roll an out-of-range month into the neighbouring year.

    Examples:
        (2000, 13) -> (2001, 1)
        (2000, 0)  -> (1999, 12)
        (2000, -1) -> (1999, 11)
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return year, month


def julian_day(year: int, month: int, day: int) -> float:
    """
    Julian Day at 0h for a proleptic Gregorian date.

    The day is passed straight to Swiss Ephemeris, which counts it
    linearly from the start of the month: day 32 of January lands on
    February 1st, day 0 on the last day of the previous month.

    Args:
        year: astronomical year (0 = 1 BCE, negative years allowed)
        month: month, any integer (normalized first)
        day: day of month, any integer

    Returns:
        Julian Day as a float (always ends in .5 at 0h)
    """
    year, month = normalize_month(year, month)
    # swe.julday drifts on the Gregorian century rule for negative years,
    # so shift them forward by whole 400-year cycles.
    cycles = 0
    if year < 1:
        cycles = (1 - year) // 400 + 1
    jd = swe.julday(year + 400 * cycles, month, day, 0, swe.GREG_CAL)
    return jd - DAYS_PER_GREGORIAN_CYCLE * cycles


def day_offset(year: int, month: int, day: int) -> int:
    """Whole days between REFERENCE_DATE and the given date (negative before it)."""
    return math.floor(julian_day(year, month, day) - julian_day(*REFERENCE_DATE))
