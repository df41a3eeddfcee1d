import unittest
from datetime import date

from cost_import.dates import parse_date
from cost_import.errors import InvalidDateError


class IsoDateTests(unittest.TestCase):
    def test_year_first_formats(self):
        self.assertEqual(parse_date("2024-01-15"), date(2024, 1, 15))
        self.assertEqual(parse_date("2024/01/15"), date(2024, 1, 15))
        self.assertEqual(parse_date("2024-1-5"), date(2024, 1, 5))

    def test_timestamp_suffix_is_ignored(self):
        self.assertEqual(parse_date("2024-01-15T10:30:00Z"), date(2024, 1, 15))

    def test_surrounding_whitespace_is_trimmed(self):
        self.assertEqual(parse_date("  2024-01-15 \t"), date(2024, 1, 15))


class NumericDateTests(unittest.TestCase):
    def test_first_number_above_twelve_is_the_day(self):
        parsed = parse_date("15/01/2024")
        self.assertEqual((parsed.day, parsed.month, parsed.year), (15, 1, 2024))

    def test_first_number_above_twelve_wins_for_any_second_number(self):
        for first in (13, 20, 28):
            for second in range(1, 13):
                with self.subTest(first=first, second=second):
                    parsed = parse_date(f"{first}/{second}/2023")
                    self.assertEqual(parsed.day, first)
                    self.assertEqual(parsed.month, second)

    def test_second_number_above_twelve_is_the_day(self):
        self.assertEqual(parse_date("01/15/2024"), date(2024, 1, 15))

    def test_ambiguous_dates_default_to_month_first(self):
        self.assertEqual(parse_date("03/05/2024"), date(2024, 3, 5))
        self.assertEqual(parse_date("12/11/2024"), date(2024, 12, 11))

    def test_dot_separated_dates(self):
        self.assertEqual(parse_date("15.01.2024"), date(2024, 1, 15))
        self.assertEqual(parse_date("1.2.2024"), date(2024, 1, 2))

    def test_leap_years_come_from_the_calendar(self):
        self.assertEqual(parse_date("02/29/2024"), date(2024, 2, 29))
        self.assertEqual(parse_date("29/02/2024"), date(2024, 2, 29))
        with self.assertRaises(InvalidDateError):
            parse_date("02/29/2023")


class NamedMonthTests(unittest.TestCase):
    def test_long_and_short_month_names(self):
        self.assertEqual(parse_date("January 15, 2024"), date(2024, 1, 15))
        self.assertEqual(parse_date("15 Jan 2024"), date(2024, 1, 15))
        self.assertEqual(parse_date("Jan 15, 2024"), date(2024, 1, 15))
        self.assertEqual(parse_date("3 September 2024"), date(2024, 9, 3))

    def test_month_names_are_case_insensitive(self):
        self.assertEqual(parse_date("DECEMBER 1, 2023"), date(2023, 12, 1))
        self.assertEqual(parse_date("1 dec 2023"), date(2023, 12, 1))
        self.assertEqual(parse_date("Sept. 9, 2023"), date(2023, 9, 9))


class InvalidDateTests(unittest.TestCase):
    def test_unparseable_values_raise_with_the_raw_text(self):
        for raw in ("", "not a date", "2024-13-45", "31/31/2024", "Smarch 3, 2024", "15-01-2024"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidDateError) as ctx:
                    parse_date(raw)
                self.assertEqual(ctx.exception.raw, raw)


if __name__ == "__main__":
    unittest.main()
