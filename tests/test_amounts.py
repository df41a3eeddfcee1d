import unittest

from cost_import.amounts import format_cents, parse_amount
from cost_import.errors import InvalidAmountError


class ParseAmountTests(unittest.TestCase):
    def test_plain_numbers(self):
        self.assertEqual(parse_amount("1500"), 150000)
        self.assertEqual(parse_amount("1500.5"), 150050)
        self.assertEqual(parse_amount("0.99"), 99)
        self.assertEqual(parse_amount(".5"), 50)

    def test_currency_symbols_and_codes(self):
        self.assertEqual(parse_amount("$1,500.00"), 150000)
        self.assertEqual(parse_amount("€250"), 25000)
        self.assertEqual(parse_amount("£12.34"), 1234)
        self.assertEqual(parse_amount("¥5000"), 500000)
        self.assertEqual(parse_amount("AUD 1,500.00"), 150000)
        self.assertEqual(parse_amount("usd1500"), 150000)
        self.assertEqual(parse_amount("1500 EUR"), 150000)
        self.assertEqual(parse_amount("50€"), 5000)

    def test_us_grouping(self):
        self.assertEqual(parse_amount("1,500"), 150000)
        self.assertEqual(parse_amount("1,234,567.89"), 123456789)

    def test_european_grouping(self):
        self.assertEqual(parse_amount("1.500,00"), 150000)
        self.assertEqual(parse_amount("€1.234,5"), 123450)
        self.assertEqual(parse_amount("1.234.567,89"), 123456789)
        self.assertEqual(parse_amount("1.500"), 150000)

    def test_space_grouping(self):
        self.assertEqual(parse_amount("1 500.00"), 150000)
        self.assertEqual(parse_amount("AUD 2 450.50"), 245050)

    def test_negative_notations(self):
        self.assertEqual(parse_amount("($1,500.00)"), -150000)
        self.assertEqual(parse_amount("-50"), -5000)
        self.assertEqual(parse_amount("-$50.25"), -5025)
        self.assertEqual(parse_amount("$-50.25"), -5025)
        self.assertEqual(parse_amount("(1.500,00)"), -150000)

    def test_parenthesized_value_is_the_negation(self):
        for raw in ("1500", "$1,500.00", "1.500,00", "-50", "AUD 2 450.50", "0.01", "$-7"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_amount(f"({raw})"), -parse_amount(raw))

    def test_rounds_half_up_to_whole_cents(self):
        self.assertEqual(parse_amount("1.005"), 101)
        self.assertEqual(parse_amount("0.004"), 0)
        self.assertEqual(parse_amount("19.999"), 2000)
        self.assertEqual(parse_amount("-1.005"), -101)

    def test_result_is_an_int(self):
        self.assertIsInstance(parse_amount("$1,500.00"), int)

    def test_very_long_amounts_stay_exact(self):
        self.assertEqual(parse_amount("9" * 30), int("9" * 30) * 100)
        self.assertEqual(parse_amount("1" * 40 + ".005"), int("1" * 40) * 100 + 1)
        self.assertEqual(parse_amount("(" + "9" * 30 + ")"), -int("9" * 30) * 100)

    def test_comma_without_grouping_shape_is_a_thousands_separator(self):
        self.assertEqual(parse_amount("12,5"), 12500)
        self.assertEqual(parse_amount("1,5,0"), 15000)

    def test_invalid_amounts_raise_with_the_raw_text(self):
        for raw in ("", "abc", "$", "USD", "12abc", "1.2.3", "1e5", "1,2.3.4", "N/A"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidAmountError) as ctx:
                    parse_amount(raw)
                self.assertEqual(ctx.exception.raw, raw)


class FormatCentsTests(unittest.TestCase):
    def test_canonical_rendering(self):
        self.assertEqual(format_cents(150000), "$1500.00")
        self.assertEqual(format_cents(-5), "-$0.05")
        self.assertEqual(format_cents(1234, symbol=""), "12.34")

    def test_parse_of_canonical_rendering_is_idempotent(self):
        for raw in ("$1,500.00", "1.234,56", "(42)", "0.07", "AUD 2 450.50", "-1.005"):
            with self.subTest(raw=raw):
                cents = parse_amount(raw)
                self.assertEqual(parse_amount(format_cents(cents)), cents)


if __name__ == "__main__":
    unittest.main()
