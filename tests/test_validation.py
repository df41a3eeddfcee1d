import unittest
from datetime import date

from cost_import.validation import (
    ERROR_MESSAGES,
    RowError,
    ValidatedCost,
    build_candidate_row,
    validate_row,
)


def candidate(**overrides):
    row = {
        "date": "2024-01-15",
        "description": "Timber framing",
        "amount": "$1,500.00",
        "category": "Materials",
        "vendor": "Bunnings",
        "notes": "",
    }
    row.update(overrides)
    return row


class BuildCandidateRowTests(unittest.TestCase):
    def test_unmapped_fields_are_empty(self):
        row = {"Date": "2024-01-15", "Cost": "10", "Extra": "ignored"}
        built = build_candidate_row(row, {"date": "Date", "amount": "Cost"})

        self.assertEqual(
            built,
            {
                "date": "2024-01-15",
                "description": "",
                "amount": "10",
                "category": "",
                "vendor": "",
                "notes": "",
            },
        )


class ValidateRowTests(unittest.TestCase):
    def test_valid_row(self):
        result = validate_row(candidate(description="  Timber framing  "), 1)

        self.assertIsInstance(result, ValidatedCost)
        self.assertEqual(result.date, date(2024, 1, 15))
        self.assertEqual(result.description, "Timber framing")
        self.assertEqual(result.amount_cents, 150000)
        self.assertEqual(result.vendor, "Bunnings")
        self.assertEqual(
            result.to_dict(),
            {
                "date": "2024-01-15",
                "description": "Timber framing",
                "amount_cents": 150000,
                "category": "Materials",
                "vendor": "Bunnings",
                "notes": "",
            },
        )

    def test_missing_description(self):
        errors = validate_row(candidate(description="   "), 2)

        self.assertEqual(
            errors,
            [RowError(2, "description", 'Missing required field "description"', "   ")],
        )

    def test_non_positive_amounts(self):
        for raw in ("-50", "0", "($1,500.00)", "0.004"):
            with self.subTest(raw=raw):
                errors = validate_row(candidate(amount=raw), 3)
                self.assertEqual(len(errors), 1)
                self.assertEqual(errors[0].field, "amount")
                self.assertEqual(errors[0].message, "Amount must be positive")
                self.assertEqual(errors[0].raw_value, raw)

    def test_invalid_date_and_amount_messages(self):
        errors = validate_row(candidate(date="2024-13-45", amount="abc"), 4)

        self.assertEqual([error.field for error in errors], ["date", "amount"])
        self.assertEqual(errors[0].message, ERROR_MESSAGES["invalid_date"]("2024-13-45"))
        self.assertIn('Invalid date format "2024-13-45"', errors[0].message)
        self.assertEqual(
            errors[1].message,
            'Invalid amount "abc". Expected number or currency format (e.g., 1500.00 or $1,500.00)',
        )

    def test_every_failing_field_is_reported(self):
        errors = validate_row({"date": "", "description": "", "amount": "", "category": ""}, 7)

        self.assertEqual([error.field for error in errors], ["date", "description", "amount", "category"])
        self.assertTrue(all(error.line_number == 7 for error in errors))
        self.assertTrue(all(error.message.startswith("Missing required field") for error in errors))

    def test_length_limits_apply_to_trimmed_text(self):
        self.assertIsInstance(validate_row(candidate(description="x" * 500 + "   "), 1), ValidatedCost)

        cases = {
            "description": (501, "Description exceeds maximum length (501/500 characters)"),
            "category": (101, "Category exceeds maximum length (101/100 characters)"),
            "vendor": (201, "Vendor exceeds maximum length (201/200 characters)"),
            "notes": (1001, "Notes exceed maximum length (1001/1000 characters)"),
        }
        for field_name, (length, message) in cases.items():
            with self.subTest(field=field_name):
                errors = validate_row(candidate(**{field_name: "x" * length}), 1)
                self.assertEqual([(e.field, e.message) for e in errors], [(field_name, message)])

    def test_optional_fields_may_be_empty(self):
        result = validate_row(candidate(vendor="", notes=""), 1)
        self.assertEqual((result.vendor, result.notes), ("", ""))


if __name__ == "__main__":
    unittest.main()
