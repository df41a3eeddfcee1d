import os
import re
import unittest
from pathlib import Path
from unittest import mock

from cost_import import __version__
from cost_import.contracts import (
    CONTRACT_VERSIONS,
    FIXED_TIMESTAMP_ENV,
    build_contract,
    build_run_summary,
    contract_header,
    describe_parse_options,
    timestamp_token,
    utc_now_iso,
)
from cost_import.tokenizer import ParseOptions


class ContractTests(unittest.TestCase):
    def test_every_contract_is_versioned(self):
        for name in ("cost_import.validation", "cost_import.mapping", "cost_import.commit"):
            with self.subTest(name=name):
                contract = build_contract(name)
                self.assertEqual(contract["name"], name)
                self.assertEqual(contract["version"], CONTRACT_VERSIONS[name])

    def test_unknown_contract_raises(self):
        with self.assertRaises(KeyError):
            build_contract("cost_import.unknown")

    def test_timestamp_token_can_be_fixed(self):
        with mock.patch.dict(os.environ, {FIXED_TIMESTAMP_ENV: "20260301T010203Z"}):
            self.assertEqual(timestamp_token(), "20260301T010203Z")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertRegex(timestamp_token(), r"^\d{8}T\d{6}Z$")

    def test_utc_now_iso_has_zulu_suffix(self):
        self.assertTrue(re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$", utc_now_iso()))

    def test_contract_header(self):
        header = contract_header("cost_import.mapping", Path("exports/costs.csv"))

        self.assertEqual(header["contract"], {"name": "cost_import.mapping", "version": "1.0.0"})
        self.assertEqual(header["schema_version"], "1.0.0")
        self.assertEqual(header["tool_version"], __version__)
        self.assertEqual(header["file"], "costs.csv")
        self.assertIsNone(contract_header("cost_import.commit")["file"])

    def test_parse_options_record_the_delimiter_used(self):
        detected = describe_parse_options(None, ";")
        self.assertEqual(
            detected,
            {"delimiter": ";", "delimiter_forced": False, "has_headers": True, "trim_values": True},
        )

        forced = describe_parse_options(ParseOptions(delimiter="\t", has_headers=False, trim_values=False))
        self.assertEqual(
            forced,
            {"delimiter": "\t", "delimiter_forced": True, "has_headers": False, "trim_values": False},
        )

    def test_run_summary(self):
        summary = build_run_summary(
            "validate",
            input_path=Path("costs.csv"),
            options=ParseOptions(has_headers=False),
            delimiter=",",
            mapping={"date": "Column 1"},
            metrics={"total_rows": 3},
            warnings=["Null bytes removed from upload"],
        )

        self.assertEqual(summary["tool"], "cost-import")
        self.assertEqual(summary["command"], "validate")
        self.assertEqual(summary["status"], "ok")
        self.assertEqual(summary["input_file"], "costs.csv")
        self.assertEqual(summary["parse_options"]["delimiter"], ",")
        self.assertFalse(summary["parse_options"]["has_headers"])
        self.assertEqual(summary["mapping"], {"date": "Column 1"})
        self.assertEqual(summary["warnings_count"], 1)
        self.assertEqual(summary["metrics"], {"total_rows": 3})

    def test_run_summary_defaults(self):
        summary = build_run_summary("commit")

        self.assertIsNone(summary["input_file"])
        self.assertEqual(summary["mapping"], {})
        self.assertIsNone(summary["parse_options"]["delimiter"])
        self.assertEqual(summary["warnings"], [])


if __name__ == "__main__":
    unittest.main()
