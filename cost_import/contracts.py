"""
contracts.py — versioned envelopes for every cost-import JSON output

Each payload the tool emits starts with contract_header(name) and carries a
run summary recording how the file was read (delimiter, header row,
trimming, column mapping) so a saved report can be replayed with the same
settings.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from cost_import import __version__ as TOOL_VERSION
from cost_import.tokenizer import ParseOptions

TOOL_NAME = "cost-import"

CONTRACT_VERSIONS = {
    "cost_import.validation": "1.0.0",
    "cost_import.mapping": "1.0.0",
    "cost_import.commit": "1.0.0",
}

FIXED_TIMESTAMP_ENV = "COST_IMPORT_OUTPUT_STAMP"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def timestamp_token() -> str:
    override = os.environ.get(FIXED_TIMESTAMP_ENV)
    if override:
        return override
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def build_contract(name: str) -> dict[str, str]:
    return {"name": name, "version": CONTRACT_VERSIONS[name]}


def contract_header(name: str, input_path: Optional[Path] = None) -> dict[str, Any]:
    """Keys shared by every payload: contract, schema/tool versions and file name."""
    contract = build_contract(name)
    return {
        "contract": contract,
        "schema_version": contract["version"],
        "tool_version": TOOL_VERSION,
        "file": input_path.name if input_path else None,
    }


def describe_parse_options(options: Optional[ParseOptions], delimiter: Optional[str] = None) -> dict[str, Any]:
    """
    JSON view of the tokenizer settings. `delimiter` is the one actually
    used; `delimiter_forced` tells whether it came from the caller.
    """
    options = options or ParseOptions()
    return {
        "delimiter": delimiter if delimiter is not None else options.delimiter,
        "delimiter_forced": options.delimiter is not None,
        "has_headers": options.has_headers,
        "trim_values": options.trim_values,
    }


def build_run_summary(
    command: str,
    *,
    input_path: Optional[Path] = None,
    status: str = "ok",
    options: Optional[ParseOptions] = None,
    delimiter: Optional[str] = None,
    mapping: Optional[Mapping[str, str]] = None,
    metrics: Optional[dict[str, Any]] = None,
    warnings: Optional[list[str]] = None,
) -> dict[str, Any]:
    return {
        "tool": TOOL_NAME,
        "command": command,
        "status": status,
        "generated_at": utc_now_iso(),
        "input_file": str(input_path) if input_path else None,
        "parse_options": describe_parse_options(options, delimiter),
        "mapping": dict(mapping or {}),
        "warnings_count": len(warnings or []),
        "warnings": list(warnings or []),
        "metrics": metrics or {},
    }
