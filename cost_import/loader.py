"""
loader.py — upload decoding for cost imports

Turns uploaded bytes into the text buffer the tokenizer expects. The
pipeline itself never sees bytes.

Public API:
    result = decode_upload(raw_bytes)
    result = load_upload("path/to/costs.csv")
    text   = result["text"]

Result dict keys:
    text              — decoded text (BOM and NUL bytes removed)
    detected_encoding — encoding actually used to decode
    encoding_info     — full dict: detected, confidence, is_utf8
    size_bytes        — size of the raw upload
    warnings          — list of warning strings
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import chardet

from cost_import.errors import UploadTooLargeError

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_UPLOAD_ENV = "COST_IMPORT_MAX_UPLOAD_BYTES"
FALLBACK_ENCODING = "windows-1252"


def max_upload_bytes() -> int:
    override = os.environ.get(MAX_UPLOAD_ENV)
    if override:
        return int(override)
    return DEFAULT_MAX_UPLOAD_BYTES


# ══════════════════════════════════════════════════════════════════════════════
# ENCODING DETECTION
# ══════════════════════════════════════════════════════════════════════════════

def _detect_encoding_info(raw: bytes) -> dict:
    """Ask chardet for a best guess. Only consulted when strict UTF-8 fails."""
    result = chardet.detect(raw)
    detected = result.get("encoding") or "unknown"
    confidence = round(result.get("confidence") or 0.0, 2)
    return {
        "detected":   detected,
        "confidence": confidence,
        "is_utf8":    detected.upper().replace("-", "") in ("UTF8", "ASCII"),
    }


def _decode(raw: bytes) -> tuple[str, str, dict, list[str]]:
    """
    Decode raw bytes.

    Strategy:
      1. Strict UTF-8 (BOM stripped)
      2. The encoding chardet reports
      3. Windows-1252 with replacement (never fails)
    """
    try:
        text = raw.decode("utf-8-sig")
        return text, "utf-8", {"detected": "utf-8", "confidence": 1.0, "is_utf8": True}, []
    except UnicodeDecodeError:
        pass

    info = _detect_encoding_info(raw)
    candidate = info["detected"]
    if candidate != "unknown" and not info["is_utf8"]:
        try:
            text = raw.decode(candidate)
            return text, candidate, info, [f"File is not valid UTF-8; decoded as {candidate}"]
        except (LookupError, UnicodeDecodeError):
            pass

    text = raw.decode(FALLBACK_ENCODING, errors="replace")
    return text, FALLBACK_ENCODING, info, [
        f"File is not valid UTF-8; decoded as {FALLBACK_ENCODING} with replacement characters"
    ]


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def decode_upload(raw: bytes, max_bytes: Optional[int] = None) -> dict:
    """
    Decode an uploaded file into text for the tokenizer.

    Raises:
        UploadTooLargeError  if `raw` is larger than the upload ceiling.
    """
    limit = max_bytes if max_bytes is not None else max_upload_bytes()
    if len(raw) > limit:
        raise UploadTooLargeError(len(raw), limit)

    text, encoding, info, warnings = _decode(raw)
    if "\x00" in text:
        text = text.replace("\x00", "")
        warnings.append("Null bytes removed from upload")

    return {
        "text":              text,
        "detected_encoding": encoding,
        "encoding_info":     info,
        "size_bytes":        len(raw),
        "warnings":          warnings,
    }


def load_upload(path: "str | Path", max_bytes: Optional[int] = None) -> dict:
    """
    Read a file from disk and decode it like an upload.

    Raises:
        FileNotFoundError    if the file does not exist.
        UploadTooLargeError  if the file is larger than the upload ceiling.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return decode_upload(path.read_bytes(), max_bytes=max_bytes)
