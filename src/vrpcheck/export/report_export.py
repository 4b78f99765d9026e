# src/vrpcheck/export/report_export.py
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from vrpcheck.errors import ValidationError


def write_report(report: dict[str, Any], path: Path) -> Path:
    """
    @brief
    Writes a validation report as UTF-8 JSON, atomically.

    @details
    Validates that the report is a serializable dictionary, dumps it with
    indentation and replaces the target file in one filesystem operation.
    Repeated runs overwrite the same file cleanly.

    @params
        report : dict[str, Any]
            Report produced by ProblemValidator.build_report().
        path : Path
            Target file; parent directories are created when missing.

    @returns
        Path to the written file.

    @raises
        ValidationError
            If the report is not a dict, is not JSON-serializable, or cannot be written.
    """
    if not isinstance(report, dict):
        raise ValidationError("report must be a dict", source="export.write_report")

    # (1) Validate JSON serializability before touching the filesystem
    try:
        payload = json.dumps(report, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"report not JSON-serializable: {e}",
            source="export.write_report",
            suggested_action="Ensure report values are primitives (str/float/int/bool/list/dict).",
        ) from e

    # (2) Atomically write validated payload
    path = Path(path)
    _atomic_write_text(path, payload + "\n", encoding="utf-8")
    return path


def _atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    @brief
    Performs atomic text file writing using a temporary file swap.

    @details
    Writes text to a temporary file within the same directory, then replaces
    the destination. A crash mid-write never leaves a truncated report.

    @raises
        ValidationError
            On write or rename failure.
    """
    tmp_dir = path.parent
    try:
        tmp_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(tmp_dir))
    except OSError as e:
        raise ValidationError(
            f"cannot prepare output directory {tmp_dir}: {e}",
            source="export._atomic_write_text",
            suggested_action="Check output directory permissions and disk space.",
        ) from e

    try:
        with open(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        # (1) Clean up temp file on error
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ValidationError(
            f"atomic write failed for {path}: {e}",
            source="export._atomic_write_text",
            suggested_action="Check output directory permissions and disk space.",
        ) from e


__all__ = ["write_report"]
