# src/vrpcheck/dataloader/problem_loader.py
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vrpcheck.errors import DataError
from vrpcheck.schemas.models import Problem

logger = logging.getLogger(__name__)


class ProblemLoader:
    """
    pragmatic JSON -> Problem snapshot.

    Fatal errors (raise DataError, E0000):
      - file missing or unreadable
      - invalid JSON syntax or non-object root
      - document does not match the snapshot schema (wrong types, unknown keys)

    Semantic consistency is not checked here; that is the validator's job.
    """

    def load(self, path: Path) -> Problem:
        text = self._read_text(path)
        problem = self.parse(text, source=str(path))
        logger.info(
            "Problem loaded: %d job(s), %d relation(s), %d vehicle type(s).",
            len(problem.plan.jobs),
            len(problem.plan.relations or []),
            len(problem.fleet.vehicles),
        )
        return problem

    def parse(self, text: str, source: str = "<string>") -> Problem:
        data = self._decode(text, source)
        try:
            return Problem.model_validate(data)
        except ValidationError as e:
            raise DataError(
                message=f"Cannot deserialize problem {source}: {e}",
                source="ProblemLoader.parse",
                suggested_action="Check problem definition against the pragmatic format schema.",
            ) from e

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _read_text(self, path: Path) -> str:
        if not isinstance(path, Path):
            raise DataError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="ProblemLoader._read_text",
                suggested_action="Pass a pathlib.Path pointing to the problem JSON file.",
            )
        if not path.exists():
            raise DataError(
                message=f"Problem file not found: {path}",
                source="ProblemLoader._read_text",
                suggested_action="Verify file path and ensure the problem file is present.",
            )
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DataError(
                message=f"Unable to read problem file: {e}",
                source="ProblemLoader._read_text",
                suggested_action="Check file permissions and that the file is UTF-8 encoded.",
            ) from e

    def _decode(self, text: str, source: str) -> dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DataError(
                message=f"Cannot deserialize problem {source}: {e}",
                source="ProblemLoader._decode",
                suggested_action="Fix JSON syntax of the problem definition.",
            ) from e
        if not isinstance(data, Mapping):
            raise DataError(
                message="Problem root must be a JSON object.",
                source="ProblemLoader._decode",
                suggested_action="Wrap plan, fleet and objectives into one object.",
            )
        return dict(data)


__all__ = ["ProblemLoader"]
