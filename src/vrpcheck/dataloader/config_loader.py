# src/vrpcheck/dataloader/config_loader.py
"""
@brief
Runtime configuration loading (E0004).

@details
The config document has two parts: the `validation` block consumed by this
project and the `solver` tuning block (initial methods, ruin and recreate
operators, population, termination) that is handed to the solver untouched.
The pydantic `Config` model checks each field on its own; this module adds
the rules that span fields, so that a tuning document the solver could never
run surfaces as E0004 before any problem is validated.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vrpcheck.errors import ConfigError
from vrpcheck.schemas.models import Config, SolverConfig, ValidationConfig, WeightedMethod

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})

OPERATOR_GROUPS = ("initial_methods", "ruins", "recreates")


# ----------------------------
# CROSS-FIELD RULES
# ----------------------------
def _operator_problems(group: str, methods: list[WeightedMethod]) -> list[str]:
    """
    @brief
    Check one weighted operator group of the solver tuning block.

    @details
    The solver picks operators by weight, so a group needs at least one
    operator with a positive weight. The same operator type listed twice in
    one group is ambiguous (which weight applies?) and is rejected too.

    @params
        group : str
            Group name used in messages (`initial_methods`, `ruins`, `recreates`).
        methods : list[WeightedMethod]
            Operators of the group in document order.

    @returns
        Human-readable problems, empty when the group is usable.
    """
    if not methods:
        return [f"solver.{group} is empty"]

    problems: list[str] = []
    if sum(method.weight for method in methods) == 0:
        problems.append(f"solver.{group} has only zero weights")
    repeated = [name for name, n in Counter(m.type for m in methods).items() if n > 1]
    if repeated:
        problems.append(f"solver.{group} repeats operator(s): {', '.join(repeated)}")
    return problems


def solver_tuning_problems(solver: SolverConfig) -> list[str]:
    """
    @brief
    Collect every cross-field inconsistency of the solver tuning block.

    @details
    Rules:
      - each operator group is non-empty with a positive total weight and
        no repeated operator type;
      - at least one termination criterion is set (otherwise the search
        never stops);
      - the elite and the initial population fit into the population.

    @returns
        Problems in rule order; empty list when the block is consistent.
    """
    problems: list[str] = []

    # (1) Operator groups
    for group in OPERATOR_GROUPS:
        problems.extend(_operator_problems(group, getattr(solver, group)))

    # (2) Termination
    termination = solver.termination
    if (
        termination.max_time is None
        and termination.max_generations is None
        and termination.variation_cv is None
    ):
        problems.append("solver.termination sets no limit")

    # (3) Population sizes
    population = solver.population
    if population.elite_size > population.max_size:
        problems.append(
            f"solver.population.elite_size ({population.elite_size}) exceeds "
            f"max_size ({population.max_size})"
        )
    if population.initial_size > population.max_size:
        problems.append(
            f"solver.population.initial_size ({population.initial_size}) exceeds "
            f"max_size ({population.max_size})"
        )
    return problems


def _validation_problems(validation: ValidationConfig) -> list[str]:
    if validation.max_workers is not None and not validation.parallel:
        return ["validation.max_workers is set but validation.parallel is off"]
    return []


# ----------------------------
# LOADER
# ----------------------------
class ConfigLoader:
    """
    @brief
    Reads the runtime configuration and owns its E0004 contract.

    @details
    YAML and JSON documents are accepted. A document is rejected when it
    cannot be read or decoded, when it does not match the `Config` schema,
    or when its solver tuning block is inconsistent across fields. All
    cross-field problems are reported together in one ConfigError.
    """

    def load(self, path: Path) -> Config:
        """
        @brief
        Load, decode and check a configuration file.

        @raises
            ConfigError
                On any read, decode, schema or consistency failure.
        """
        text = self._read_text(path)
        fmt = "json" if path.suffix.lower() in JSON_SUFFIXES else "yaml"
        cfg = self.parse(text, fmt=fmt, source=str(path))
        logger.info(
            "Config loaded: %s (termination max_time=%s, max_generations=%s).",
            path,
            cfg.solver.termination.max_time,
            cfg.solver.termination.max_generations,
        )
        return cfg

    def parse(self, text: str, fmt: str = "yaml", source: str = "<string>") -> Config:
        """
        @brief
        Build a checked Config from document text.

        @params
            text : str
                Document content.
            fmt : str
                "yaml" or "json".
            source : str
                Name used in error messages.
        """
        # (1) Decode into a mapping
        document = self._decode(text, fmt, source)

        # (2) Field-level schema
        try:
            cfg = Config.model_validate(document)
        except ValidationError as e:
            raise ConfigError(
                message=f"Config {source} does not match the schema: {e}",
                source="ConfigLoader.parse",
                suggested_action="Fix field names and value types; unknown keys are rejected.",
            ) from e

        # (3) Cross-field consistency
        problems = solver_tuning_problems(cfg.solver) + _validation_problems(cfg.validation)
        if problems:
            raise ConfigError(
                message=f"Config {source} is inconsistent: {'; '.join(problems)}",
                source="ConfigLoader.parse",
                suggested_action="Adjust the listed settings so the solver can run with them.",
            )
        return cfg

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _read_text(self, path: Path) -> str:
        if not isinstance(path, Path):
            raise ConfigError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="ConfigLoader._read_text",
                suggested_action="Pass a pathlib.Path pointing to the config file.",
            )
        suffix = path.suffix.lower()
        if suffix not in YAML_SUFFIXES | JSON_SUFFIXES:
            raise ConfigError(
                message=f"Unsupported config format '{suffix}': {path}",
                source="ConfigLoader._read_text",
                suggested_action="Use a .yaml, .yml or .json config file.",
            )
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigError(
                message=f"Config file not found: {path}",
                source="ConfigLoader._read_text",
                suggested_action="Check the --config path.",
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(
                message=f"Cannot read config file {path}: {e}",
                source="ConfigLoader._read_text",
                suggested_action="Check file permissions and that the file is UTF-8 encoded.",
            ) from e

    def _decode(self, text: str, fmt: str, source: str) -> dict[str, Any]:
        if not text.strip():
            raise ConfigError(
                message=f"Config {source} is empty.",
                source="ConfigLoader._decode",
                suggested_action="Omit --config to use defaults, or fill in the document.",
            )
        try:
            data = json.loads(text) if fmt == "json" else yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(
                message=f"Cannot decode config {source}: {e}",
                source="ConfigLoader._decode",
                suggested_action=f"Fix the {fmt.upper()} syntax.",
            ) from e
        if not isinstance(data, Mapping):
            raise ConfigError(
                message=f"Config {source} must be a mapping at the top level.",
                source="ConfigLoader._decode",
                suggested_action="Start the document with keys such as 'validation' or 'solver'.",
            )
        return dict(data)


__all__ = ["ConfigLoader", "solver_tuning_problems"]
