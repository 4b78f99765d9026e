# scripts/gen_schemas.py
"""
Generate JSON Schemas for vrpcheck data models.

This script exports JSON Schema files for:
    - Problem
    - Matrix
    - Config

Output directory: schemas/
"""

import json
from pathlib import Path

from vrpcheck.schemas.models import Config, Matrix, Problem


def export_schema(model_cls, name: str, out_dir: Path) -> Path:
    """
    @brief
    Exports the JSON schema of a given Pydantic model.

    @details
    Schemas use aliases (camelCase keys) so that they describe the
    documents users actually write.

    @returns
        Path of the written "<name>.schema.json" file.
    """
    # (1) Ensure output directory exists
    out_dir.mkdir(parents=True, exist_ok=True)

    # (2) Compute target path and generate schema data
    schema_path = (out_dir / f"{name}.schema.json").resolve()
    schema = model_cls.model_json_schema(by_alias=True)

    # (3) Serialize JSON Schema to file with indentation and final newline
    with schema_path.open("w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
        f.write("\n")

    # (4) Print confirmation with relative path for user feedback
    try:
        rel = schema_path.relative_to(Path.cwd())
    except ValueError:
        rel = schema_path
    print(f"Generated {rel}")
    return schema_path


def main(out_dir: Path | None = None) -> None:
    out_dir = out_dir or Path("schemas").resolve()

    export_schema(Problem, "problem", out_dir)
    export_schema(Matrix, "matrix", out_dir)
    export_schema(Config, "config", out_dir)


if __name__ == "__main__":
    main()
