from __future__ import annotations

from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator


class FactCheckConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    color: bool = True
    show_successes: bool = False
    output_dir: str = "factcheck-runs"
    junit: bool = True
    html_report: bool = True
    files: list[str] = []

    @field_validator("output_dir")
    @classmethod
    def expand_output_dir(cls, v: str) -> str:
        """Expand ``${VAR}`` references; a missing variable without a default is an error."""
        try:
            return expandvars(v, nounset=True)
        except Exception as e:
            raise ValueError(f"output_dir '{v}' references an unset environment variable: {e}")

    @field_validator("files")
    @classmethod
    def no_duplicate_files(cls, v: list[str]) -> list[str]:
        seen = set()
        for name in v:
            if name in seen:
                raise ValueError(f"Fact file '{name}' is listed more than once")
            seen.add(name)
        return v


def load_config(path: Path) -> FactCheckConfig:
    """Load and validate a factcheck config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = FactCheckConfig(**raw)

    # Resolve relative paths relative to config file location
    config.files = [
        str(p if p.is_absolute() else (config_dir / p).resolve())
        for p in map(Path, config.files)
    ]
    output_path = Path(config.output_dir)
    if not output_path.is_absolute():
        config.output_dir = str((config_dir / output_path).resolve())

    return config
