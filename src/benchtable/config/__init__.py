"""Configuration module for benchtable."""

from pathlib import Path
from typing import Any

import yaml

from ..errors import InvalidInvocationError, MissingResourceError
from .settings import (
    ARTIFACT_FILES,
    ARTIFACT_FORMS,
    ARTIFACT_SUBDIR,
    EXCLUDED_DIRS,
    MODES,
    BenchTableConfig,
)

__all__ = [
    "ARTIFACT_FILES",
    "ARTIFACT_FORMS",
    "ARTIFACT_SUBDIR",
    "EXCLUDED_DIRS",
    "MODES",
    "BenchTableConfig",
    "load_config_file",
]


def load_config_file(path: Path, base: BenchTableConfig | None = None) -> BenchTableConfig:
    """Apply a YAML config file on top of ``base`` (defaults to the env config).

    Relative ``results_dir``/``data_dir`` entries are resolved against the
    config file's directory.
    """
    if not path.is_file():
        raise MissingResourceError(f"Config file not found: {path}", path=path)

    with path.open(encoding="utf-8") as f:
        try:
            data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidInvocationError(f"Invalid YAML in {path}: {e}", path=path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidInvocationError(f"Config file must contain a mapping: {path}", path=path)

    unknown = sorted(set(data) - BenchTableConfig.field_names())
    if unknown:
        raise InvalidInvocationError(
            f"Unknown config keys in {path}: {', '.join(unknown)}", path=path
        )

    for key in ("results_dir", "data_dir"):
        if isinstance(data.get(key), str):
            p = Path(data[key])
            data[key] = p if p.is_absolute() else path.parent / p

    return (base or BenchTableConfig.from_env()).with_overrides(**data)
