import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from ..errors import InvalidInvocationError

logger = logging.getLogger(__name__)

__all__ = [
    "ARTIFACT_FILES",
    "ARTIFACT_FORMS",
    "BenchTableConfig",
]

# Criterion output layout
RESULTS_DIR = os.getenv("BENCHTABLE_RESULTS_DIR", "") or "target/criterion"
DATA_DIR = os.getenv("BENCHTABLE_DATA_DIR", "") or "bench_data"

# Implementation A is the baseline, B the challenger; speedup = A / B
BASELINE = os.getenv("BENCHTABLE_BASELINE", "") or "flate2"
CHALLENGER = os.getenv("BENCHTABLE_CHALLENGER", "") or "libdeflate"

# raw: per-sample CSV, estimates: Criterion's summary JSON
ARTIFACT_FILES: dict[str, str] = {
    "raw": "raw.csv",
    "estimates": "estimates.json",
}
ARTIFACT_FORMS: tuple[str, ...] = tuple(ARTIFACT_FILES)
ARTIFACT_FORM = os.getenv("BENCHTABLE_ARTIFACT_FORM", "").strip().lower() or "raw"

# Subdirectory Criterion writes inside each benchmark function dir
ARTIFACT_SUBDIR = "new"

MODES: tuple[str, ...] = ("encode", "decode")

# Criterion's HTML summary lives beside the group directories
EXCLUDED_DIRS: frozenset[str] = frozenset({"report"})


def _string_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, (list, tuple, set, frozenset)) or not all(
        isinstance(item, str) for item in value
    ):
        raise InvalidInvocationError(f"{key} must be a list of strings, got {value!r}")
    return list(value)


@dataclass(frozen=True)
class BenchTableConfig:
    results_dir: Path = Path(RESULTS_DIR)
    data_dir: Path = Path(DATA_DIR)
    baseline: str = BASELINE
    challenger: str = CHALLENGER
    artifact_form: str = ARTIFACT_FORM
    modes: tuple[str, ...] = MODES
    excluded_dirs: frozenset[str] = EXCLUDED_DIRS

    def __post_init__(self) -> None:
        if self.artifact_form not in ARTIFACT_FILES:
            raise InvalidInvocationError(
                f"Unknown artifact form '{self.artifact_form}' "
                f"(expected one of: {', '.join(ARTIFACT_FORMS)})"
            )
        if not self.baseline or not self.challenger:
            raise InvalidInvocationError("Baseline and challenger names must be non-empty")
        if self.baseline == self.challenger:
            raise InvalidInvocationError(
                f"Baseline and challenger must differ (both are '{self.baseline}')"
            )

    @property
    def artifact_file(self) -> str:
        return ARTIFACT_FILES[self.artifact_form]

    @property
    def labels(self) -> tuple[str, ...]:
        return (
            "bench",
            "size [KB]",
            f"{self.baseline} [us]",
            f"{self.challenger} [us]",
            "speedup",
        )

    @classmethod
    def from_env(cls) -> "BenchTableConfig":
        results_dir = os.getenv("BENCHTABLE_RESULTS_DIR", "").strip() or RESULTS_DIR
        data_dir = os.getenv("BENCHTABLE_DATA_DIR", "").strip() or DATA_DIR
        logger.debug("Using results_dir=%s data_dir=%s", results_dir, data_dir)
        return cls(
            results_dir=Path(results_dir),
            data_dir=Path(data_dir),
            baseline=os.getenv("BENCHTABLE_BASELINE", "").strip() or BASELINE,
            challenger=os.getenv("BENCHTABLE_CHALLENGER", "").strip() or CHALLENGER,
            artifact_form=(
                os.getenv("BENCHTABLE_ARTIFACT_FORM", "").strip().lower() or ARTIFACT_FORM
            ),
        )

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    def with_overrides(self, **overrides: Any) -> "BenchTableConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        for key in ("results_dir", "data_dir"):
            if key in changes:
                if not isinstance(changes[key], (str, os.PathLike)):
                    raise InvalidInvocationError(f"{key} must be a path string")
                changes[key] = Path(changes[key])
        for key in ("baseline", "challenger", "artifact_form"):
            if key in changes and not isinstance(changes[key], str):
                raise InvalidInvocationError(f"{key} must be a string")
        if "modes" in changes:
            changes["modes"] = tuple(_string_list("modes", changes["modes"]))
        if "excluded_dirs" in changes:
            changes["excluded_dirs"] = frozenset(
                _string_list("excluded_dirs", changes["excluded_dirs"])
            )
        if "artifact_form" in changes:
            changes["artifact_form"] = str(changes["artifact_form"]).lower()
        return replace(self, **changes) if changes else self
