"""Result collection: one :class:`ResultRow` per Criterion benchmark group."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .artifacts import Measurement, load_measurement
from .config import ARTIFACT_SUBDIR, BenchTableConfig
from .errors import DuplicateGroupError, InvalidInvocationError, MissingResourceError
from .formatting import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultGroup:
    name: str
    path: Path
    input_size_bytes: int


@dataclass(frozen=True)
class ResultRow:
    bench: str
    size_bytes: int
    baseline_ns: float
    challenger_ns: float

    @property
    def size_kb(self) -> int:
        return self.size_bytes // 1000

    @property
    def baseline_us(self) -> int:
        return int(round_half_up(self.baseline_ns / 1000))

    @property
    def challenger_us(self) -> int:
        return int(round_half_up(self.challenger_ns / 1000))

    @property
    def speedup(self) -> float:
        return self.baseline_ns / self.challenger_ns


def validate_mode(mode: str | None, config: BenchTableConfig) -> None:
    if mode is not None and mode not in config.modes:
        raise InvalidInvocationError(
            f"Invalid mode '{mode}' (expected one of: {', '.join(config.modes)})"
        )


def artifact_path(group_dir: Path, impl: str, mode: str | None, config: BenchTableConfig) -> Path:
    function_dir = impl if mode is None else f"{impl}_{mode}"
    return group_dir / function_dir / ARTIFACT_SUBDIR / config.artifact_file


def _dataset_size(config: BenchTableConfig, name: str) -> int:
    dataset = config.data_dir / name
    if not dataset.is_file():
        raise MissingResourceError(f"Dataset file not found: {dataset}", path=dataset)
    return dataset.stat().st_size


def discover_groups(config: BenchTableConfig, sort: bool = False) -> list[ResultGroup]:
    """List group directories under ``results_dir``.

    Order is directory-listing order unless ``sort`` is set, in which case
    groups are ordered by their lower-cased name.
    """
    root = config.results_dir
    if not root.is_dir():
        raise MissingResourceError(f"Results directory not found: {root}", path=root)

    groups: list[ResultGroup] = []
    seen: dict[str, Path] = {}
    for entry in root.iterdir():
        if not entry.is_dir() or entry.name in config.excluded_dirs:
            continue
        name = entry.name.lower()
        if name in seen:
            raise DuplicateGroupError(
                f"Groups '{seen[name].name}' and '{entry.name}' both map to dataset '{name}'",
                path=entry,
            )
        seen[name] = entry
        groups.append(
            ResultGroup(name=name, path=entry, input_size_bytes=_dataset_size(config, name))
        )

    if sort:
        groups.sort(key=lambda g: g.name)
    logger.debug("Discovered %d groups in %s", len(groups), root)
    return groups


def collect_group(group: ResultGroup, mode: str | None, config: BenchTableConfig) -> ResultRow:
    baseline: Measurement = load_measurement(
        artifact_path(group.path, config.baseline, mode, config), config.artifact_form
    )
    challenger: Measurement = load_measurement(
        artifact_path(group.path, config.challenger, mode, config), config.artifact_form
    )
    row = ResultRow(
        bench=group.name,
        size_bytes=group.input_size_bytes,
        baseline_ns=baseline.mean_ns,
        challenger_ns=challenger.mean_ns,
    )
    logger.debug("%s: speedup %.3f", group.name, row.speedup)
    return row


def collect_rows(
    config: BenchTableConfig, mode: str | None = None, sort: bool | None = None
) -> list[ResultRow]:
    """Collect one row per discovered group.

    Sorting defaults to on when a mode is given and off in single-mode.
    Any missing or malformed input aborts the whole collection. The mode is
    validated here for library callers even though the CLI checks it first.
    """
    validate_mode(mode, config)
    if sort is None:
        sort = mode is not None
    return [collect_group(group, mode, config) for group in discover_groups(config, sort=sort)]
