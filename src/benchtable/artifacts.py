"""Measurement artifact parsing.

Criterion writes one directory per benchmark function; its ``new/``
subdirectory holds either ``raw.csv`` (one row per sample) or
``estimates.json`` (precomputed statistics). Both are reduced to a
:class:`Measurement` carrying a mean time in nanoseconds.
"""

import csv
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import MalformedArtifactError, MissingResourceError

logger = logging.getLogger(__name__)

# raw.csv: group,function,value,throughput_num,throughput_type,sample_measured_value,unit,iteration_count
MEASURED_VALUE_INDEX = 5

# estimates.json: {"Mean": {"point_estimate": ...}, ...}
POINT_ESTIMATE_PATH: tuple[str, ...] = ("Mean", "point_estimate")


@dataclass(frozen=True)
class Measurement:
    mean_ns: float
    sample_count: int
    form: str
    path: Path


def _read_text(path: Path) -> str:
    try:
        with path.open("r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as e:
        raise MissingResourceError(f"Artifact not found: {path}", path=path) from e
    except UnicodeDecodeError as e:
        raise MalformedArtifactError(f"{path}: not valid UTF-8 text", path=path) from e


def _to_mean(value: Any, path: Path, where: str) -> float:
    if isinstance(value, bool):
        raise MalformedArtifactError(f"{path}: {where} is not numeric: {value!r}", path=path)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedArtifactError(
            f"{path}: {where} is not numeric: {value!r}", path=path
        ) from e
    if not math.isfinite(number):
        raise MalformedArtifactError(f"{path}: {where} is not finite: {value!r}", path=path)
    return number


def parse_raw_csv(text: str, path: Path) -> Measurement:
    """Average the measured-value column of a Criterion ``raw.csv``."""
    rows = [row for row in csv.reader(text.splitlines()) if row]
    if not rows:
        raise MalformedArtifactError(f"{path}: empty artifact", path=path)

    header, *data = rows
    if len(header) <= MEASURED_VALUE_INDEX:
        raise MalformedArtifactError(
            f"{path}: header has {len(header)} fields, "
            f"expected at least {MEASURED_VALUE_INDEX + 1}",
            path=path,
        )
    if not data:
        raise MalformedArtifactError(f"{path}: no samples after header", path=path)

    values: list[float] = []
    for line_no, row in enumerate(data, start=2):
        if len(row) != len(header):
            raise MalformedArtifactError(
                f"{path}:{line_no}: expected {len(header)} fields, got {len(row)}",
                path=path,
            )
        values.append(_to_mean(row[MEASURED_VALUE_INDEX], path, f"line {line_no}"))

    mean = sum(values) / len(values)
    if mean <= 0:
        raise MalformedArtifactError(f"{path}: non-positive mean time {mean}", path=path)
    return Measurement(mean_ns=mean, sample_count=len(values), form="raw", path=path)


def parse_estimates_json(text: str, path: Path) -> Measurement:
    """Extract ``Mean.point_estimate`` from a Criterion ``estimates.json``."""
    try:
        node: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedArtifactError(f"{path}: invalid JSON: {e}", path=path) from e

    for key in POINT_ESTIMATE_PATH:
        if not isinstance(node, dict) or key not in node:
            raise MalformedArtifactError(
                f"{path}: missing key path {'.'.join(POINT_ESTIMATE_PATH)}", path=path
            )
        node = node[key]

    mean = _to_mean(node, path, ".".join(POINT_ESTIMATE_PATH))
    if mean <= 0:
        raise MalformedArtifactError(f"{path}: non-positive mean time {mean}", path=path)
    return Measurement(mean_ns=mean, sample_count=1, form="estimates", path=path)


_PARSERS = {
    "raw": parse_raw_csv,
    "estimates": parse_estimates_json,
}


def load_measurement(path: Path, form: str) -> Measurement:
    parser = _PARSERS[form]
    measurement = parser(_read_text(path), path)
    logger.debug(
        "Loaded %s (%s, %d samples): mean=%.1fns",
        path,
        form,
        measurement.sample_count,
        measurement.mean_ns,
    )
    return measurement
