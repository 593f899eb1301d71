import json
from collections.abc import Sequence
from pathlib import Path

import pytest

from benchtable.config import BenchTableConfig

RAW_HEADER = (
    "group,function,value,throughput_num,throughput_type,"
    "sample_measured_value,unit,iteration_count"
)


def raw_csv(group: str, function: str, samples_ns: Sequence[float]) -> str:
    lines = [RAW_HEADER]
    for i, value in enumerate(samples_ns, start=1):
        lines.append(f"{group},{function},,,,{value},ns,{i}")
    return "\n".join(lines) + "\n"


def estimates_json(mean_ns: float) -> str:
    return json.dumps(
        {
            "Mean": {
                "confidence_interval": {
                    "confidence_level": 0.95,
                    "lower_bound": mean_ns * 0.99,
                    "upper_bound": mean_ns * 1.01,
                },
                "point_estimate": mean_ns,
                "standard_error": mean_ns * 0.005,
            },
            "Median": {"point_estimate": mean_ns},
        }
    )


class CriterionTree:
    """Builds a synthetic ``target/criterion`` + ``bench_data`` layout."""

    def __init__(self, root: Path, baseline: str = "flate2", challenger: str = "libdeflate"):
        self.results_dir = root / "target" / "criterion"
        self.data_dir = root / "bench_data"
        self.baseline = baseline
        self.challenger = challenger
        self.results_dir.mkdir(parents=True)
        self.data_dir.mkdir(parents=True)

    def config(self, **overrides: object) -> BenchTableConfig:
        return BenchTableConfig(
            results_dir=self.results_dir,
            data_dir=self.data_dir,
            baseline=self.baseline,
            challenger=self.challenger,
        ).with_overrides(**overrides)

    def write_artifact(
        self,
        group_dir: str,
        function: str,
        samples_ns: Sequence[float],
        form: str = "raw",
    ) -> Path:
        new_dir = self.results_dir / group_dir / function / "new"
        new_dir.mkdir(parents=True, exist_ok=True)
        if form == "raw":
            path = new_dir / "raw.csv"
            path.write_text(raw_csv(group_dir, function, samples_ns), encoding="utf-8")
        else:
            path = new_dir / "estimates.json"
            mean = sum(samples_ns) / len(samples_ns)
            path.write_text(estimates_json(mean), encoding="utf-8")
        return path

    def add_group(
        self,
        group_dir: str,
        baseline_ns: Sequence[float],
        challenger_ns: Sequence[float],
        size_bytes: int = 1000,
        mode: str | None = None,
        form: str = "raw",
    ) -> None:
        suffix = "" if mode is None else f"_{mode}"
        (self.data_dir / group_dir.lower()).write_bytes(b"x" * size_bytes)
        self.write_artifact(group_dir, f"{self.baseline}{suffix}", baseline_ns, form)
        self.write_artifact(group_dir, f"{self.challenger}{suffix}", challenger_ns, form)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in [
        "BENCHTABLE_RESULTS_DIR",
        "BENCHTABLE_DATA_DIR",
        "BENCHTABLE_BASELINE",
        "BENCHTABLE_CHALLENGER",
        "BENCHTABLE_ARTIFACT_FORM",
        "BENCHTABLE_LOG_LEVEL",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def criterion_tree(tmp_path: Path, clean_env: None) -> CriterionTree:
    return CriterionTree(tmp_path)


@pytest.fixture
def make_criterion_tree(clean_env: None) -> type[CriterionTree]:
    return CriterionTree
