"""Tests for generation timing and the perf gate."""

from pathlib import Path

import pytest

from cityterrain.biome import get_biome
from cityterrain.config import PerfBudget
from cityterrain.perf import (
    PerfMetrics,
    evaluate_perf_gate,
    load_metrics,
    measure_generation,
    write_metrics,
)
from cityterrain.terrain.config import TerrainConfig


def metrics_with(samples: list[float]) -> PerfMetrics:
    """Metrics for a 16x16 default-biome run with the given samples."""
    return PerfMetrics.from_samples(
        samples, TerrainConfig(width=16, height=16), get_biome(None)
    )


class TestPerfMetrics:
    """Tests for summary statistics."""

    def test_summary_statistics(self) -> None:
        """Mean, p95 and peak are computed from the samples."""
        metrics = metrics_with([10.0, 20.0, 30.0, 40.0])
        assert metrics.runs == 4
        assert metrics.mean_ms == pytest.approx(25.0)
        assert metrics.peak_ms == 40.0
        assert 30.0 < metrics.p95_ms <= 40.0

    def test_measure_generation(self) -> None:
        """Measuring records one positive sample per run."""
        metrics = measure_generation(TerrainConfig(width=16, height=16), runs=2)
        assert metrics.runs == 2
        assert len(metrics.samples_ms) == 2
        assert all(sample > 0 for sample in metrics.samples_ms)
        assert metrics.generator == "legacy"
        assert metrics.biome_id == "default"

    def test_measure_rejects_zero_runs(self) -> None:
        """At least one run is required."""
        with pytest.raises(ValueError):
            measure_generation(TerrainConfig(width=8, height=8), runs=0)

    def test_write_and_load(self, tmp_path: Path) -> None:
        """Metrics survive a JSON round trip."""
        metrics = metrics_with([5.0, 6.0, 7.0])
        path = tmp_path / "out" / "metrics.json"
        write_metrics(path, metrics)
        assert load_metrics(path) == metrics

    def test_load_missing(self, tmp_path: Path) -> None:
        """Missing metrics files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_metrics(tmp_path / "metrics.json")


class TestPerfGate:
    """Tests for budget evaluation."""

    def test_within_budget_passes(self) -> None:
        """Timings under every cap pass."""
        result = evaluate_perf_gate(metrics_with([10.0, 12.0, 11.0]), PerfBudget())
        assert result.passed
        assert result.warnings == []

    def test_each_cap_enforced(self) -> None:
        """Every exceeded cap is reported."""
        budget = PerfBudget(max_mean_ms=5.0, max_p95_ms=5.0, max_peak_ms=5.0)
        result = evaluate_perf_gate(metrics_with([10.0, 12.0, 11.0]), budget)
        assert not result.passed
        assert len(result.errors) == 3

    def test_peak_only(self) -> None:
        """A single slow outlier trips the peak cap alone."""
        budget = PerfBudget(max_mean_ms=100.0, max_p95_ms=1000.0, max_peak_ms=150.0)
        samples = [10.0] * 39 + [200.0]
        result = evaluate_perf_gate(metrics_with(samples), budget)
        assert [e.split()[0] for e in result.errors] == ["peak"]

    def test_few_runs_warn(self) -> None:
        """Fewer than three runs produce a warning."""
        result = evaluate_perf_gate(metrics_with([10.0]), PerfBudget())
        assert result.passed
        assert len(result.warnings) == 1

    def test_no_runs_fail(self) -> None:
        """Metrics without runs fail the gate."""
        result = evaluate_perf_gate(metrics_with([]), PerfBudget())
        assert not result.passed
