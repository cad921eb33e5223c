"""Generation timing metrics and the performance budget gate."""

import json
import time
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog
from pydantic import BaseModel, Field

from .biome import BiomeDescriptor, get_biome
from .config import PerfBudget
from .terrain.config import TerrainConfig
from .terrain.generator import generate_terrain
from .validation import ValidationResult

logger = structlog.get_logger()


class PerfMetrics(BaseModel):
    """Timings for repeated terrain generation runs."""

    generator: str = Field(description="Generator strategy measured")
    biome_id: str = Field(description="Biome generated")
    width: int
    height: int
    seed: int
    runs: int
    samples_ms: list[float] = Field(default_factory=list, description="Per-run wall time")
    mean_ms: float = 0.0
    p95_ms: float = 0.0
    peak_ms: float = 0.0
    measured_at: str = ""

    @classmethod
    def from_samples(
        cls,
        samples_ms: list[float],
        config: TerrainConfig,
        biome: BiomeDescriptor,
    ) -> "PerfMetrics":
        """Build metrics with summary statistics computed from raw samples."""
        values = np.asarray(samples_ms, dtype=np.float64)
        return cls(
            generator=config.generator,
            biome_id=biome.id,
            width=config.width,
            height=config.height,
            seed=config.seed,
            runs=len(samples_ms),
            samples_ms=list(samples_ms),
            mean_ms=float(values.mean()) if values.size else 0.0,
            p95_ms=float(np.percentile(values, 95)) if values.size else 0.0,
            peak_ms=float(values.max()) if values.size else 0.0,
            measured_at=datetime.now(timezone.utc).isoformat(),
        )


def measure_generation(
    config: TerrainConfig,
    biome: BiomeDescriptor | None = None,
    runs: int = 5,
) -> PerfMetrics:
    """Time ``runs`` full generations with identical inputs.

    Args:
        config: Terrain generation configuration.
        biome: Biome descriptor; None selects the default biome.
        runs: Number of timed runs (at least 1).

    Returns:
        PerfMetrics for the runs.

    Raises:
        ValueError: If ``runs`` is less than 1.
    """
    if runs < 1:
        raise ValueError(f"runs must be at least 1, got {runs}")
    if biome is None:
        biome = get_biome(None)

    samples: list[float] = []
    for run in range(runs):
        start = time.perf_counter()
        generate_terrain(config, biome)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        samples.append(elapsed_ms)
        logger.debug("generation_timed", run=run, elapsed_ms=round(elapsed_ms, 2))

    metrics = PerfMetrics.from_samples(samples, config, biome)
    logger.info(
        "generation_measured",
        generator=metrics.generator,
        biome_id=metrics.biome_id,
        runs=metrics.runs,
        mean_ms=round(metrics.mean_ms, 2),
        p95_ms=round(metrics.p95_ms, 2),
        peak_ms=round(metrics.peak_ms, 2),
    )
    return metrics


def write_metrics(path: Path, metrics: PerfMetrics) -> None:
    """Write metrics as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(metrics.model_dump_json(indent=2))
    logger.info("metrics_written", path=str(path))


def load_metrics(path: Path) -> PerfMetrics:
    """Load metrics written by ``write_metrics``.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If the file is not valid metrics JSON.
    """
    if not path.exists():
        raise FileNotFoundError(f"Metrics file not found: {path}")
    with open(path) as f:
        data = json.load(f)
    return PerfMetrics.model_validate(data)


def evaluate_perf_gate(metrics: PerfMetrics, budget: PerfBudget) -> ValidationResult:
    """Compare metrics against a budget.

    Each exceeded cap is an error. A run count below 3 is a warning since the
    p95 figure is not meaningful there.

    Args:
        metrics: Measured timings.
        budget: Time caps.

    Returns:
        ValidationResult; ``passed`` is False if any cap was exceeded.
    """
    result = ValidationResult()

    if metrics.runs == 0:
        result.add_error("Metrics contain no runs")
        return result
    if metrics.runs < 3:
        result.add_warning(f"Only {metrics.runs} runs measured; p95 is unreliable")

    checks = (
        ("mean", metrics.mean_ms, budget.max_mean_ms),
        ("p95", metrics.p95_ms, budget.max_p95_ms),
        ("peak", metrics.peak_ms, budget.max_peak_ms),
    )
    for name, value, limit in checks:
        if value > limit:
            result.add_error(f"{name} generation time {value:.1f} ms exceeds {limit:.1f} ms")

    if result.passed:
        logger.info("perf_gate_passed", mean_ms=round(metrics.mean_ms, 2))
    else:
        logger.warning("perf_gate_failed", errors=result.errors)
    return result
