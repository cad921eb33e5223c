"""Configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from .terrain.config import TerrainConfig


class PerfBudget(BaseModel):
    """Generation time budget checked by the perf gate."""

    max_mean_ms: float = Field(default=2000.0, description="Mean generation time cap")
    max_p95_ms: float = Field(default=3000.0, description="95th percentile cap")
    max_peak_ms: float = Field(default=5000.0, description="Slowest run cap")


class Config(BaseModel):
    """Complete configuration for terrain tooling."""

    biome: str | None = None
    terrain: TerrainConfig = TerrainConfig()
    perf: PerfBudget = PerfBudget()


def load_config(config_path: Path) -> Config:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Config.model_validate(data)


def configs_dir() -> Path:
    """Directory holding the bundled config files."""
    return Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends with .toml
    2. configs/{name}.toml

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    config_path = configs_dir() / f"{name}.toml"
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {configs_dir()}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    directory = configs_dir()
    if not directory.exists():
        return []
    return sorted(p.stem for p in directory.glob("*.toml"))
