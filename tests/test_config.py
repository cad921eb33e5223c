"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from cityterrain.config import Config, find_config, list_configs, load_config
from cityterrain.terrain.config import TerrainConfig


class TestTerrainConfig:
    """Tests for TerrainConfig."""

    def test_defaults(self):
        """Test default values."""
        config = TerrainConfig()
        assert config.seed == 42
        assert (config.width, config.height) == (128, 128)
        assert config.generator == "legacy"
        assert config.legacy.noise.octaves == 4
        assert config.runtime.tree_density == 0.18
        assert config.runtime.rock_density == 0.10

    def test_unknown_generator_rejected(self):
        """Only known generator strategies validate."""
        with pytest.raises(ValidationError):
            TerrainConfig(generator="voxel")

    def test_negative_seed_rejected(self):
        """Seeds must be non-negative."""
        with pytest.raises(ValidationError):
            TerrainConfig(seed=-1)
        assert TerrainConfig(seed=0).seed == 0


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_load_nested_tables(self, tmp_path: Path):
        """Nested tables map onto nested models."""
        path = tmp_path / "custom.toml"
        path.write_text(
            'biome = "river"\n'
            "\n"
            "[terrain]\n"
            "seed = 7\n"
            "width = 64\n"
            "\n"
            "[terrain.legacy.river]\n"
            "width_min = 4\n"
            "\n"
            "[perf]\n"
            "max_mean_ms = 10.0\n"
        )
        config = load_config(path)
        assert config.biome == "river"
        assert config.terrain.seed == 7
        assert config.terrain.width == 64
        assert config.terrain.height == 128
        assert config.terrain.legacy.river.width_min == 4
        assert config.perf.max_mean_ms == 10.0

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        """An empty file yields the default config."""
        path = tmp_path / "empty.toml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_invalid_value_rejected(self, tmp_path: Path):
        """Wrongly typed values raise ValidationError."""
        path = tmp_path / "bad.toml"
        path.write_text('[terrain]\nseed = "abc"\n')
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path: Path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")


class TestFindConfig:
    """Tests for bundled config lookup."""

    def test_bundled_configs_listed(self):
        """The bundled configs are discoverable by name."""
        names = list_configs()
        assert "default" in names
        assert "river" in names

    def test_find_by_name(self):
        """Names resolve to files in the configs directory."""
        path = find_config("runtime")
        assert path.name == "runtime.toml"
        assert load_config(path).terrain.generator == "runtime"

    def test_find_by_path(self, tmp_path: Path):
        """Explicit .toml paths are returned as-is."""
        path = tmp_path / "mine.toml"
        path.write_text("")
        assert find_config(str(path)) == path

    def test_unknown_name(self):
        """Unknown names raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="not found"):
            find_config("does-not-exist")
