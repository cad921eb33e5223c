"""Terrain generation configuration models."""

from typing import Literal

from pydantic import BaseModel, Field


class NoiseConfig(BaseModel):
    """Noise generation parameters for the base elevation field."""

    base_wavelength: float = Field(default=48.0, description="Base wavelength in tiles")
    octaves: int = Field(default=4, description="Number of octaves for fBm")
    lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")
    gain: float = Field(default=0.5, description="Amplitude multiplier per octave")


class RiverConfig(BaseModel):
    """Meandering river overlay parameters."""

    width_min: int = Field(default=3, description="Minimum channel width in tiles")
    width_max: int = Field(default=5, description="Maximum channel width in tiles")
    frequency_min: float = Field(default=0.03, description="Minimum meander frequency")
    frequency_max: float = Field(default=0.08, description="Maximum meander frequency")
    amplitude_fraction: float = Field(
        default=0.15, description="Meander amplitude as a fraction of grid height"
    )
    jitter: float = Field(default=1.0, description="Per-column centerline jitter")
    flood_plain_width: int = Field(
        default=2, description="Flood plain band beyond the channel"
    )
    pond_count_min: int = Field(default=3, description="Minimum ponds near the river")
    pond_count_max: int = Field(default=6, description="Maximum ponds near the river")
    pond_radius_min: int = Field(default=4, description="Minimum pond radius")
    pond_radius_max: int = Field(default=8, description="Maximum pond radius")


class CoastalConfig(BaseModel):
    """Coastline overlay parameters."""

    base_distance_min: int = Field(default=20, description="Minimum coastline distance")
    base_distance_max: int = Field(default=35, description="Maximum coastline distance")
    noise_amplitude: float = Field(default=12.0, description="Coastline wobble in tiles")
    noise_wavelength: float = Field(default=24.0, description="Coastline wobble wavelength")
    deep_band: float = Field(
        default=6.0, description="Seaward distance beyond which the ocean is deep"
    )
    beach_band: float = Field(default=2.0, description="Width of the beach band")
    inland_rise: float = Field(
        default=0.03, description="Elevation gained per tile inland of the coast"
    )


class MesaConfig(BaseModel):
    """Mesa/plateau overlay parameters."""

    plateau_count_min: int = Field(default=4, description="Minimum plateau count")
    plateau_count_max: int = Field(default=7, description="Maximum plateau count")
    radius_min: int = Field(default=8, description="Minimum plateau radius")
    radius_max: int = Field(default=18, description="Maximum plateau radius")
    height_min: int = Field(default=3, description="Minimum plateau height")
    height_max: int = Field(default=5, description="Maximum plateau height")
    boundary_noise: float = Field(
        default=0.2, description="Radial boundary wobble as a fraction of radius"
    )
    cliff_width: int = Field(default=2, description="Steep cliff ring width")
    talus_width: int = Field(default=2, description="Talus slope ring width")
    arroyo_count_min: int = Field(default=2, description="Minimum arroyo count")
    arroyo_count_max: int = Field(default=4, description="Maximum arroyo count")
    arroyo_depth: int = Field(default=2, description="Elevation removed along an arroyo")


class LegacyConfig(BaseModel):
    """Noise + overlay generator parameters."""

    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    river: RiverConfig = Field(default_factory=RiverConfig)
    coastal: CoastalConfig = Field(default_factory=CoastalConfig)
    mesa: MesaConfig = Field(default_factory=MesaConfig)
    feature_seed_offset: int = Field(
        default=7919, description="Seed offset for the feature scatter stream"
    )


class RuntimeConfig(BaseModel):
    """Heightmap pipeline parameters."""

    heightmap_size: int | None = Field(
        default=None, description="Heightmap edge length (None = max grid dimension)"
    )
    profile: str = Field(default="default", description="Heightmap profile name")
    erosion_iterations: int = Field(default=30, description="Erosion passes")
    deep_water_fraction: float = Field(
        default=0.35, description="Depth fraction of sea level that counts as deep"
    )
    tree_density: float = Field(default=0.18, description="Tree probability per cell")
    rock_density: float = Field(default=0.10, description="Rock probability per cell")
    chunk_size: int = Field(default=32, description="LOD chunk edge in tiles")
    lod_distances: list[float] = Field(
        default_factory=lambda: [48.0, 96.0, 160.0],
        description="Camera distance thresholds between LOD levels",
    )


class TerrainConfig(BaseModel):
    """Complete terrain generation configuration."""

    seed: int = Field(default=42, ge=0, description="Random seed for reproducibility")
    width: int = Field(default=128, description="Grid width in tiles")
    height: int = Field(default=128, description="Grid height in tiles")
    generator: Literal["legacy", "runtime"] = Field(
        default="legacy", description="Generation strategy"
    )

    legacy: LegacyConfig = Field(default_factory=LegacyConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
