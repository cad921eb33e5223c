"""Biome descriptors: generation presets selecting overlay and densities."""

from pydantic import BaseModel, Field

RIVER_BIOME = "river"
COASTAL_BIOME = "coastal"
MESA_BIOME = "mesa"
DEFAULT_BIOME = "default"


class BiomeDescriptor(BaseModel, frozen=True):
    """Read-only generation parameters for one biome.

    Every field is optional; an unknown ``id`` simply selects no overlay.
    """

    id: str = Field(default=DEFAULT_BIOME, description="Biome identifier")
    base_elevation: int = Field(default=0, description="Elevation bias added to noise")
    elevation_variation: float = Field(
        default=1.0, description="Noise amplitude multiplier"
    )
    water_coverage: float = Field(
        default=0.1, description="Approximate fraction of water cells"
    )
    tree_density: float = Field(default=0.15, description="Tree probability per cell")
    rock_density: float = Field(default=0.05, description="Rock probability per cell")
    sea_level: float = Field(
        default=0.35, description="Runtime pipeline water threshold"
    )
    height_scale: float = Field(
        default=1.0, description="Runtime pipeline height mapped to peak elevation"
    )


BIOME_PRESETS: dict[str, BiomeDescriptor] = {
    DEFAULT_BIOME: BiomeDescriptor(),
    RIVER_BIOME: BiomeDescriptor(
        id=RIVER_BIOME,
        elevation_variation=0.8,
        water_coverage=0.15,
        tree_density=0.2,
        rock_density=0.03,
    ),
    COASTAL_BIOME: BiomeDescriptor(
        id=COASTAL_BIOME,
        elevation_variation=0.6,
        water_coverage=0.3,
        tree_density=0.12,
        rock_density=0.04,
        sea_level=0.42,
    ),
    MESA_BIOME: BiomeDescriptor(
        id=MESA_BIOME,
        base_elevation=1,
        elevation_variation=0.7,
        water_coverage=0.02,
        tree_density=0.04,
        rock_density=0.12,
        sea_level=0.2,
        height_scale=0.9,
    ),
}


def get_biome(biome_id: str | None) -> BiomeDescriptor:
    """Look up a preset by id.

    Unknown ids yield a default descriptor carrying that id, so generation
    falls through to the default fill.
    """
    if biome_id is None:
        return BIOME_PRESETS[DEFAULT_BIOME]
    preset = BIOME_PRESETS.get(biome_id)
    if preset is not None:
        return preset
    return BiomeDescriptor(id=biome_id)
