"""Terrain persistence: ``"x,y"``-keyed blobs and JSON save files."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
import structlog

from .state import TerrainState
from .terrain_types import MAX_ELEVATION, MIN_ELEVATION, FeatureType, WaterType
from .types import Position

logger = structlog.get_logger()

FORMAT_VERSION = 1

TerrainBlob = dict[str, Any]


def encode_key(x: int, y: int) -> str:
    """Encode a cell as an ``"x,y"`` key."""
    return f"{x},{y}"


def parse_key(key: str) -> Position | None:
    """Parse an ``"x,y"`` key.

    Returns:
        The Position, or None if the key is malformed.
    """
    parts = key.split(",")
    if len(parts) != 2:
        return None
    try:
        return Position(x=int(parts[0]), y=int(parts[1]))
    except ValueError:
        return None


def serialize_terrain(state: TerrainState) -> TerrainBlob:
    """Snapshot a TerrainState into a persistable blob.

    Every elevation cell is written; water and feature cells only when
    populated.

    Args:
        state: Terrain to snapshot.

    Returns:
        Dict with ``elevation``, ``water``, ``features`` and ``biome_id``.
    """
    elevation = state.elevation_array()
    water = state.water_array()
    features = state.feature_array()

    blob: TerrainBlob = {
        "elevation": {
            encode_key(x, y): int(elevation[y, x])
            for y in range(state.height)
            for x in range(state.width)
        },
        "water": {
            encode_key(x, y): int(water[y, x])
            for y, x in zip(*np.nonzero(water))
        },
        "features": {
            encode_key(x, y): int(features[y, x])
            for y, x in zip(*np.nonzero(features))
        },
        "biome_id": state.biome_id,
    }
    return blob


def _restore_layer(
    state: TerrainState,
    entries: Any,
    target: np.ndarray,
    valid: set[int],
    layer: str,
) -> int:
    """Write valid entries of one keyed layer into ``target``.

    Returns:
        Number of skipped entries.
    """
    if not isinstance(entries, dict):
        return 0

    skipped = 0
    for key, value in entries.items():
        position = parse_key(str(key))
        if position is None or not state.in_bounds(position):
            skipped += 1
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value not in valid:
            skipped += 1
            continue
        target[position.y, position.x] = value

    if skipped:
        logger.warning("terrain_entries_skipped", layer=layer, skipped=skipped)
    return skipped


def deserialize_terrain(state: TerrainState, blob: TerrainBlob) -> None:
    """Replace a TerrainState's maps with the contents of a blob.

    Prior content is discarded. Coordinates missing from the blob resume
    their defaults; malformed keys, out-of-bounds keys and unknown values
    are skipped.

    Args:
        state: Terrain to overwrite.
        blob: Blob produced by ``serialize_terrain``.
    """
    shape = (state.height, state.width)
    elevation = np.zeros(shape, dtype=np.int8)
    water = np.zeros(shape, dtype=np.uint8)
    features = np.zeros(shape, dtype=np.uint8)

    _restore_layer(
        state,
        blob.get("elevation"),
        elevation,
        set(range(MIN_ELEVATION, MAX_ELEVATION + 1)),
        "elevation",
    )
    _restore_layer(state, blob.get("water"), water, {int(w) for w in WaterType}, "water")
    _restore_layer(
        state, blob.get("features"), features, {int(f) for f in FeatureType}, "features"
    )

    biome_id = blob.get("biome_id")
    state.replace_maps(
        elevation,
        water,
        features,
        biome_id=biome_id if isinstance(biome_id, str) else None,
    )


def save_terrain(path: Path, state: TerrainState, seed: int | None = None) -> None:
    """Save terrain to a JSON file with a metadata header.

    Args:
        path: Output path (should end with .json).
        state: Terrain to save.
        seed: Generation seed to record, if known.
    """
    metadata = {
        "version": FORMAT_VERSION,
        "seed": seed,
        "width": state.width,
        "height": state.height,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump({"metadata": metadata, "terrain": serialize_terrain(state)}, f)

    logger.info(
        "terrain_saved",
        path=str(path),
        width=state.width,
        height=state.height,
        size_kb=round(path.stat().st_size / 1024, 1),
    )


def load_terrain(path: Path, state: TerrainState) -> dict[str, Any]:
    """Load a terrain save file into ``state``.

    Args:
        path: Path to a file written by ``save_terrain``.
        state: Terrain to overwrite.

    Returns:
        The metadata header.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Terrain file not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid terrain file {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("terrain"), dict):
        raise ValueError("Invalid terrain file: missing 'terrain' blob")

    metadata = data.get("metadata", {})
    if not isinstance(metadata, dict):
        metadata = {}

    saved_size = (metadata.get("width"), metadata.get("height"))
    if None not in saved_size and saved_size != (state.width, state.height):
        logger.warning(
            "terrain_size_mismatch",
            saved_width=saved_size[0],
            saved_height=saved_size[1],
            width=state.width,
            height=state.height,
        )

    deserialize_terrain(state, data["terrain"])
    logger.info("terrain_loaded", path=str(path), biome_id=state.biome_id)
    return metadata
