"""Terrain invariant audit."""

import logging

import numpy as np

from .state import TerrainState
from .terrain.shoreline import water_adjacency
from .terrain_types import (
    BEACH_ELEVATION,
    MAX_ELEVATION,
    MIN_ELEVATION,
    WATER_MAX_ELEVATION,
    FeatureType,
    WaterType,
)

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of a validation run."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_terrain(state: TerrainState) -> ValidationResult:
    """Audit a TerrainState's maps against the cell invariants.

    Errors: elevation out of range, water above -2, beach off -1 or away from
    water, features on water, unknown enum values. Warnings: a grid with no
    dry land or no water at all.

    Args:
        state: Terrain to audit.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()
    elevation = state.elevation_array()
    water = state.water_array()
    features = state.feature_array()

    _check_elevation_range(elevation, result)
    _check_enum_values(water, features, result)
    _check_water_depth(elevation, water, result)
    _check_beaches(elevation, water, features, result)
    _check_features_on_water(water, features, result)
    _check_coverage(water, result)

    if result.passed:
        logger.info("Terrain validation passed")
    else:
        logger.warning(f"Terrain validation failed with {len(result.errors)} errors")
        for error in result.errors:
            logger.error(f"  - {error}")

    for warning in result.warnings:
        logger.warning(f"  - {warning}")

    return result


def _check_elevation_range(elevation: np.ndarray, result: ValidationResult) -> None:
    """Check every elevation lies in the valid range."""
    bad = np.sum((elevation < MIN_ELEVATION) | (elevation > MAX_ELEVATION))
    if bad > 0:
        result.add_error(f"{bad} cells have elevation outside [{MIN_ELEVATION}, {MAX_ELEVATION}]")


def _check_enum_values(
    water: np.ndarray, features: np.ndarray, result: ValidationResult
) -> None:
    """Check maps only hold known water and feature values."""
    bad_water = np.sum(~np.isin(water, [int(w) for w in WaterType]))
    if bad_water > 0:
        result.add_error(f"{bad_water} cells have unknown water values")
    bad_features = np.sum(~np.isin(features, [int(f) for f in FeatureType]))
    if bad_features > 0:
        result.add_error(f"{bad_features} cells have unknown feature values")


def _check_water_depth(
    elevation: np.ndarray, water: np.ndarray, result: ValidationResult
) -> None:
    """Check water only sits at or below its maximum elevation."""
    shallow = np.sum((water != WaterType.NONE) & (elevation > WATER_MAX_ELEVATION))
    if shallow > 0:
        result.add_error(f"{shallow} water cells sit above elevation {WATER_MAX_ELEVATION}")


def _check_beaches(
    elevation: np.ndarray,
    water: np.ndarray,
    features: np.ndarray,
    result: ValidationResult,
) -> None:
    """Check beaches sit at beach elevation next to water."""
    beach = features == FeatureType.BEACH
    misplaced = np.sum(beach & (elevation != BEACH_ELEVATION))
    if misplaced > 0:
        result.add_error(f"{misplaced} beach cells are not at elevation {BEACH_ELEVATION}")

    stranded = np.sum(beach & ~water_adjacency(water))
    if stranded > 0:
        result.add_warning(f"{stranded} beach cells have no adjacent water")


def _check_features_on_water(
    water: np.ndarray, features: np.ndarray, result: ValidationResult
) -> None:
    """Check no feature is placed on a water cell."""
    flooded = np.sum((water != WaterType.NONE) & (features != FeatureType.NONE))
    if flooded > 0:
        result.add_error(f"{flooded} features sit on water cells")


def _check_coverage(water: np.ndarray, result: ValidationResult) -> None:
    """Warn about degenerate all-land or all-water grids."""
    wet = np.mean(water != WaterType.NONE) if water.size else 0.0
    if wet == 0.0:
        result.add_warning("Terrain has no water")
    elif wet == 1.0:
        result.add_warning("Terrain has no dry land")
