"""Column names and category values of the rockfall field-test table."""

from __future__ import annotations

from typing import Dict, List

# Header names used in the field-test sheets, mapped to the names used in code.
COLUMN_MAP: Dict[str, str] = {
    "TestGroup": "test_group",
    "SlopeMaterial": "slope_material",
    "SlopeHeight": "slope_height",
    "SlopeAngle": "slope_angle",
    "Weight": "weight",
    "TranslationalKineticEnergy": "translational_kinetic_energy",
    "RotationalKineticEnergy": "rotational_kinetic_energy",
}

REQUIRED_COLUMNS: List[str] = list(COLUMN_MAP.values())

NUMERIC_COLUMNS: List[str] = [
    "slope_height",
    "slope_angle",
    "weight",
    "translational_kinetic_energy",
    "rotational_kinetic_energy",
]

# Slope material category -> indicator column.
MATERIAL_FLAGS: Dict[str, str] = {
    "Rock": "is_rock",
    "Colluvium": "is_colluvium",
    "Weathered Rock": "is_weathered_rock",
}

KNOWN_MATERIALS: List[str] = list(MATERIAL_FLAGS)
INDICATOR_COLUMNS: List[str] = list(MATERIAL_FLAGS.values())
