"""Marker-based filtering of annotated conditional-logic maps."""

from .markers import (
    ALL_MARKERS,
    DEPENDS_ON,
    FIELD_ID,
    FIELD_TYPE,
    UNUSED,
    USED_BY,
    LinePattern,
    MarkerPair,
    contains_markers,
)
from .map_filter import ToggleFlags, filter_map, strip_markers
from .session import MapSession

__all__ = [
    'ALL_MARKERS',
    'DEPENDS_ON',
    'FIELD_ID',
    'FIELD_TYPE',
    'UNUSED',
    'USED_BY',
    'LinePattern',
    'MarkerPair',
    'contains_markers',
    'ToggleFlags',
    'filter_map',
    'strip_markers',
    'MapSession',
]
