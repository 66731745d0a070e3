"""
Constants module for campaign studio
"""

from .facets import (
    VALID_DATA_SOURCES,
    VALID_CHANNELS,
    SOURCE_FILTERS,
    validate_facets,
    get_facets_list
)

__all__ = [
    "VALID_DATA_SOURCES",
    "VALID_CHANNELS",
    "SOURCE_FILTERS",
    "validate_facets",
    "get_facets_list",
]
