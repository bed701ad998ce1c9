"""
Catalog services.

The pure catalog engine: id matching, variant resolution, filtering and
statistics. The export presets and CatalogService live in their own
modules because they depend on the rendering package.
"""

from nendocatalog.services.catalog_filter import (
    FandomOption,
    FilterOptions,
    filter_records,
    get_filter_options,
)
from nendocatalog.services.id_matching import IdMatcher, numeric_id
from nendocatalog.services.stats import (
    CatalogStats,
    compute_stats,
    select_owned,
    select_owned_or_wishlisted,
)
from nendocatalog.services.variant_resolver import (
    VariantIndex,
    VariantLinks,
    get_displayed_set,
)

__all__ = [
    "CatalogStats",
    "FandomOption",
    "FilterOptions",
    "IdMatcher",
    "VariantIndex",
    "VariantLinks",
    "compute_stats",
    "filter_records",
    "get_displayed_set",
    "get_filter_options",
    "numeric_id",
    "select_owned",
    "select_owned_or_wishlisted",
]
