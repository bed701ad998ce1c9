"""
Collection statistics over the catalog.

Counts how many persisted owned/wishlist ids fall inside the filtered set
and inside the whole displayed set, using the loose id matching of
IdMatcher.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from nendocatalog.models.record import Record
from nendocatalog.models.user_collections import UserCollections
from nendocatalog.services.id_matching import IdMatcher


@dataclass(frozen=True)
class CatalogStats:
    """Header counts: filtered view plus the unfiltered comparison."""

    total: int
    owned: int
    wishlist: int
    unfiltered_total: int
    unfiltered_owned: int
    unfiltered_wishlist: int


def compute_stats(
    filtered: Sequence[Record],
    collections: UserCollections,
    displayed: Sequence[Record],
) -> CatalogStats:
    """
    Count owned and wishlisted ids within the filtered and displayed sets.

    Each persisted id counts at most once per set. Ids that match no
    record in a set do not count toward it.
    """
    filtered_ids = IdMatcher.from_ids(r.id for r in filtered)
    displayed_ids = IdMatcher.from_ids(r.id for r in displayed)

    return CatalogStats(
        total=len(filtered),
        owned=filtered_ids.count_matching(collections.owned),
        wishlist=filtered_ids.count_matching(collections.wishlist),
        unfiltered_total=len(displayed),
        unfiltered_owned=displayed_ids.count_matching(collections.owned),
        unfiltered_wishlist=displayed_ids.count_matching(collections.wishlist),
    )


def select_owned(items: Sequence[Record], collections: UserCollections) -> list[Record]:
    """Records matching an owned id, in input order."""
    owned = IdMatcher.from_ids(collections.owned)
    return [r for r in items if owned.matches(r.id)]


def select_owned_or_wishlisted(
    items: Sequence[Record], collections: UserCollections
) -> list[Record]:
    """Records matching an owned or wishlisted id, in input order."""
    owned = IdMatcher.from_ids(collections.owned)
    wishlist = IdMatcher.from_ids(collections.wishlist)
    return [r for r in items if owned.matches(r.id) or wishlist.matches(r.id)]
