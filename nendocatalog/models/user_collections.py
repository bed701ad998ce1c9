from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CollectionKind(str, Enum):
    """The two personal lists a figure can be on."""

    OWNED = "owned"
    WISHLIST = "wishlist"

    def other(self) -> "CollectionKind":
        return CollectionKind.WISHLIST if self is CollectionKind.OWNED else CollectionKind.OWNED


@dataclass
class UserCollections:
    """
    A user's owned and wishlisted figure ids.

    INVARIANT: an id is never in both lists. toggle() is the only mutator
    and maintains this.
    Ids are kept in insertion order, as persisted.
    """

    owned: list[str] = field(default_factory=list)
    wishlist: list[str] = field(default_factory=list)

    def ids(self, kind: CollectionKind) -> list[str]:
        return self.owned if kind is CollectionKind.OWNED else self.wishlist

    def is_owned(self, record_id: str) -> bool:
        return record_id in self.owned

    def is_wishlisted(self, record_id: str) -> bool:
        return record_id in self.wishlist

    def toggle(self, record_id: str, kind: CollectionKind) -> bool:
        """
        Toggle an id in one list.

        Adding to one list removes the id from the other.

        Returns:
            True if the id is now in `kind`, False if it was removed.
        """
        target = self.ids(kind)
        if record_id in target:
            target.remove(record_id)
            return False

        target.append(record_id)
        other = self.ids(kind.other())
        if record_id in other:
            other.remove(record_id)
        return True

    def to_dict(self) -> dict[str, list[str]]:
        return {"owned": list(self.owned), "wishlist": list(self.wishlist)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserCollections":
        """
        Build from persisted data.

        Ids are coerced to strings. An id stored in both lists (possible
        only in hand-edited data) is kept as owned.
        """
        owned = [str(i) for i in data.get("owned") or []]
        owned_set = set(owned)
        wishlist = [str(i) for i in data.get("wishlist") or [] if str(i) not in owned_set]
        return cls(owned=owned, wishlist=wishlist)
