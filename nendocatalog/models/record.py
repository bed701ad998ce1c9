from dataclasses import dataclass
from typing import Any

from nendocatalog.config import DEFAULT_BOX_COLOR


@dataclass(frozen=True, slots=True)
class Record:
    """
    A single catalog entry.

    Attributes:
        id: Canonical display id, may carry a suffix after the digits (e.g., "1580DX")
        linked_id: Id of the paired base/DX record, if any
        is_dx: True for DX variants
        fandom: Source series name
        gender: Gender tag as stored in the catalog
        name: Figure name
        description: Free-text description
        hair_color: Hair colour tags
        clothes_color: Clothes colour tags
        parts: Included parts, in catalog order
        box_color: Hex colour of the retail box
        official_photo: Photo URL or local path
        release_date: Release date as written in the catalog
        price: Retail price in yen
    """

    id: str
    name: str = ""
    fandom: str = ""
    gender: str = ""
    description: str = ""
    linked_id: str | None = None
    is_dx: bool = False
    hair_color: tuple[str, ...] = ()
    clothes_color: tuple[str, ...] = ()
    parts: tuple[str, ...] = ()
    box_color: str = DEFAULT_BOX_COLOR
    official_photo: str | None = None
    release_date: str | None = None
    price: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Build a record from the on-disk catalog schema (camelCase keys)."""
        linked_id = data.get("linkedId")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            fandom=data.get("fandom") or "",
            gender=data.get("gender") or "",
            description=data.get("description") or "",
            linked_id=str(linked_id) if linked_id else None,
            is_dx=bool(data.get("isDX", False)),
            hair_color=tuple(data.get("hairColor") or ()),
            clothes_color=tuple(data.get("clothesColor") or ()),
            parts=tuple(data.get("parts") or ()),
            box_color=data.get("boxColor") or DEFAULT_BOX_COLOR,
            official_photo=data.get("officialPhoto"),
            release_date=data.get("releaseDate"),
            price=data.get("price"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the on-disk catalog schema."""
        return {
            "id": self.id,
            "linkedId": self.linked_id,
            "isDX": self.is_dx,
            "fandom": self.fandom,
            "gender": self.gender,
            "name": self.name,
            "description": self.description,
            "hairColor": list(self.hair_color),
            "clothesColor": list(self.clothes_color),
            "parts": list(self.parts),
            "boxColor": self.box_color,
            "officialPhoto": self.official_photo,
            "releaseDate": self.release_date,
            "price": self.price,
        }
