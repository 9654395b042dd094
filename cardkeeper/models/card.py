"""
Catalog record model.

CatalogRecord is the one typed view of a Scryfall card payload. All field
aliasing (set vs set_code, faces vs top-level images) happens once, in
from_scryfall, so nothing downstream touches raw payload keys.
"""

from dataclasses import dataclass, field
from typing import Any


def _face_image(payload: dict[str, Any], size: str) -> str | None:
    """Image URL of the card, falling back to the first face of a DFC."""
    image_uris = payload.get("image_uris")
    if image_uris and image_uris.get(size):
        return str(image_uris[size])

    faces = payload.get("card_faces") or []
    if faces and faces[0].get("image_uris"):
        url = faces[0]["image_uris"].get(size)
        return str(url) if url else None

    return None


@dataclass(frozen=True, slots=True)
class CatalogRecord:
    """
    A card as returned by the catalog.

    Fetched fresh per lookup and never mutated locally.

    Attributes:
        id: Catalog-assigned id of this printing (stable key)
        name: Canonical English name
        printed_name: Localized name as printed, if not English
        language: Language tag of this printing (e.g., "en", "fr")
        face_names: Names of each face for split/double-faced cards
    """

    id: str
    name: str
    printed_name: str | None = None
    language: str = "en"
    oracle_id: str | None = None
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    rarity: str | None = None
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    mana_cost: str | None = None
    cmc: float | None = None
    type_line: str | None = None
    oracle_text: str | None = None
    image_url: str | None = None
    image_url_small: str | None = None
    prices: dict[str, str | None] = field(default_factory=dict)
    legalities: dict[str, str] = field(default_factory=dict)
    face_names: tuple[str, ...] = ()

    @classmethod
    def from_scryfall(cls, payload: dict[str, Any]) -> "CatalogRecord":
        """Build a record from a Scryfall card object."""
        faces = payload.get("card_faces") or []
        mana_cost = payload.get("mana_cost")
        if mana_cost is None and faces:
            mana_cost = faces[0].get("mana_cost")
        oracle_text = payload.get("oracle_text")
        if oracle_text is None and faces:
            oracle_text = faces[0].get("oracle_text")

        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            printed_name=payload.get("printed_name"),
            language=payload.get("lang") or "en",
            oracle_id=payload.get("oracle_id"),
            set_code=payload.get("set"),
            set_name=payload.get("set_name"),
            collector_number=payload.get("collector_number"),
            rarity=payload.get("rarity"),
            colors=tuple(payload.get("colors") or ()),
            color_identity=tuple(payload.get("color_identity") or ()),
            mana_cost=mana_cost,
            cmc=payload.get("cmc"),
            type_line=payload.get("type_line"),
            oracle_text=oracle_text,
            image_url=_face_image(payload, "normal"),
            image_url_small=_face_image(payload, "small"),
            prices=dict(payload.get("prices") or {}),
            legalities=dict(payload.get("legalities") or {}),
            face_names=tuple(str(face["name"]) for face in faces if face.get("name")),
        )

    @property
    def display_name(self) -> str:
        """Name as printed on the card, in its own language."""
        return self.printed_name or self.name

    @property
    def is_english(self) -> bool:
        return self.language == "en"

    def is_legal_in(self, format_name: str) -> bool:
        """Legal or restricted in the given format."""
        return self.legalities.get(format_name) in ("legal", "restricted")

    def matches_name(self, name: str) -> bool:
        """Case-insensitive match against the full name or the front face name."""
        wanted = name.strip().lower()
        if self.name.lower() == wanted:
            return True
        return bool(self.face_names) and self.face_names[0].lower() == wanted
