from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..dataclasses import APPLIES_GLOBAL, CatalogItem
from .exceptions import InvalidParkIdError

logger = logging.getLogger(__name__)


PARK_LABELS = {
    "MURCHISON": "Murchison Falls National Park",
    "BWINDI": "Bwindi Impenetrable National Park",
    "QUEEN_ELIZABETH": "Queen Elizabeth National Park",
    "KIBALE": "Kibale Forest National Park",
    "MGAHINGA": "Mgahinga Gorilla National Park",
    "KIDEPO": "Kidepo Valley National Park",
    "LAKE_MBURO": "Lake Mburo National Park",
    "MT_ELGON": "Mt Elgon National Park",
    "RWENZORI": "Rwenzori Mountains National Park",
    "SEMULIKI": "Semuliki National Park",
    "ZIWA": "Ziwa Rhino Sanctuary",
    "BUSIKA": "Busika",
    "ENTEBBE": "Entebbe",
    "LAKE_BUNYONYI": "Lake Bunyonyi",
    "JINJA": "Jinja",
}
UNKNOWN_PARK = "Unknown Park"


def get_park_label(park_id: Optional[str], labels: Optional[Dict[str, str]] = None) -> str:
    if not park_id:
        return UNKNOWN_PARK
    table = PARK_LABELS if labels is None else labels
    return table.get(park_id, park_id)


def assert_valid_park_id(park_id: str, labels: Optional[Dict[str, str]] = None) -> None:
    table = PARK_LABELS if labels is None else labels
    if park_id not in table:
        raise InvalidParkIdError(
            f"Invalid park id: {park_id!r}. Valid ids are: {', '.join(table)}"
        )


def get_catalog_items_for_park(
    catalog: Iterable[CatalogItem],
    park_id: Optional[str],
    category: str,
) -> List[CatalogItem]:
    """
    Active items of a category usable for a park.

    Global items always qualify; Park items only when their park matches.
    With no park selected only Global items are returned. An empty park id
    is a caller error rather than "no park".
    """
    if park_id is not None and not park_id.strip():
        raise InvalidParkIdError("Park id must be a non-empty string or None")

    selected = []
    for item in catalog:
        if not item.active or item.category != category:
            continue
        if item.applies_to == APPLIES_GLOBAL:
            selected.append(item)
        elif park_id is not None and item.park_id == park_id:
            selected.append(item)
    return selected


def index_catalog(catalog: Iterable[CatalogItem]) -> Dict[str, CatalogItem]:
    """id -> item; inactive items included so saved itineraries still resolve."""
    index: Dict[str, CatalogItem] = {}
    for item in catalog:
        if item.id in index:
            logger.debug(f"Duplicate catalog id {item.id}; keeping the first entry")
            continue
        index[item.id] = item
    return index


def get_items_by_ids(index: Dict[str, CatalogItem], ids: Iterable[str]) -> List[CatalogItem]:
    return [index[item_id] for item_id in ids if item_id in index]
