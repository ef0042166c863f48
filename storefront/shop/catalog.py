"""Catalog data structures and the loader that supplies them to the shop."""
from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

from flask import current_app

PriceValue = Union[str, int, float, Decimal, None]


class CatalogError(ValueError):
    """Raised when the catalog source is missing or malformed."""


@dataclass(frozen=True)
class Item:
    """A single catalog entry as supplied by the catalog source."""

    name: str
    price: PriceValue
    image: str = ""


@dataclass(frozen=True)
class FlatItem:
    """Catalog item annotated with the category it was listed under."""

    name: str
    price: PriceValue
    image: str
    category: str

    @classmethod
    def from_item(cls, item: Item, category: str) -> "FlatItem":
        """Tag an item with its originating category."""

        return cls(name=item.name, price=item.price, image=item.image, category=category)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation of the item."""

        price = self.price
        if isinstance(price, Decimal):
            price = str(price)
        return {
            "name": self.name,
            "price": price,
            "image": self.image,
            "category": self.category,
        }


Catalog = Mapping[str, tuple[Item, ...]]

DEFAULT_CATALOG: dict[str, list[dict[str, Any]]] = {
    "fruits": [
        {"name": "Apple", "price": "1.50", "image": "images/apple.png"},
        {"name": "Banana", "price": "0.50", "image": "images/banana.png"},
        {"name": "Cherry", "price": "4.20", "image": "images/cherry.png"},
    ],
    "vegetables": [
        {"name": "Carrot", "price": "0.80", "image": "images/carrot.png"},
        {"name": "Broccoli", "price": "2.10", "image": "images/broccoli.png"},
    ],
    "drinks": [
        {"name": "Water", "price": "1.00", "image": "images/water.png"},
        {"name": "Orange Juice", "price": "3.25", "image": "images/orange-juice.png"},
        {"name": "Espresso", "price": "2.40", "image": "images/espresso.png"},
    ],
}


def _parse_item(raw: object, category: str, position: int) -> Item:
    """Validate a raw item record and convert it to an :class:`Item`."""

    if not isinstance(raw, Mapping):
        raise CatalogError(
            f"Item #{position} in category '{category}' must be an object, "
            f"got {type(raw).__name__}."
        )
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise CatalogError(f"Item #{position} in category '{category}' is missing a name.")
    image = raw.get("image") or ""
    if not isinstance(image, str):
        raise CatalogError(f"Item '{name}' in category '{category}' has an invalid image reference.")
    return Item(name=name, price=raw.get("price"), image=image)


def parse_catalog(document: object) -> Catalog:
    """Validate a nested catalog document and freeze it.

    The document is either the category mapping itself or an object whose
    ``categories`` key holds that mapping. Category order is preserved.
    """

    if isinstance(document, Mapping) and isinstance(document.get("categories"), Mapping):
        document = document["categories"]
    if not isinstance(document, Mapping):
        raise CatalogError("The catalog must map category names to lists of items.")

    categories: dict[str, tuple[Item, ...]] = {}
    for category, items in document.items():
        if not isinstance(category, str) or not category:
            raise CatalogError(f"Category names must be non-empty strings, got {category!r}.")
        if category == "all":
            raise CatalogError("'all' is reserved and cannot be used as a category name.")
        if not isinstance(items, (list, tuple)):
            raise CatalogError(f"Category '{category}' must hold a list of items.")
        categories[category] = tuple(
            _parse_item(raw, category, position)
            for position, raw in enumerate(items, start=1)
        )
    return MappingProxyType(categories)


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load the catalog from a JSON file, or the built-in catalog when no path is given."""

    if path is None:
        return parse_catalog(DEFAULT_CATALOG)

    source = Path(path)
    try:
        with source.open(encoding="utf-8") as handle:
            document = json.load(handle)
    except OSError as exc:
        raise CatalogError(f"Unable to read catalog file {source}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog file {source} is not valid JSON: {exc}") from exc
    return parse_catalog(document)


def current_catalog() -> Catalog:
    """Return the catalog loaded by the running application."""

    return current_app.extensions["catalog"]
