"""Listing pipeline for the shop: flatten, filter, sort and render the catalog."""
from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Optional

from .catalog import Catalog, FlatItem, PriceValue
from .rendering import Renderer

ALL_CATEGORIES = "all"

# Longest leading decimal literal, mirroring how browsers parse floats.
_NUMBER_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII
)


class SortCriterion(str, Enum):
    """Sort orders offered by the catalog page."""

    PRICE_ASCENDING = "priceAscending"
    PRICE_DESCENDING = "priceDescending"
    NAME_ASCENDING = "nameAscending"
    NAME_DESCENDING = "nameDescending"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    @classmethod
    def parse(cls, token: object) -> Optional["SortCriterion"]:
        """Return the criterion for a selector token, or None when unrecognized."""

        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            return None
        token = token.strip()
        try:
            return cls(token)
        except ValueError:
            return _SORT_ALIASES.get(token)


_SORT_LABELS: dict[SortCriterion, str] = {
    SortCriterion.PRICE_ASCENDING: "Price: low to high",
    SortCriterion.PRICE_DESCENDING: "Price: high to low",
    SortCriterion.NAME_ASCENDING: "Name: A to Z",
    SortCriterion.NAME_DESCENDING: "Name: Z to A",
}

_SORT_ALIASES: dict[str, SortCriterion] = {
    "priceAsc": SortCriterion.PRICE_ASCENDING,
    "priceDesc": SortCriterion.PRICE_DESCENDING,
    "alphaAsc": SortCriterion.NAME_ASCENDING,
    "alphaDesc": SortCriterion.NAME_DESCENDING,
}


@dataclass(frozen=True)
class SelectOption:
    """Value and label pair for a selector control."""

    value: str
    label: str


@dataclass(frozen=True)
class Selection:
    """Current state of the category and sort selectors."""

    category: str = ALL_CATEGORIES
    sort: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "Selection":
        """Build a selection from request arguments, defaulting missing values."""

        category = (args.get("category") or "").strip() or ALL_CATEGORIES
        sort = (args.get("sort") or "").strip()
        return cls(category=category, sort=sort)

    @property
    def criterion(self) -> Optional[SortCriterion]:
        return SortCriterion.parse(self.sort)

    @property
    def sort_value(self) -> str:
        """Return the canonical token of the sort selector option to show as selected."""

        criterion = self.criterion
        return criterion.value if criterion else self.sort


def coerce_price(value: PriceValue) -> Decimal | None:
    """Convert a stored price to a number, returning None when it is not one.

    Strings contribute their leading numeric portion, so ``"1.50 USD"`` reads
    as ``1.50`` while ``"$1.50"`` and ``""`` are not numbers.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return None if value.is_nan() else value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return None if math.isnan(value) else Decimal(str(value))
    if isinstance(value, str):
        match = _NUMBER_PREFIX.match(value.lstrip())
        if not match:
            return None
        literal = match.group()
        try:
            return Decimal(literal)
        except InvalidOperation:
            # exponent beyond Decimal limits; floats overflow to infinity or zero
            return Decimal(float(literal))
    return None


def collation_key(text: str) -> tuple[str, str, str]:
    """Return a sort key that orders names the way a locale-aware compare does.

    Letters compare case- and accent-insensitively first; accents and then
    case (lowercase first) only break ties.
    """

    folded = text.casefold()
    base = "".join(
        char for char in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(char)
    )
    return base, folded, text.swapcase()


def _compare(left, right) -> int:
    return (left > right) - (left < right)


def _compare_prices(left: FlatItem, right: FlatItem, *, descending: bool) -> int:
    left_price = coerce_price(left.price)
    right_price = coerce_price(right.price)
    # unparseable prices trail valid ones in either direction
    if left_price is None or right_price is None:
        return _compare(left_price is None, right_price is None)
    result = _compare(left_price, right_price)
    return -result if descending else result


def compare_price_ascending(left: FlatItem, right: FlatItem) -> int:
    """Order by numeric price, cheapest first."""

    return _compare_prices(left, right, descending=False)


def compare_price_descending(left: FlatItem, right: FlatItem) -> int:
    """Order by numeric price, most expensive first."""

    return _compare_prices(left, right, descending=True)


def compare_name_ascending(left: FlatItem, right: FlatItem) -> int:
    """Order by name, A to Z."""

    return _compare(collation_key(left.name), collation_key(right.name))


def compare_name_descending(left: FlatItem, right: FlatItem) -> int:
    """Order by name, Z to A."""

    return _compare(collation_key(right.name), collation_key(left.name))


Comparator = Callable[[FlatItem, FlatItem], int]

COMPARATORS: dict[SortCriterion, Comparator] = {
    SortCriterion.PRICE_ASCENDING: compare_price_ascending,
    SortCriterion.PRICE_DESCENDING: compare_price_descending,
    SortCriterion.NAME_ASCENDING: compare_name_ascending,
    SortCriterion.NAME_DESCENDING: compare_name_descending,
}


def flatten_catalog(catalog: Catalog) -> list[FlatItem]:
    """Return every catalog item tagged with its category, in catalog order."""

    return [
        FlatItem.from_item(item, category)
        for category, items in catalog.items()
        for item in items
    ]


def filter_items(items: Iterable[FlatItem], selected_category: str) -> list[FlatItem]:
    """Keep the items listed under ``selected_category``; ``"all"`` keeps everything."""

    if selected_category == ALL_CATEGORIES:
        return list(items)
    return [item for item in items if item.category == selected_category]


def sort_items(
    items: Iterable[FlatItem], criterion: SortCriterion | str | None
) -> list[FlatItem]:
    """Return the items ordered by ``criterion``.

    The sort is stable. Unrecognized criteria leave the input order untouched.
    """

    resolved = SortCriterion.parse(criterion)
    if resolved is None:
        return list(items)
    return sorted(items, key=cmp_to_key(COMPARATORS[resolved]))


def build_listing(
    catalog: Catalog, selected_category: str, sort_criterion: SortCriterion | str | None
) -> list[FlatItem]:
    """Run the full listing pipeline for one selector state."""

    items = flatten_catalog(catalog)
    items = filter_items(items, selected_category)
    return sort_items(items, sort_criterion)


def category_options(catalog: Catalog, selected: str | None = None) -> list[SelectOption]:
    """Return category selector options, led by the option that shows everything.

    A ``selected`` category missing from the catalog is appended so the
    selector keeps showing what the (empty) listing was filtered by.
    """

    options = [SelectOption(value=ALL_CATEGORIES, label="All categories")]
    options.extend(SelectOption(value=category, label=category) for category in catalog)
    if selected and selected != ALL_CATEGORIES and selected not in catalog:
        options.append(SelectOption(value=selected, label=f"{selected} (not in catalog)"))
    return options


def sort_options() -> list[SelectOption]:
    """Return sort selector options, led by the option that keeps catalog order."""

    options = [SelectOption(value="", label="No sorting")]
    options.extend(
        SelectOption(value=criterion.value, label=criterion.label) for criterion in SortCriterion
    )
    return options


def count_unpriced(items: Sequence[FlatItem]) -> int:
    """Return how many items carry a price that cannot be read as a number."""

    return sum(1 for item in items if coerce_price(item.price) is None)


class CatalogController:
    """Refresh the rendered listing whenever the selectors change."""

    def __init__(self, catalog: Catalog, renderer: Renderer) -> None:
        self.catalog = catalog
        self.renderer = renderer

    def refresh(self, selection: Selection) -> list[FlatItem]:
        """Recompute the listing from the full catalog and hand it to the renderer."""

        items = build_listing(self.catalog, selection.category, selection.sort)
        self.renderer.render(items)
        return items
