"""Routes for the Storefront shop."""
from __future__ import annotations

from flask import jsonify, render_template, request

from ..logging_service import log_manager
from . import bp
from .catalog import FlatItem, current_catalog
from .rendering import TableRenderer
from .services import (
    CatalogController,
    Selection,
    category_options,
    count_unpriced,
    sort_options,
)


def _refresh_listing() -> tuple[Selection, TableRenderer, list[FlatItem]]:
    """Run the listing pipeline for the selectors in the current request."""

    selection = Selection.from_args(request.args)
    renderer = TableRenderer()
    items = CatalogController(current_catalog(), renderer).refresh(selection)
    return selection, renderer, items


def _record_refresh(selection: Selection, items: list[FlatItem], *, action: str) -> None:
    """Log the outcome of a listing refresh, with the selector state as context."""

    unpriced = count_unpriced(items)
    context = {
        "category": selection.category,
        "sort": selection.sort,
        "criterion": selection.criterion.value if selection.criterion else None,
        "count": len(items),
        "unpriced": unpriced,
    }
    details = f"shop.{action} rendered {len(items)} rows."

    def record(**entry) -> None:
        log_manager.record(
            component="Shop", action=action, technical_details=details, context=context, **entry
        )

    if selection.sort and selection.criterion is None:
        record(
            level="warn",
            result="warn",
            title="Unknown sort order ignored",
            user_summary="The requested sort order is not available; products keep catalog order.",
        )
    if unpriced:
        record(
            level="warn",
            result="warn",
            title="Products without a readable price",
            user_summary=f"{unpriced} listed products have no valid price and are shown last when sorting by price.",
        )
    if not items:
        record(
            result="empty",
            title="No matching products",
            user_summary=f"No products are listed under '{selection.category}'.",
        )
    else:
        record(
            title="Shop catalog refreshed",
            user_summary="Product list updated for the selected category and sort order.",
        )


@bp.route("/")
def catalog():
    """Render the shop catalog table."""
    selection, renderer, items = _refresh_listing()
    _record_refresh(selection, items, action="view")
    return render_template(
        "shop/catalog.html",
        title="Storefront — Shop",
        rows=renderer.rows,
        columns=renderer.columns,
        category_options=category_options(current_catalog(), selection.category),
        sort_options=sort_options(),
        selection=selection,
        active_nav="shop",
    )


@bp.route("/api/products")
def products():
    """Return the listing for the requested selectors as JSON data."""
    selection, renderer, items = _refresh_listing()
    _record_refresh(selection, items, action="api-products")
    criterion = selection.criterion
    return jsonify(
        {
            "items": renderer.rows,
            "count": len(renderer.rows),
            "category": selection.category,
            "sort": selection.sort_value,
            "sort_recognized": criterion is not None or not selection.sort,
        }
    )


@bp.route("/api/categories")
def categories():
    """Return the category selector options as JSON data."""
    options = category_options(current_catalog())
    return jsonify(
        {
            "categories": [{"value": option.value, "label": option.label} for option in options],
            "sorts": [{"value": option.value, "label": option.label} for option in sort_options()],
        }
    )
