"""Renderers that turn an ordered listing into table rows."""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .catalog import FlatItem


class Renderer(Protocol):
    """Sink that receives the final ordered listing on every refresh."""

    def render(self, items: Sequence["FlatItem"]) -> None:
        ...


class TableRenderer:
    """Keep the rows for the catalog table, one row per item in listing order.

    Every call to :meth:`render` replaces the previous rows entirely.
    """

    columns: tuple[str, ...] = ("image", "name", "price", "category")

    def __init__(self) -> None:
        self.rows: list[dict[str, object]] = []
        self.render_count = 0

    def render(self, items: Sequence["FlatItem"]) -> None:
        self.rows = [item.to_dict() for item in items]
        self.render_count += 1

    @property
    def is_empty(self) -> bool:
        return not self.rows
