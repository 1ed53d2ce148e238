"""Product data as reported by the remote product catalog.

Products are owned by another service.  The order service only ever
holds a read-only copy for the duration of a single request: prices are
snapshotted onto line items, names are looked up again on every read.
"""

from __future__ import annotations

from dataclasses import dataclass

from oms.domain.model.value_objects import Money


@dataclass(frozen=True)
class ProductInfo:
    id: str
    name: str
    price: Money

    @staticmethod
    def from_payload(raw: dict) -> ProductInfo:
        """Build from a catalog reply entry ``{"id", "name", "price"}``."""
        return ProductInfo(
            id=str(raw["id"]),
            name=raw["name"],
            price=Money.of(raw["price"]),
        )


def index_by_id(products: list[ProductInfo]) -> dict[str, ProductInfo]:
    return {p.id: p for p in products}
