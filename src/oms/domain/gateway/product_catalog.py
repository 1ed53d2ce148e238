"""Port for the remote product catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from oms.domain.model.product import ProductInfo


class ProductCatalog(ABC):

    @abstractmethod
    def validate_products(self, product_ids: list[str]) -> list[ProductInfo]:
        """Return current name and price for every requested id.

        Raises UnknownProductsError naming the ids the catalog does not
        know, or UpstreamError when the catalog cannot be reached in time.
        """
