"""HTTP client for the product catalog service.

``POST {base_url}/validate`` with ``{"ids": [...]}``.  A 200 reply is the
list of ``{"id", "name", "price"}`` entries; a 400/404 reply lists the
ids the catalog does not know under ``"unknown"``.  Anything else,
including timeouts, is an upstream failure.
"""

from __future__ import annotations

import logging

import requests

from oms.domain.exceptions import UnknownProductsError, UpstreamError
from oms.domain.gateway.product_catalog import ProductCatalog
from oms.domain.model.product import ProductInfo

logger = logging.getLogger(__name__)


class HttpProductCatalog(ProductCatalog):

    def __init__(
        self,
        base_url: str,
        timeout: float,
        session: requests.Session | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/validate"
        self._timeout = timeout
        self._session = session or requests.Session()

    def validate_products(self, product_ids: list[str]) -> list[ProductInfo]:
        try:
            response = self._session.post(
                self._url, json={"ids": product_ids}, timeout=self._timeout
            )
        except requests.exceptions.RequestException as exc:
            logger.warning("Product catalog unreachable: %s", exc)
            raise UpstreamError(f"Product catalog unavailable: {exc}") from exc

        if response.status_code in (400, 404):
            unknown = self._unknown_ids(response) or product_ids
            raise UnknownProductsError(unknown)

        try:
            response.raise_for_status()
            return [ProductInfo.from_payload(raw) for raw in response.json()]
        except (requests.exceptions.RequestException, ValueError, KeyError) as exc:
            raise UpstreamError(f"Product catalog error: {exc}") from exc

    @staticmethod
    def _unknown_ids(response: requests.Response) -> list[str]:
        try:
            body = response.json()
        except ValueError:
            return []
        if not isinstance(body, dict):
            return []
        return [str(pid) for pid in body.get("unknown", [])]
