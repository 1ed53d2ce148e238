"""HTTP client for the payment service.

``POST {base_url}/create-payment-session``; the JSON reply is the session
descriptor and is handed back untouched.
"""

from __future__ import annotations

import logging

import requests

from oms.domain.exceptions import UpstreamError
from oms.domain.gateway.payment_gateway import PaymentGateway, PaymentSessionRequest

logger = logging.getLogger(__name__)


class HttpPaymentGateway(PaymentGateway):

    def __init__(
        self,
        base_url: str,
        timeout: float,
        session: requests.Session | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/create-payment-session"
        self._timeout = timeout
        self._session = session or requests.Session()

    def create_payment_session(self, request: PaymentSessionRequest) -> dict:
        try:
            response = self._session.post(
                self._url, json=request.to_payload(), timeout=self._timeout
            )
            response.raise_for_status()  # Raises for 4xx/5xx status codes
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.warning(
                "Payment session request failed for order %s: %s", request.order_id, exc
            )
            raise UpstreamError(f"Payment service error: {exc}") from exc
