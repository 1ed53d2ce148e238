"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and messaging layers can catch them uniformly and turn them into
user-friendly messages.  Each class carries a status-like code that the
boundaries use when building a reply; nothing else crosses the boundary.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    status = 500

    def to_dict(self) -> dict:
        return {"status": self.status, "message": str(self)}


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    status = 400


class UnknownProductsError(ValidationError):
    """The product catalog does not know one or more requested products."""

    def __init__(self, product_ids: list[str]) -> None:
        self.product_ids = list(product_ids)
        super().__init__(f"Unknown product(s): {', '.join(self.product_ids)}")


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    status = 404


class UpstreamError(DomainException):
    """A remote collaborator was unreachable, timed out or replied with an error.

    Safe to retry with backoff; distinct from ValidationError so callers
    can tell a bad request from a flaky dependency.
    """

    status = 502


class PaymentSessionError(UpstreamError):
    """The order was committed but no payment session could be created.

    The order stays PENDING without a session.  ``order_id`` lets an
    operator or a reconciliation job find it.
    """

    def __init__(self, order_id: str, reason: str) -> None:
        self.order_id = order_id
        super().__init__(
            f"Order {order_id} created but payment session failed: {reason}"
        )

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["orderId"] = self.order_id
        return payload
