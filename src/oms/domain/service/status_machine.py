"""Order status machine.

Pure logic: given the current and the requested status, decide the
resulting status and whether anything has to be written.  Callers are
expected to retry "set status to X" freely, so asking for the status an
order already has is always a no-op, even when a transition table is
configured.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from oms.domain.exceptions import ValidationError
from oms.domain.model.order import OrderStatus


@dataclass(frozen=True)
class StatusTransition:
    status: OrderStatus
    changed: bool


class StatusMachine:
    """Decides status transitions.

    ``allowed`` maps a status to the statuses it may move to.  With the
    default ``None`` every status may move to every other status (operator
    override); statuses missing from a supplied table are terminal.
    """

    def __init__(
        self,
        allowed: Mapping[OrderStatus, frozenset[OrderStatus]] | None = None,
    ) -> None:
        self._allowed = allowed

    def transition(
        self, current: OrderStatus, requested: OrderStatus
    ) -> StatusTransition:
        if requested == current:
            return StatusTransition(status=current, changed=False)

        if self._allowed is not None and requested not in self._allowed.get(
            current, frozenset()
        ):
            raise ValidationError(
                f"Cannot change order status from {current.value} to {requested.value}"
            )
        return StatusTransition(status=requested, changed=True)
