"""JSON-file-backed implementation of OrderRepository.

The whole order table lives in one file.  Every write re-serializes the
file to a temporary sibling and swaps it in with ``os.replace``, so an
order and all of its line items (or a status plus a receipt) land
together or not at all.  Writers hold an exclusive ``flock`` on a
sibling ``.lock`` file around load, change and replace, so a consumer
process and a CLI process sharing the file cannot overwrite each other
(last write wins per order, never per file).  The lock is never held
across a remote call because remote calls never reach the store.
"""

from __future__ import annotations

import fcntl
import json
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from oms.domain.exceptions import EntityNotFoundError
from oms.domain.model.order import Order, OrderLineItem, OrderStatus, Receipt
from oms.domain.model.value_objects import Money, Quantity
from oms.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()

    def connect(self) -> None:
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        with self._locked():
            orders = self._load_raw()
            orders.append(self._to_raw(order))
            self._persist_raw(orders)

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_page(
        self, page: int, limit: int, status: OrderStatus | None = None
    ) -> list[Order]:
        rows = self._filtered(status)
        rows.sort(key=lambda raw: (raw["created_at"], raw["id"]))
        start = (page - 1) * limit
        return [self._to_domain(raw) for raw in rows[start:start + limit]]

    def count(self, status: OrderStatus | None = None) -> int:
        return len(self._filtered(status))

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        def apply(order: Order) -> None:
            order.status = status

        return self._update(order_id, apply)

    def record_payment(
        self, order_id: str, payment_reference: str, receipt_url: str
    ) -> Order:
        return self._update(
            order_id, lambda order: order.record_payment(payment_reference, receipt_url)
        )

    # --- Internal helpers -----------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        # threading.Lock for threads of this process, flock for other processes
        lock_path = self._file_path.with_suffix(self._file_path.suffix + ".lock")
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock, open(lock_path, "a") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)

    def _update(self, order_id: str, apply) -> Order:
        with self._locked():
            orders = self._load_raw()
            for i, raw in enumerate(orders):
                if raw["id"] == order_id:
                    order = self._to_domain(raw)
                    apply(order)
                    orders[i] = self._to_raw(order)
                    self._persist_raw(orders)
                    return order
        raise EntityNotFoundError(f"Order {order_id} not found")

    def _filtered(self, status: OrderStatus | None) -> list[dict]:
        rows = self._load_raw()
        if status is None:
            return rows
        return [raw for raw in rows if raw["status"] == status.value]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "total_amount": str(order.total_amount.amount),
            "total_items": order.total_items,
            "status": order.status.value,
            "paid": order.paid,
            "payment_reference": order.payment_reference,
            "created_at": order.created_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity.value,
                    "price": str(item.price.amount),
                }
                for item in order.items
            ],
            "receipts": [r.receipt_url for r in order.receipts],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            items=[
                OrderLineItem(
                    product_id=i["product_id"],
                    quantity=Quantity(i["quantity"]),
                    price=Money(Decimal(i["price"])),
                )
                for i in raw["items"]
            ],
            total_amount=Money(Decimal(raw["total_amount"])),
            total_items=raw["total_items"],
            status=OrderStatus(raw["status"]),
            paid=raw["paid"],
            payment_reference=raw["payment_reference"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            receipts=[Receipt(order_id=raw["id"], receipt_url=url) for url in raw["receipts"]],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        if not self._file_path.exists():
            return []
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(orders, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
