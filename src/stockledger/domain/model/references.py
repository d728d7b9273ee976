"""What a movement or reservation points back to.

Every quantity change is caused by something: a customer order, a warehouse
transfer, a manual adjustment or an inbound purchase.  Each cause is its own
small frozen dataclass carrying a stable ``kind`` tag, and ``Reference`` is
the union of them.  Persistence goes through ``reference_to_raw`` /
``reference_from_raw`` so an unknown tag fails loudly instead of being
carried around as an untyped string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from stockledger.domain.exceptions import InvalidArgument


@dataclass(frozen=True)
class OrderReference:
    kind: ClassVar[str] = "order"

    order_id: str
    item_id: str | None = None

    @property
    def label(self) -> str:
        if self.item_id is not None:
            return f"Order #{self.order_id} (item {self.item_id})"
        return f"Order #{self.order_id}"


@dataclass(frozen=True)
class TransferReference:
    kind: ClassVar[str] = "transfer"

    transfer_id: str

    @property
    def label(self) -> str:
        return f"Transfer #{self.transfer_id}"


@dataclass(frozen=True)
class AdjustmentReference:
    kind: ClassVar[str] = "adjustment"

    adjustment_id: str

    @property
    def label(self) -> str:
        return f"Adjustment #{self.adjustment_id}"


@dataclass(frozen=True)
class PurchaseReference:
    kind: ClassVar[str] = "purchase"

    purchase_id: str

    @property
    def label(self) -> str:
        return f"Purchase #{self.purchase_id}"


Reference = Union[OrderReference, TransferReference, AdjustmentReference, PurchaseReference]

_REFERENCE_TYPES: dict[str, type] = {
    cls.kind: cls
    for cls in (OrderReference, TransferReference, AdjustmentReference, PurchaseReference)
}


def reference_to_raw(reference: Reference) -> dict:
    if isinstance(reference, OrderReference):
        return {"type": reference.kind, "id": reference.order_id, "item_id": reference.item_id}
    if isinstance(reference, TransferReference):
        return {"type": reference.kind, "id": reference.transfer_id}
    if isinstance(reference, AdjustmentReference):
        return {"type": reference.kind, "id": reference.adjustment_id}
    if isinstance(reference, PurchaseReference):
        return {"type": reference.kind, "id": reference.purchase_id}
    raise InvalidArgument(f"Unsupported reference: {reference!r}")


def reference_from_raw(raw: dict) -> Reference:
    cls = _REFERENCE_TYPES.get(raw.get("type", ""))
    if cls is None:
        raise InvalidArgument(f"Unknown reference type: {raw.get('type')!r}")
    if cls is OrderReference:
        return OrderReference(order_id=raw["id"], item_id=raw.get("item_id"))
    return cls(raw["id"])


def parse_reference(text: str) -> Reference:
    """Parse the ``kind:id`` form used on the command line.

    ``order:42``, ``order:42:7`` (with an item id), ``transfer:T-1``,
    ``adjustment:A-3`` and ``purchase:PO-9`` are accepted.
    """
    kind, sep, rest = text.partition(":")
    if not sep or not rest:
        raise InvalidArgument(
            f"Invalid reference '{text}'. Expected 'kind:id', e.g. 'order:42'."
        )
    kind = kind.strip().lower()
    if kind == OrderReference.kind:
        order_id, _, item_id = rest.partition(":")
        return OrderReference(order_id=order_id, item_id=item_id or None)
    return reference_from_raw({"type": kind, "id": rest})
