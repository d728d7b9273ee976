"""Domain service: on-hand changes that do not come from reservations.

Receiving purchased stock, manual adjustments, stock counts and warehouse
transfers.  Each writes movements through the Movement Log and runs as one
ledger unit, exactly like the reservation engine's commits.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from uuid import uuid4

import structlog

from stockledger.domain.clock import Clock, utc_now
from stockledger.domain.exceptions import InsufficientStock, InvalidArgument
from stockledger.domain.model.movement import Movement, MovementType
from stockledger.domain.model.references import Reference, TransferReference
from stockledger.domain.model.value_objects import (
    COST_PLACES,
    ZERO_COST,
    Quantity,
    StockKey,
    cost_of,
    weighted_average_cost,
)
from stockledger.domain.service.ledger_unit import LedgerUnitRunner
from stockledger.domain.service.movement_log import MovementLog, Posting
from stockledger.domain.service.stock_record_store import StockRecordStore

logger = structlog.get_logger(__name__)


class StockMovementService:

    def __init__(
        self,
        store: StockRecordStore,
        movement_log: MovementLog,
        runner: LedgerUnitRunner,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._log = movement_log
        self._runner = runner
        self._clock = clock

    def receive(
        self,
        key: StockKey,
        quantity: int,
        reference: Reference,
        unit_cost: str | Decimal | None = None,
        created_by: str | None = None,
        notes: str | None = None,
    ) -> Movement:
        """Book incoming stock and fold its cost into the average cost."""
        qty = Quantity(quantity)
        cost = cost_of(unit_cost)

        def work() -> Movement:
            record = self._store.get(key)
            new_average = weighted_average_cost(
                record.on_hand, record.average_cost, qty.value, cost
            )
            return self._write(
                key,
                MovementType.IN,
                qty.value,
                reference,
                unit_cost=cost,
                created_by=created_by,
                notes=notes,
                average_cost=new_average,
            )

        return self._runner.run([key], work)

    def adjust(
        self,
        key: StockKey,
        delta: int,
        reference: Reference,
        created_by: str | None = None,
        notes: str | None = None,
    ) -> Movement:
        """Apply a signed manual correction to on-hand.

        A negative correction may only remove stock that is not reserved.
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise InvalidArgument("Adjustment must be a non-zero integer")

        def work() -> Movement:
            return self._adjust_locked(key, delta, reference, created_by, notes)

        return self._runner.run([key], work)

    def count(
        self,
        key: StockKey,
        counted: int,
        reference: Reference,
        created_by: str | None = None,
        notes: str | None = None,
    ) -> Movement | None:
        """Adjust on-hand to a physically counted quantity.

        Returns None when the count already matches.
        """
        if isinstance(counted, bool) or not isinstance(counted, int) or counted < 0:
            raise InvalidArgument("Counted quantity must be a non-negative integer")

        def work() -> Movement | None:
            delta = counted - self._store.get(key).on_hand
            if delta == 0:
                return None
            return self._adjust_locked(
                key, delta, reference, created_by, notes or f"Stock count: {counted}"
            )

        return self._runner.run([key], work)

    def transfer(
        self,
        key: StockKey,
        to_warehouse_id: str,
        quantity: int,
        transfer_id: str | None = None,
        created_by: str | None = None,
        notes: str | None = None,
    ) -> tuple[Movement, Movement]:
        """Move available stock between warehouses of the same SKU.

        Writes a negative ``transfer`` movement at the source and a positive
        one at the destination, under the locks of both triples.  Both stock
        records are saved before either movement is recorded.
        """
        qty = Quantity(quantity)
        if to_warehouse_id == key.warehouse_id:
            raise InvalidArgument("Cannot transfer stock into the same warehouse")
        target = key.in_warehouse(to_warehouse_id)
        reference = TransferReference(transfer_id or uuid4().hex[:12])

        def work() -> tuple[Movement, Movement]:
            source = self._store.get(key)
            if qty.value > source.available:
                raise InsufficientStock(key, qty.value, source.available)
            destination = self._store.get(target)

            outgoing = self._movement(
                source.on_hand,
                key,
                MovementType.TRANSFER,
                -qty.value,
                reference,
                unit_cost=source.average_cost,
                created_by=created_by,
                notes=notes or f"Transfer to {to_warehouse_id}",
            )
            incoming = self._movement(
                destination.on_hand,
                target,
                MovementType.TRANSFER,
                qty.value,
                reference,
                unit_cost=source.average_cost,
                created_by=created_by,
                notes=notes or f"Transfer from {key.warehouse_id}",
            )
            blended = weighted_average_cost(
                destination.on_hand, destination.average_cost, qty.value, source.average_cost
            )
            out_id, in_id = self._log.post(
                [Posting(outgoing), Posting(incoming, average_cost=blended)]
            )
            return replace(outgoing, id=out_id), replace(incoming, id=in_id)

        return self._runner.run([key, target], work)

    def valuation(self, warehouse_id: str | None = None) -> Decimal:
        """Total on-hand value at average cost."""
        total = sum(
            (r.stock_value for r in self._store.list_records(warehouse_id=warehouse_id)),
            ZERO_COST,
        )
        return total.quantize(COST_PLACES)

    # --- Internal helpers (caller holds the triple lock) ----------------------

    def _adjust_locked(
        self,
        key: StockKey,
        delta: int,
        reference: Reference,
        created_by: str | None,
        notes: str | None,
    ) -> Movement:
        record = self._store.get(key)
        if delta < 0 and -delta > record.available:
            raise InsufficientStock(key, -delta, record.available)
        return self._write(
            key,
            MovementType.ADJUSTMENT,
            delta,
            reference,
            unit_cost=record.average_cost,
            created_by=created_by,
            notes=notes,
        )

    def _write(
        self,
        key: StockKey,
        movement_type: MovementType,
        delta: int,
        reference: Reference,
        unit_cost: Decimal | None,
        created_by: str | None,
        notes: str | None,
        average_cost: Decimal | None = None,
    ) -> Movement:
        movement = self._movement(
            self._store.get(key).on_hand,
            key,
            movement_type,
            delta,
            reference,
            unit_cost=unit_cost,
            created_by=created_by,
            notes=notes,
        )
        movement_id = self._log.append(movement, average_cost=average_cost)
        return replace(movement, id=movement_id)

    def _movement(
        self,
        before: int,
        key: StockKey,
        movement_type: MovementType,
        delta: int,
        reference: Reference,
        unit_cost: Decimal | None,
        created_by: str | None,
        notes: str | None,
    ) -> Movement:
        return Movement(
            key=key,
            type=movement_type,
            quantity_delta=delta,
            quantity_before=before,
            quantity_after=before + delta,
            reference=reference,
            unit_cost=unit_cost,
            created_by=created_by,
            notes=notes,
            created_at=self._clock(),
        )
