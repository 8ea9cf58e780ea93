"""Batch and file control totals computed from a list of transactions."""

import math
from dataclasses import dataclass
from typing import Iterable

from decimal_utils import to_cents
from nacha_fields import BLOCKING_FACTOR
from nacha_records import Transaction, TransactionKind, normalize_routing

ENTRY_HASH_MODULUS = 10**10
# File header, batch header, batch control, file control
STRUCTURAL_RECORDS = 4


@dataclass(frozen=True)
class Aggregate:
    """Control totals for one encoded file. Recompute rather than modify."""

    entry_count: int
    entry_hash: int
    total_debit_cents: int
    total_credit_cents: int
    block_count: int
    degraded_transaction_ids: tuple[str, ...] = ()


def padded_line_count(entry_count: int) -> int:
    """Line count of a single-batch file once filler records are appended."""
    structural = STRUCTURAL_RECORDS + entry_count
    return math.ceil(structural / BLOCKING_FACTOR) * BLOCKING_FACTOR


def compute_aggregate(transactions: Iterable[Transaction]) -> Aggregate:
    """
    Sum the control totals for a batch in one pass.

    The entry hash adds the first eight digits of each routing number
    (fallback routing numbers contribute zero) and keeps the low ten digits.
    """
    entry_count = 0
    entry_hash = 0
    total_debit_cents = 0
    total_credit_cents = 0
    degraded: list[str] = []

    for transaction in transactions:
        entry_count += 1
        routing, valid = normalize_routing(transaction.routing_number)
        if not valid:
            degraded.append(transaction.id)
        entry_hash += int(routing[:8])

        cents = to_cents(transaction.amount)
        if TransactionKind(transaction.kind) is TransactionKind.DEBIT:
            total_debit_cents += cents
        else:
            total_credit_cents += cents

    return Aggregate(
        entry_count=entry_count,
        entry_hash=entry_hash % ENTRY_HASH_MODULUS,
        total_debit_cents=total_debit_cents,
        total_credit_cents=total_credit_cents,
        block_count=padded_line_count(entry_count) // BLOCKING_FACTOR,
        degraded_transaction_ids=tuple(degraded),
    )
