"""
NACHA file encoder.

Turns an ordered list of transactions and a BatchConfig into a complete
single-batch PPD file. Pure: no clock reads, no I/O, no state shared between
calls, so it is safe to call concurrently and to retry.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from decimal_utils import ZERO, to_currency
from nacha_aggregate import Aggregate, compute_aggregate
from nacha_fields import BLOCKING_FACTOR, FILLER_RECORD, NachaError
from nacha_records import (
    BatchConfig,
    Transaction,
    TraceAllocator,
    build_batch_control,
    build_batch_header,
    build_entry_detail,
    build_file_control,
    build_file_header,
)
from operation_types import OperationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DegradedEntry:
    """An entry written with the fallback routing number."""

    transaction_id: str
    trace_number: str
    reason: str


@dataclass(frozen=True)
class EncodeResult:
    text: str
    aggregate: Aggregate
    trace_numbers: dict[str, str] = field(default_factory=dict)
    degraded: tuple[DegradedEntry, ...] = ()

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")


def encode(transactions: Sequence[Transaction], config: BatchConfig) -> EncodeResult:
    """
    Render a NACHA file for transactions, in the order given.

    Trace numbers follow input order, so re-exporting the same list with the
    same config reproduces the same file. An empty list still yields a valid
    file with zero totals.

    Raises:
        FieldOverflow: if an amount, count or total does not fit its field
    """
    aggregate = compute_aggregate(transactions)
    traces = TraceAllocator(config.originating_dfi_id)

    lines = [build_file_header(config), build_batch_header(config)]
    for transaction in transactions:
        lines.append(build_entry_detail(transaction, traces))
    lines.append(build_batch_control(config, aggregate))

    # File control is rendered once the filler records exist
    file_control_index = len(lines)
    lines.append("")
    while len(lines) % BLOCKING_FACTOR != 0:
        lines.append(FILLER_RECORD)

    block_count = len(lines) // BLOCKING_FACTOR
    if block_count != aggregate.block_count:
        raise NachaError(
            f"block count mismatch: {block_count} blocks written, "
            f"{aggregate.block_count} computed"
        )
    lines[file_control_index] = build_file_control(aggregate)

    degraded = tuple(
        DegradedEntry(
            transaction_id=transaction_id,
            trace_number=traces.assigned[transaction_id],
            reason="routing number missing or not 9 digits",
        )
        for transaction_id in aggregate.degraded_transaction_ids
    )

    logger.info(
        "Encoded NACHA file",
        extra={
            "entry_count": aggregate.entry_count,
            "total_debit_cents": aggregate.total_debit_cents,
            "total_credit_cents": aggregate.total_credit_cents,
            "block_count": aggregate.block_count,
            "degraded_count": len(degraded),
        },
    )

    return EncodeResult(
        text="\n".join(lines),
        aggregate=aggregate,
        trace_numbers=dict(traces.assigned),
        degraded=degraded,
    )


def export_file_name(created_at: datetime) -> str:
    return f"NACHA_{created_at.strftime('%Y%m%d_%H%M%S')}.txt"


def export_summary(
    result: EncodeResult, transactions: Sequence[Transaction], config: BatchConfig
) -> dict[str, Any]:
    """Job record for an export, in the shape the job history stores."""
    total_amount: Decimal = sum(
        (to_currency(transaction.amount) for transaction in transactions), ZERO
    )
    return {
        "job_type": str(OperationType.NACHA_EXPORT),
        "job_name": export_file_name(config.created_at),
        "records_processed": result.aggregate.entry_count,
        "result": {
            "total_amount": total_amount,
            "effective_date": config.effective_date,
            "transaction_ids": [transaction.id for transaction in transactions],
            "degraded_transaction_ids": list(
                result.aggregate.degraded_transaction_ids
            ),
            "entry_hash": result.aggregate.entry_hash,
            "block_count": result.aggregate.block_count,
        },
    }
