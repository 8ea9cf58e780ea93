"""
Reconciliation of decoded return entries against exported transactions.

The caller supplies the trace numbers it recorded at export time; every
returned entry comes back either as a match (apply a status transition to the
transaction) or as an orphan (trace number this system never issued).
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from nacha_decoder import DecodeResult, ReturnEntry
from operation_types import OperationType
from return_codes import describe_return_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReturnMatch:
    transaction_id: str
    trace_number: str
    return_reason_code: str | None
    entry: ReturnEntry

    @property
    def return_reason(self) -> str | None:
        if self.return_reason_code is None:
            return None
        return describe_return_code(self.return_reason_code).description


@dataclass(frozen=True)
class Orphan:
    trace_number: str
    entry: ReturnEntry


@dataclass
class ReconciliationResult:
    matches: list[ReturnMatch] = field(default_factory=list)
    orphans: list[Orphan] = field(default_factory=list)

    def return_code_counts(self) -> dict[str, int]:
        counts = Counter(
            match.return_reason_code or "UNKNOWN" for match in self.matches
        )
        return dict(counts)


def reconcile(
    entries: Iterable[ReturnEntry], known_trace_numbers: Mapping[str, str]
) -> ReconciliationResult:
    """
    Resolve each returned entry to a transaction id.

    Lookup uses the entry's trace number, then the original trace number
    carried by its return addenda. Every entry lands in exactly one of
    matches or orphans.
    """
    result = ReconciliationResult()
    for entry in entries:
        transaction_id = known_trace_numbers.get(entry.trace_number)
        if transaction_id is None and entry.original_trace_number:
            transaction_id = known_trace_numbers.get(entry.original_trace_number)

        if transaction_id is None:
            logger.warning(
                "Returned entry has unknown trace number",
                extra={
                    "trace_number": entry.trace_number,
                    "original_trace_number": entry.original_trace_number,
                    "line_number": entry.line_number,
                },
            )
            result.orphans.append(Orphan(entry.trace_number, entry))
            continue

        result.matches.append(
            ReturnMatch(
                transaction_id=transaction_id,
                trace_number=entry.trace_number,
                return_reason_code=entry.return_reason_code,
                entry=entry,
            )
        )

    logger.info(
        "Reconciled returned entries",
        extra={"matched": len(result.matches), "orphaned": len(result.orphans)},
    )
    return result


def import_summary(
    decoded: DecodeResult, reconciled: ReconciliationResult, file_name: str
) -> dict[str, Any]:
    """Job record for a return import, in the shape the job history stores."""
    return {
        "job_type": str(OperationType.NACHA_IMPORT),
        "job_name": file_name,
        "records_processed": len(decoded.entries),
        "records_succeeded": len(reconciled.matches),
        "records_failed": len(reconciled.orphans) + len(decoded.skipped),
        "result": {
            "return_codes": reconciled.return_code_counts(),
            "affected_transactions": [
                match.transaction_id for match in reconciled.matches
            ],
            "returns": [
                {
                    "transaction_id": match.transaction_id,
                    "trace_number": match.trace_number,
                    "return_code": match.return_reason_code,
                    "return_reason": match.return_reason,
                    "amount": match.entry.amount,
                    "individual_name": match.entry.individual_name,
                }
                for match in reconciled.matches
            ],
            "orphan_trace_numbers": [
                orphan.trace_number for orphan in reconciled.orphans
            ],
            "skipped_lines": [
                {"line_number": skipped.line_number, "reason": skipped.reason}
                for skipped in decoded.skipped
            ],
        },
    }
