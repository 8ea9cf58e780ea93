"""
NACHA record types and builders.

Each builder renders one 94-character line of a PPD file containing a single
batch. Field layouts follow the NACHA file format; see nacha_fields for the
padding rules.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Mapping

from decimal_utils import to_cents
from nacha_fields import (
    BATCH_CONTROL,
    BATCH_HEADER,
    ENTRY_DETAIL,
    FILE_CONTROL,
    FILE_HEADER,
    RECORD_SIZE,
    NachaError,
    alpha,
    blank,
    numeric,
)

if TYPE_CHECKING:
    from nacha_aggregate import Aggregate

logger = logging.getLogger(__name__)

FALLBACK_ROUTING = "000000000"
FALLBACK_ACCOUNT = "0000"

PRIORITY_CODE = "01"
FILE_ID_MODIFIER = "A"
RECORD_SIZE_CODE = "094"
BLOCKING_FACTOR_CODE = "10"
FORMAT_CODE = "1"
SERVICE_CLASS_MIXED = "225"
STANDARD_ENTRY_CLASS = "PPD"
ORIGINATOR_STATUS = "1"
ADDENDA_NONE = "0"
BATCH_COUNT = 1

CREDIT_CODE = "22"
DEBIT_CODE = "27"

_ROUTING = re.compile(r"\d{9}")
_DFI = re.compile(r"\d{8}")


class TransactionKind(StrEnum):
    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def transaction_code(self) -> str:
        """Checking-account transaction code for this direction."""
        return DEBIT_CODE if self is TransactionKind.DEBIT else CREDIT_CODE


@dataclass(frozen=True)
class Transaction:
    """A payment instruction supplied by the caller."""

    id: str
    amount: Decimal
    kind: TransactionKind
    routing_number: str | None
    account_number_last4: str | None
    payee_id: str
    payee_name: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Transaction":
        """Build a Transaction from a CSV/dict row, coercing amount and kind."""
        return cls(
            id=str(row["id"]),
            amount=Decimal(str(row["amount"]).replace(",", "").strip()),
            kind=TransactionKind(str(row["kind"]).strip().lower()),
            routing_number=row.get("routing_number") or None,
            account_number_last4=row.get("account_number_last4") or None,
            payee_id=str(row.get("payee_id") or ""),
            payee_name=str(row.get("payee_name") or ""),
        )


class InvalidBatchConfig(NachaError, ValueError):
    """Raised when origination settings cannot be written into the file."""

    pass


@dataclass(frozen=True)
class BatchConfig:
    """
    Origination settings and clock values for one encode call.

    created_at stamps the file header and the batch descriptive date, so
    passing the same value twice yields byte-identical files.
    """

    effective_date: date
    created_at: datetime
    company_name: str
    company_id: str
    destination_routing: str
    destination_name: str
    origin_id: str
    origin_name: str
    originating_dfi_id: str
    entry_description: str
    batch_number: int = 1

    def __post_init__(self) -> None:
        if not _ROUTING.fullmatch(self.destination_routing):
            raise InvalidBatchConfig(
                f"destination_routing must be 9 digits, got {self.destination_routing!r}"
            )
        if not _ROUTING.fullmatch(self.origin_id):
            raise InvalidBatchConfig(
                f"origin_id must be 9 digits, got {self.origin_id!r}"
            )
        if not _DFI.fullmatch(self.originating_dfi_id):
            raise InvalidBatchConfig(
                f"originating_dfi_id must be 8 digits, got {self.originating_dfi_id!r}"
            )
        if not 1 <= self.batch_number <= 9_999_999:
            raise InvalidBatchConfig(
                f"batch_number must be between 1 and 9999999, got {self.batch_number}"
            )


def normalize_routing(routing_number: str | None) -> tuple[str, bool]:
    """
    Return the routing number to write and whether it was usable.

    Anything other than exactly nine digits is replaced by FALLBACK_ROUTING.
    """
    candidate = (routing_number or "").strip()
    if _ROUTING.fullmatch(candidate):
        return candidate, True
    return FALLBACK_ROUTING, False


@dataclass
class TraceAllocator:
    """
    Hands out sequential trace numbers for a single encode call.

    A trace number is the 8-digit originating DFI id followed by a 7-digit
    sequence starting at 1.
    """

    originating_dfi_id: str
    sequence: int = 0
    assigned: dict[str, str] = field(default_factory=dict)

    def next(self, transaction_id: str | None = None) -> str:
        self.sequence += 1
        trace = self.originating_dfi_id + numeric(
            self.sequence, 7, "trace sequence"
        )
        if transaction_id is not None:
            self.assigned[transaction_id] = trace
        return trace


def _check(line: str) -> str:
    if len(line) != RECORD_SIZE:
        raise NachaError(f"record rendered to {len(line)} characters: {line!r}")
    return line


def build_file_header(config: BatchConfig) -> str:
    return _check(
        FILE_HEADER
        + PRIORITY_CODE
        + " "
        + config.destination_routing
        + " "
        + config.origin_id
        + config.created_at.strftime("%y%m%d")
        + config.created_at.strftime("%H%M")
        + FILE_ID_MODIFIER
        + RECORD_SIZE_CODE
        + BLOCKING_FACTOR_CODE
        + FORMAT_CODE
        + alpha(config.destination_name, 23)
        + alpha(config.origin_name, 23)
        + blank(8)  # reference code
    )


def build_batch_header(config: BatchConfig) -> str:
    return _check(
        BATCH_HEADER
        + SERVICE_CLASS_MIXED
        + alpha(config.company_name, 16)
        + blank(20)  # company discretionary data
        + alpha(config.company_id, 10)
        + STANDARD_ENTRY_CLASS
        + alpha(config.entry_description, 10)
        + config.created_at.strftime("%y%m%d")
        + config.effective_date.strftime("%y%m%d")
        + blank(3)  # settlement date, filled in by the ACH operator
        + ORIGINATOR_STATUS
        + config.originating_dfi_id
        + numeric(config.batch_number, 7, "batch number")
    )


def build_entry_detail(transaction: Transaction, traces: TraceAllocator) -> str:
    """
    Render one entry detail record and assign its trace number.

    A missing or malformed routing number is written as FALLBACK_ROUTING;
    compute_aggregate reports the transaction as degraded.
    """
    routing, valid = normalize_routing(transaction.routing_number)
    if not valid:
        logger.warning(
            "Invalid routing number, using fallback",
            extra={
                "transaction_id": transaction.id,
                "routing_number": transaction.routing_number,
            },
        )
    kind = TransactionKind(transaction.kind)
    trace = traces.next(transaction.id)
    return _check(
        ENTRY_DETAIL
        + kind.transaction_code
        + routing[:8]
        + routing[8]
        + alpha(transaction.account_number_last4 or FALLBACK_ACCOUNT, 17, right=True)
        + numeric(to_cents(transaction.amount), 10, f"amount of {transaction.id}")
        + alpha(transaction.payee_id, 15)
        + alpha(transaction.payee_name, 22)
        + blank(2)  # discretionary data
        + ADDENDA_NONE
        + trace
    )


def build_batch_control(config: BatchConfig, aggregate: "Aggregate") -> str:
    return _check(
        BATCH_CONTROL
        + SERVICE_CLASS_MIXED
        + numeric(aggregate.entry_count, 6, "batch entry count")
        + numeric(aggregate.entry_hash, 10, "entry hash")
        + numeric(aggregate.total_debit_cents, 12, "batch total debit")
        + numeric(aggregate.total_credit_cents, 12, "batch total credit")
        + alpha(config.company_id, 10)
        + blank(19)  # message authentication code
        + blank(6)  # reserved
        + config.originating_dfi_id
        + numeric(config.batch_number, 7, "batch number")
    )


def build_file_control(aggregate: "Aggregate") -> str:
    return _check(
        FILE_CONTROL
        + numeric(BATCH_COUNT, 6, "batch count")
        + numeric(aggregate.block_count, 6, "block count")
        + numeric(aggregate.entry_count, 8, "file entry count")
        + numeric(aggregate.entry_hash, 10, "entry hash")
        + numeric(aggregate.total_debit_cents, 12, "file total debit")
        + numeric(aggregate.total_credit_cents, 12, "file total credit")
        + blank(39)  # reserved
    )
