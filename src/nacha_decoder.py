"""
Return file decoder.

Reads a bank-returned NACHA file and extracts the returned entries. Only entry
detail ('6') and addenda ('7') records are consulted; header, control and
filler records are passed over. A bad line never stops the parse: it is
recorded in DecodeResult.skipped and decoding continues with the next line.
"""

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import NamedTuple

from decimal_utils import from_cents
from nacha_fields import (
    BATCH_CONTROL,
    BATCH_HEADER,
    ENTRY_ADDENDA,
    ENTRY_DETAIL,
    FILE_CONTROL,
    FILE_HEADER,
    RECORD_SIZE,
)

logger = logging.getLogger(__name__)

RETURN_ADDENDA = "99"
NOTIFICATION_OF_CHANGE_ADDENDA = "98"
_PASSED_OVER = {FILE_HEADER, BATCH_HEADER, BATCH_CONTROL, FILE_CONTROL}


@dataclass(frozen=True)
class ReturnEntry:
    trace_number: str
    routing_number: str
    amount_cents: int
    individual_id: str
    raw_line: str
    line_number: int
    transaction_code: str = ""
    individual_name: str = ""
    return_reason_code: str | None = None
    original_trace_number: str | None = None

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)


class SkippedLine(NamedTuple):
    line_number: int
    reason: str


@dataclass
class DecodeResult:
    entries: list[ReturnEntry] = field(default_factory=list)
    skipped: list[SkippedLine] = field(default_factory=list)


def _skip(result: DecodeResult, line_number: int, reason: str) -> None:
    logger.warning(
        "Skipping return file line",
        extra={"line_number": line_number, "reason": reason},
    )
    result.skipped.append(SkippedLine(line_number, reason))


def _parse_entry(line: str, line_number: int) -> ReturnEntry | str:
    """Return a ReturnEntry, or the reason the line cannot be used."""
    amount = line[29:39]
    if not (amount.isascii() and amount.isdigit()):
        return f"non-numeric amount field {amount!r}"
    trace_number = line[79:94]
    if not (trace_number.isascii() and trace_number.isdigit()):
        return f"non-numeric trace number {trace_number!r}"
    return ReturnEntry(
        trace_number=trace_number,
        routing_number=line[3:12],
        amount_cents=int(amount),
        individual_id=line[39:54].strip(),
        raw_line=line,
        line_number=line_number,
        transaction_code=line[1:3],
        individual_name=line[54:76].strip(),
    )


def decode(raw_text: str) -> DecodeResult:
    """
    Parse a return file into ReturnEntry records.

    A return reason from an addenda record attaches to the entry detail
    directly above it. Records are separated by "\n" (a trailing "\r" is
    dropped) and blank lines are ignored.
    """
    result = DecodeResult()
    # Index into result.entries of the entry an addenda may attach to
    current: int | None = None

    for line_number, line in enumerate(raw_text.split("\n"), 1):
        line = line.removesuffix("\r")
        if not line.strip():
            continue

        if len(line) != RECORD_SIZE:
            _skip(
                result,
                line_number,
                f"expected {RECORD_SIZE} characters, got {len(line)}",
            )
            current = None
            continue

        record_type = line[0]
        if record_type == ENTRY_DETAIL:
            parsed = _parse_entry(line, line_number)
            if isinstance(parsed, str):
                _skip(result, line_number, parsed)
                current = None
                continue
            result.entries.append(parsed)
            current = len(result.entries) - 1
        elif record_type == ENTRY_ADDENDA:
            if current is None:
                _skip(
                    result,
                    line_number,
                    "addenda record without a preceding entry detail",
                )
                continue
            addenda_type = line[1:3]
            if addenda_type not in (RETURN_ADDENDA, NOTIFICATION_OF_CHANGE_ADDENDA):
                continue
            entry = result.entries[current]
            if entry.return_reason_code is None:
                result.entries[current] = replace(
                    entry,
                    return_reason_code=line[3:6].strip() or None,
                    original_trace_number=line[6:21].strip() or None,
                )
        elif record_type in _PASSED_OVER:
            current = None
        else:
            _skip(result, line_number, f"unknown record type {record_type!r}")
            current = None

    logger.info(
        "Decoded return file",
        extra={
            "entry_count": len(result.entries),
            "skipped_count": len(result.skipped),
        },
    )
    return result
