"""Fixed-width field formatting shared by every NACHA record."""

import re
import unicodedata

RECORD_SIZE = 94
BLOCKING_FACTOR = 10
FILLER_RECORD = "9" * RECORD_SIZE

# Record type codes, first character of every line
FILE_HEADER = "1"
BATCH_HEADER = "5"
ENTRY_DETAIL = "6"
ENTRY_ADDENDA = "7"
BATCH_CONTROL = "8"
FILE_CONTROL = "9"

NON_PRINTABLE = re.compile(r"[^\x20-\x7e]")


class NachaError(Exception):
    """Base class for ACH file codec errors."""

    pass


class FieldOverflow(NachaError):
    """Raised when a numeric value cannot be written into its fixed width."""

    def __init__(self, field: str, value: int, width: int):
        self.field = field
        self.value = value
        self.width = width
        super().__init__(
            f"{field or 'numeric field'}: {value} does not fit in {width} digits"
        )


def numeric(value: int, width: int, field: str = "") -> str:
    """
    Render a non-negative integer zero-padded to width.

    Never truncates: a value that needs more digits than the field raises
    FieldOverflow, since a clipped amount or count would corrupt the totals.
    """
    if value < 0:
        raise FieldOverflow(field, value, width)
    rendered = str(value).zfill(width)
    if len(rendered) > width:
        raise FieldOverflow(field, value, width)
    return rendered


def alpha(value: str | None, width: int, right: bool = False) -> str:
    """
    Render text space-padded to width, truncating anything longer.

    Text is left-justified unless right is set (used for the DFI account
    number, which the format right-aligns). Accented letters are folded to
    ASCII and any other non-printable character becomes a space, so a record
    is always exactly one line of RECORD_SIZE bytes.
    """
    folded = unicodedata.normalize("NFKD", value or "")
    folded = folded.encode("ascii", "ignore").decode("ascii")
    text = NON_PRINTABLE.sub(" ", folded)[:width]
    return text.rjust(width) if right else text.ljust(width)


def blank(width: int) -> str:
    return " " * width
