"""
ACH return and notification-of-change reason codes.

Categories group codes by how billing handles them:
nsf, closed, invalid, unauthorized, stopped, change, other.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReturnCodeInfo:
    code: str
    description: str
    category: str

    @property
    def is_notification_of_change(self) -> bool:
        return self.code.startswith("C")


UNKNOWN_DESCRIPTION = "Unknown"
UNKNOWN_CATEGORY = "other"

RETURN_CODES: dict[str, ReturnCodeInfo] = {
    info.code: info
    for info in (
        ReturnCodeInfo("R01", "Insufficient Funds", "nsf"),
        ReturnCodeInfo("R02", "Account Closed", "closed"),
        ReturnCodeInfo("R03", "No Account/Unable to Locate", "invalid"),
        ReturnCodeInfo("R04", "Invalid Account Number", "invalid"),
        ReturnCodeInfo("R05", "Unauthorized Debit", "unauthorized"),
        ReturnCodeInfo("R06", "Returned per ODFI Request", "other"),
        ReturnCodeInfo("R07", "Authorization Revoked", "unauthorized"),
        ReturnCodeInfo("R08", "Payment Stopped", "stopped"),
        ReturnCodeInfo("R09", "Uncollected Funds", "nsf"),
        ReturnCodeInfo("R10", "Customer Advises Not Authorized", "unauthorized"),
        ReturnCodeInfo("R12", "Branch Sold to Another DFI", "invalid"),
        ReturnCodeInfo("R13", "Invalid ACH Routing Number", "invalid"),
        ReturnCodeInfo("R14", "Representative Payee Deceased", "closed"),
        ReturnCodeInfo("R15", "Beneficiary or Account Holder Deceased", "closed"),
        ReturnCodeInfo("R16", "Account Frozen", "closed"),
        ReturnCodeInfo("R17", "File Record Edit Criteria", "invalid"),
        ReturnCodeInfo("R20", "Non-Transaction Account", "invalid"),
        ReturnCodeInfo("R23", "Credit Entry Refused by Receiver", "other"),
        ReturnCodeInfo("R24", "Duplicate Entry", "other"),
        ReturnCodeInfo(
            "R29", "Corporate Customer Advises Not Authorized", "unauthorized"
        ),
        ReturnCodeInfo("R31", "Permissible Return Entry", "other"),
        ReturnCodeInfo("C01", "Incorrect Account Number", "change"),
        ReturnCodeInfo("C02", "Incorrect Routing Number", "change"),
        ReturnCodeInfo("C03", "Incorrect Routing and Account Number", "change"),
        ReturnCodeInfo("C05", "Incorrect Transaction Code", "change"),
        ReturnCodeInfo("C07", "Incorrect Routing, Account and Transaction Code", "change"),
    )
}


def describe_return_code(code: str | None) -> ReturnCodeInfo:
    """Look up a reason code; unknown or missing codes get a placeholder entry."""
    normalized = (code or "").strip().upper()
    info = RETURN_CODES.get(normalized)
    if info is None:
        return ReturnCodeInfo(normalized, UNKNOWN_DESCRIPTION, UNKNOWN_CATEGORY)
    return info
