"""
Payment voucher schemas.
"""

from typing import Any, Dict

from backoffice.app.schemas.common import Document, RefValue, date_only, reference_id


class PaymentVoucher(Document):
    """
    Payment voucher as edited by an admin.

    The backend stores the bank under `bankAccount`; the form edits it as
    `bankName` (the bank's id) and shows the matching `accountNo`.
    """
    voucher_id: str = ""
    date: str = ""
    description: str = ""
    amount: float = 0
    status: str = "Posted"
    remarks: str = ""
    bank_account: RefValue = ""
    bank_name: str = ""
    account_no: str = ""
    receipt: str = ""

    def to_draft(self) -> Dict[str, Any]:
        draft = super().to_draft()
        draft.pop("voucherId", None)
        draft.pop("receipt", None)
        draft.pop("bankAccount", None)
        draft["date"] = date_only(self.date)
        if not draft["bankName"]:
            draft["bankName"] = reference_id(self.bank_account)
        if not draft["accountNo"] and isinstance(self.bank_account, dict):
            draft["accountNo"] = str(self.bank_account.get("accountNo") or "")
        return draft
