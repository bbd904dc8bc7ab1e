"""
Ledger schemas.
"""

from typing import List

from pydantic import BaseModel, Field

from backoffice.app.schemas.common import Schema


class LedgerEntry(Schema):
    """One dated debit-or-credit line. Missing amounts read as 0."""
    voucher_id: str = ""
    date: str = ""
    description: str = ""
    debit: float = 0
    credit: float = 0


class LedgerTotals(BaseModel):
    total_debit: float = 0
    total_credit: float = 0
    closing_balance: float = 0


class LedgerResponse(Schema):
    success: bool = False
    data: List[LedgerEntry] = Field(default_factory=list)
