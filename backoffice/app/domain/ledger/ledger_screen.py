"""
Ledger view for one account.

Fetches the debit/credit entries of a date range, derives the totals from
whatever entries are currently held, and offers the copy/csv/excel/pdf
exports and a print layout.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from backoffice.app.core.exceptions import AppException, describe_error
from backoffice.app.core.http_client import ApiClient
from backoffice.app.schemas.common import date_only
from backoffice.app.schemas.ledger import LedgerEntry, LedgerResponse, LedgerTotals
from backoffice.app.services.export_service import ExportService
from backoffice.app.services.notification_service import Notifier
from backoffice.app.services.platform import LocalPlatform, PrintDocument

logger = logging.getLogger("backoffice.screens.ledger")

COPY = "copy"
FILE_EXPORTS = ("csv", "excel", "pdf")
HEADER = ("Voucher Id", "Date", "Description", "Debit", "Credit")


def compute_totals(entries: Iterable[LedgerEntry]) -> LedgerTotals:
    total_debit = 0.0
    total_credit = 0.0
    for entry in entries:
        total_debit += entry.debit or 0
        total_credit += entry.credit or 0
    return LedgerTotals(
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=total_debit - total_credit,
    )


def default_range(today: Optional[date] = None) -> tuple:
    """First day of the current month through today, as ISO dates."""
    today = today or date.today()
    return today.replace(day=1).isoformat(), today.isoformat()


def format_amount(value: float) -> str:
    return f"{value:.2f}" if value > 0 else ""


def format_date(value: str) -> str:
    """`2024-01-05` -> `1/5/2024`; unparseable values are shown as is."""
    try:
        parsed = date.fromisoformat(date_only(value))
    except ValueError:
        return value
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def format_long_date(value: str) -> str:
    try:
        parsed = date.fromisoformat(date_only(value))
    except ValueError:
        return value
    return parsed.strftime("%a, %d %b %Y")


class LedgerScreen:

    def __init__(
        self,
        account_id: str,
        client: ApiClient,
        notifier: Notifier,
        platform: LocalPlatform,
        user_name: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ):
        first, today = default_range()
        self.account_id = account_id
        self.client = client
        self.notifier = notifier
        self.platform = platform
        self.user_name = user_name or "User"
        self.date_from = date_from or first
        self.date_to = date_to or today
        self.entries: List[LedgerEntry] = []
        self.loading = False
        self.exports = ExportService(client, platform, notifier)

    @property
    def path(self) -> str:
        return f"/payment/ledger/{self.account_id}"

    def query_params(self) -> Dict[str, Any]:
        return {"dateFrom": self.date_from, "dateTo": self.date_to}

    async def load(self) -> List[LedgerEntry]:
        if not self.account_id:
            return self.entries
        self.loading = True
        try:
            response = await self.client.get(self.path, params=self.query_params())
            payload = LedgerResponse.model_validate(response.data if isinstance(response.data, dict) else {})
        except (AppException, ValidationError) as exc:
            logger.warning("Fetching ledger %s failed: %s", self.account_id, exc)
            self.entries = []
            self.notifier.error(describe_error(exc, "Failed to load ledger data"))
            return self.entries
        finally:
            self.loading = False

        self.entries = payload.data
        return self.entries

    async def submit(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[LedgerEntry]:
        if date_from:
            self.date_from = date_from
        if date_to:
            self.date_to = date_to
        return await self.load()

    @property
    def totals(self) -> LedgerTotals:
        return compute_totals(self.entries)

    # Exports

    def rows(self) -> List[List[str]]:
        return [
            [entry.voucher_id, format_date(entry.date), entry.description,
             format_amount(entry.debit), format_amount(entry.credit)]
            for entry in self.entries
        ]

    def copy_text(self) -> str:
        totals = self.totals
        lines = ["\t".join(HEADER)]
        lines.extend("\t".join(row) for row in self.rows())
        lines.append(f"Total\t\t\t{totals.total_debit:.2f}\t{totals.total_credit:.2f}")
        return "\n".join(lines)

    async def export(self, kind: str):
        if kind == COPY:
            self.platform.copy_to_clipboard(self.copy_text())
            self.notifier.success("Ledger data copied to clipboard")
            return self.platform.clipboard
        if kind not in FILE_EXPORTS:
            raise ValueError(f"Unsupported export kind '{kind}'")

        params = {**self.query_params(), "userName": self.user_name}
        return await self.exports.download(
            f"{self.path}/export/{kind}",
            params,
            kind=kind,
            document="ledger",
            subject=self.user_name,
        )

    # Printing

    def print_layout(self) -> PrintDocument:
        totals = self.totals
        return PrintDocument(
            title=f"Ledger of {self.user_name.upper()}",
            subtitle=f"From {format_long_date(self.date_from)} To {format_long_date(self.date_to)}",
            header=HEADER,
            rows=self.rows(),
            footer=("Total", "", "", f"{totals.total_debit:.2f}", f"{totals.total_credit:.2f}"),
            summary=[f"Closing Balance: {totals.closing_balance:.2f}"],
        )

    def print(self):
        try:
            return self.platform.print_document(self.print_layout())
        except OSError as exc:
            logger.warning("Printing ledger %s failed: %s", self.account_id, exc)
            self.notifier.error("Failed to print ledger")
            return None
