"""
Lookup schemas (airlines, sectors, banks) and the id -> name table built from them.
"""

from typing import Any, Dict, Iterable, List, Optional

from backoffice.app.schemas.common import Document, reference_id


class Airline(Document):
    airline_code: str = ""
    airline_name: str = ""
    short_code: str = ""
    logo: str = ""


class Sector(Document):
    sector_title: str = ""
    full_sector: str = ""


class Bank(Document):
    bank_name: str = ""
    account_no: str = ""
    account_title: str = ""
    ibn: str = ""
    bank_address: str = ""
    status: str = "Active"


class LookupTable:
    """Resolves foreign ids to display names for one lookup list."""

    def __init__(self, records: Iterable[Dict[str, Any]], label_field: str):
        self.label_field = label_field
        self.records: List[Dict[str, Any]] = list(records)
        self._by_id = {r.get("_id"): r for r in self.records if r.get("_id")}

    def get(self, value: Any) -> Optional[Dict[str, Any]]:
        return self._by_id.get(reference_id(value))

    def name_for(self, value: Any, default: str = "") -> str:
        if isinstance(value, dict) and value.get(self.label_field):
            return str(value[self.label_field])
        record = self.get(value)
        if record is None:
            return default
        return str(record.get(self.label_field) or default)

    def options(self) -> List[Dict[str, str]]:
        """`{value, label}` pairs for select inputs."""
        return [{"value": r["_id"], "label": str(r.get(self.label_field, ""))} for r in self.records if r.get("_id")]

    def __len__(self) -> int:
        return len(self.records)
