"""
Flight schemas.
"""

from typing import Any, Dict

from backoffice.app.schemas.common import Document, RefValue, date_only, reference_id


class Flight(Document):
    """Scheduled flight. `airline` and `sector` may arrive populated."""
    flight_number: str = ""
    airline: RefValue = ""
    sector: RefValue = ""
    departure_city: str = ""
    departure_date: str = ""
    departure_time: str = ""
    arrival_city: str = ""
    arrival_date: str = ""
    arrival_time: str = ""

    def to_draft(self) -> Dict[str, Any]:
        draft = super().to_draft()
        draft["airline"] = reference_id(self.airline)
        draft["sector"] = reference_id(self.sector)
        draft["departureDate"] = date_only(self.departure_date)
        draft["arrivalDate"] = date_only(self.arrival_date)
        return draft
