"""
Flight package link schema: a package sold on a specific flight.
"""

from typing import Any, Dict

from backoffice.app.schemas.common import Document, RefValue, reference_id


class FlightPackage(Document):
    """`flight` and `package` usually arrive populated in list responses."""
    flight: RefValue = ""
    package: RefValue = ""
    remaining_slots: int = 0
    status: str = "Active"

    def to_draft(self) -> Dict[str, Any]:
        draft = super().to_draft()
        draft["flight"] = reference_id(self.flight)
        draft["package"] = reference_id(self.package)
        return draft
