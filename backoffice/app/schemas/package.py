"""
Umrah/Hajj package schemas.
"""

from typing import Any, Dict, List

from pydantic import Field

from backoffice.app.schemas.common import Document, RefValue, Schema, reference_id


class Duration(Schema):
    days: int = 0
    nights: int = 0


class Accommodation(Schema):
    city: str = "Makkah"
    hotel: RefValue = ""
    nights: int = 0


class PricingTier(Schema):
    tier_type: str = "Quad"
    price: float = 0


class Package(Document):
    name: str = ""
    type: str = "Umrah"
    description: str = ""
    duration: Duration = Field(default_factory=Duration)
    accommodation: List[Accommodation] = Field(default_factory=list)
    pricing: List[PricingTier] = Field(default_factory=list)
    inclusions: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    status: str = "Active"
    featured: bool = False

    def to_draft(self) -> Dict[str, Any]:
        draft = super().to_draft()
        for stay in draft["accommodation"]:
            stay["hotel"] = reference_id(stay["hotel"])
        return draft
