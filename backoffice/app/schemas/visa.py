"""
Visa service schemas.
"""

from typing import Any, Dict, List

from pydantic import Field

from backoffice.app.schemas.common import Document, Schema


class VisaCountry(Schema):
    name: str = ""
    code: str = ""
    flag_url: str = ""


class ProcessingTime(Schema):
    min: int = 0
    max: int = 0
    unit: str = "Days"


class ValidityDuration(Schema):
    value: int = 0
    unit: str = "Days"


class VisaPricing(Schema):
    adult: float = 0
    child: float = 0
    currency: str = "PKR"


class RequiredDocument(Schema):
    name: str = ""
    description: str = ""
    is_mandatory: bool = True


class DocumentRequirement(Schema):
    category: str = "All"
    documents: List[RequiredDocument] = Field(default_factory=list)


class Visa(Document):
    country: VisaCountry = Field(default_factory=VisaCountry)
    visa_type: str = ""
    entry_type: str = "Single Entry"
    processing_time: ProcessingTime = Field(default_factory=ProcessingTime)
    validity_duration: ValidityDuration = Field(default_factory=ValidityDuration)
    pricing: VisaPricing = Field(default_factory=VisaPricing)
    document_requirements: List[DocumentRequirement] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    important_notes: List[str] = Field(default_factory=list)
    services_included: List[str] = Field(default_factory=list)
    images: List[Dict[str, Any]] = Field(default_factory=list)
    interview_required: bool = False
    bank_statement_required: bool = False
    status: str = "Active"
    is_featured: bool = False
    success_rate: float = 0
    application_count: int = 0
