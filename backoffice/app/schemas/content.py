"""
Content page schemas (About Us, Homepage, Contact, Services).
"""

from typing import Any, Dict, List

from pydantic import Field

from backoffice.app.schemas.common import Document, Schema


class Seo(Schema):
    meta_title: str = ""
    meta_description: str = ""


class ContentPage(Document):
    page_key: str = ""
    title: str = ""
    sections: List[Dict[str, Any]] = Field(default_factory=list)
    statistics: List[Dict[str, Any]] = Field(default_factory=list)
    core_values: List[Dict[str, Any]] = Field(default_factory=list)
    company_network: List[Dict[str, Any]] = Field(default_factory=list)
    seo: Seo = Field(default_factory=Seo)
    status: str = "Draft"

    def to_draft(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "sections": list(self.sections),
            "statistics": list(self.statistics),
            "coreValues": list(self.core_values),
            "companyNetwork": list(self.company_network),
            "metaTitle": self.seo.meta_title,
            "metaDescription": self.seo.meta_description,
        }


def content_payload(page_key: str, draft: Dict[str, Any]) -> Dict[str, Any]:
    """Wire body for saving a page: SEO fields are nested under `seo`."""
    body = {key: value for key, value in draft.items() if key not in ("metaTitle", "metaDescription")}
    body["pageKey"] = page_key
    body["seo"] = {
        "metaTitle": draft.get("metaTitle", ""),
        "metaDescription": draft.get("metaDescription", ""),
    }
    return body
