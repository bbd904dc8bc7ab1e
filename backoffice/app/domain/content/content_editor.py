"""
Website content editor (About Us, Homepage, Contact, Services).
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from backoffice.app.core.exceptions import AppException, ResourceNotFoundError, describe_error
from backoffice.app.core.http_client import ApiClient
from backoffice.app.domain.resources import drafts
from backoffice.app.schemas.common import item_from
from backoffice.app.schemas.content import ContentPage, content_payload
from backoffice.app.services.notification_service import Notifier

logger = logging.getLogger("backoffice.screens.content")

PAGES = {
    "ABOUT_US": "About Us",
    "HOMEPAGE": "Homepage",
    "CONTACT": "Contact Us",
    "SERVICES": "Services",
}

ITEM_TEMPLATES = {
    "statistics": {"label": "", "value": "", "icon": ""},
    "coreValues": {"title": "", "description": "", "icon": ""},
    "companyNetwork": {"name": "", "description": "", "logo": ""},
}


class ContentEditor:

    def __init__(self, client: ApiClient, notifier: Notifier, page_key: str = "ABOUT_US"):
        self.client = client
        self.notifier = notifier
        self.page_key = page_key
        self.page: Optional[ContentPage] = None
        self.draft: Dict[str, Any] = ContentPage().to_draft()
        self.loading = False

    async def load(self) -> Dict[str, Any]:
        self.loading = True
        try:
            response = await self.client.get(f"/content/page/{self.page_key}")
            raw = item_from(response.data, ("content",))
            page = ContentPage.model_validate(raw) if raw is not None else None
        except ResourceNotFoundError:
            # A page that was never saved has nothing to show yet
            logger.info("No content for %s yet", self.page_key)
            return self.draft
        except (AppException, ValidationError) as exc:
            logger.warning("Fetching content %s failed: %s", self.page_key, exc)
            self.notifier.error(describe_error(exc, "Failed to fetch content"))
            return self.draft
        finally:
            self.loading = False

        if page is not None:
            self.page = page
            self.draft = page.to_draft()
        return self.draft

    async def select_page(self, page_key: str) -> Dict[str, Any]:
        if page_key not in PAGES:
            raise ValueError(f"Unknown content page '{page_key}'")
        self.page_key = page_key
        self.page = None
        self.draft = ContentPage().to_draft()
        return await self.load()

    # Editing

    def set_field(self, name: str, value: Any) -> Dict[str, Any]:
        self.draft = drafts.merge_field(self.draft, name, value)
        return self.draft

    def _items(self, field: str) -> List[Dict[str, Any]]:
        return list(self.draft.get(field) or [])

    def append_item(self, field: str) -> List[Dict[str, Any]]:
        items = self._items(field)
        if field == "sections":
            template = {"heading": "", "content": "", "order": len(items) + 1}
        else:
            template = ITEM_TEMPLATES[field]
        items = drafts.append_item(items, template)
        self.draft = drafts.merge_field(self.draft, field, items)
        return items

    def update_item(self, field: str, index: int, key: str, value: Any) -> List[Dict[str, Any]]:
        items = drafts.update_at(self._items(field), index, key, value)
        self.draft = drafts.merge_field(self.draft, field, items)
        return items

    def remove_item(self, field: str, index: int) -> List[Dict[str, Any]]:
        items = drafts.remove_at(self._items(field), index)
        self.draft = drafts.merge_field(self.draft, field, items)
        return items

    # Persisting

    async def save(self) -> bool:
        payload = content_payload(self.page_key, self.draft)
        try:
            if self.page is not None and self.page.id:
                await self.client.put(f"/content/{self.page.id}", json=payload)
            else:
                await self.client.post("/content", json=payload)
        except AppException as exc:
            logger.warning("Saving %s failed: %s", self.page_key, exc)
            self.notifier.error(describe_error(exc, "Failed to save content"))
            return False

        self.notifier.success("Content saved successfully")
        await self.load()
        return True

    async def publish(self) -> bool:
        if self.page is None or not self.page.id:
            self.notifier.error("Please save content first")
            return False

        try:
            await self.client.put(f"/content/{self.page.id}/publish")
        except AppException as exc:
            logger.warning("Publishing %s failed: %s", self.page_key, exc)
            self.notifier.error(describe_error(exc, "Failed to publish content"))
            return False

        self.notifier.success("Content published successfully")
        await self.load()
        return True
