"""
Back Office Entry Point.

`BackOffice` is the composition root: it builds the settings-driven API
client, the notification center and the platform bridge once, and hands
them to every screen it creates.
"""

from typing import Callable, List, Optional

import httpx

from backoffice.app.core.config import Settings, settings as default_settings
from backoffice.app.core.http_client import ApiClient
from backoffice.app.core.observability import configure_logging
from backoffice.app.domain.agencies.agency_directory import AgencyDirectory
from backoffice.app.domain.content.content_editor import ContentEditor
from backoffice.app.domain.ledger.ledger_screen import LedgerScreen
from backoffice.app.domain.resources.detail import ResourceDetailScreen
from backoffice.app.domain.resources.form import ResourceForm
from backoffice.app.domain.resources.list_screen import ResourceListScreen
from backoffice.app.domain.resources.registry import get_resource
from backoffice.app.services.notification_service import NotificationCenter
from backoffice.app.services.platform import LocalPlatform


class BackOffice:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[ApiClient] = None,
        notifier: Optional[NotificationCenter] = None,
        platform: Optional[LocalPlatform] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        confirm_handler: Optional[Callable[[str], bool]] = None,
    ):
        self.settings = settings or default_settings
        configure_logging(self.settings.log_level)
        self.client = client or ApiClient.from_settings(self.settings, transport=transport)
        self.notifier = notifier or NotificationCenter()
        self.platform = platform or LocalPlatform(self.settings.download_dir, confirm_handler)
        self.history: List[str] = []

    def navigate(self, route: str) -> None:
        self.history.append(route)

    @property
    def location(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    # Screens

    def list_screen(self, name: str, **filters) -> ResourceListScreen:
        return ResourceListScreen(
            get_resource(name),
            self.client,
            self.notifier,
            self.platform,
            filters=filters,
            navigate=self.navigate,
        )

    def form(self, name: str, record_id: Optional[str] = None, on_success: Optional[Callable] = None) -> ResourceForm:
        return ResourceForm(
            get_resource(name),
            self.client,
            self.notifier,
            platform=self.platform,
            record_id=record_id,
            on_success=on_success,
            navigate=self.navigate,
        )

    def detail(self, name: str, record_id: str) -> ResourceDetailScreen:
        return ResourceDetailScreen(
            get_resource(name),
            record_id,
            self.client,
            self.notifier,
            platform=self.platform,
            navigate=self.navigate,
        )

    def ledger(self, account_id: str, user_name: Optional[str] = None, **date_range) -> LedgerScreen:
        return LedgerScreen(account_id, self.client, self.notifier, self.platform, user_name=user_name, **date_range)

    def content_editor(self, page_key: str = "ABOUT_US") -> ContentEditor:
        return ContentEditor(self.client, self.notifier, page_key=page_key)

    def agencies(self) -> AgencyDirectory:
        return AgencyDirectory(
            self.client,
            self.notifier,
            self.platform,
            max_active_agents=self.settings.max_active_agents,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "BackOffice":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
