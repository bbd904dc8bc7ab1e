"""
Resource detail view: one fetched record with collapsible sections.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Set

from pydantic import ValidationError

from backoffice.app.core.exceptions import AppException, ResourceNotFoundError, describe_error
from backoffice.app.core.http_client import ApiClient
from backoffice.app.domain.resources.drafts import get_path
from backoffice.app.domain.resources.form import ResourceForm
from backoffice.app.domain.resources.registry import DetailSection, ResourceDefinition, is_present
from backoffice.app.schemas.common import item_from
from backoffice.app.services.notification_service import Notifier
from backoffice.app.services.platform import LocalPlatform

logger = logging.getLogger("backoffice.screens.detail")


class ResourceDetailScreen:

    def __init__(
        self,
        definition: ResourceDefinition,
        record_id: str,
        client: ApiClient,
        notifier: Notifier,
        platform: Optional[LocalPlatform] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ):
        self.definition = definition
        self.record_id = record_id
        self.client = client
        self.notifier = notifier
        self.platform = platform
        self.navigate = navigate
        self.raw: Optional[Dict[str, Any]] = None
        self.document: Optional[Dict[str, Any]] = None
        self.loading = False
        self._expanded: Set[str] = set()

    async def load(self) -> Optional[Dict[str, Any]]:
        label = self.definition.label.lower()
        self.loading = True
        try:
            response = await self.client.get(self.definition.item_path(self.record_id))
            raw = item_from(response.data, self.definition.item_keys)
            if raw is None:
                raise ResourceNotFoundError(response.data)
            document = self.definition.normalize(raw)
        except (AppException, ValidationError) as exc:
            logger.warning("Loading %s %s failed: %s", label, self.record_id, exc)
            self.notifier.error(describe_error(exc, f"Failed to fetch {label} details"))
            return self.document
        finally:
            self.loading = False

        self.raw = raw
        self.document = document
        return self.document

    def sections(self) -> List[DetailSection]:
        """Sections whose backing field came back non-empty, in declared order."""
        if self.raw is None:
            return []
        return [s for s in self.definition.detail_sections if is_present(get_path(self.raw, s.field))]

    def toggle(self, key: str) -> bool:
        if key in self._expanded:
            self._expanded.discard(key)
        else:
            self._expanded.add(key)
        return key in self._expanded

    def is_expanded(self, key: str) -> bool:
        return key in self._expanded

    @property
    def edit_route(self) -> str:
        return self.definition.edit_route(self.record_id)

    def edit_form(self) -> ResourceForm:
        if self.navigate is not None:
            self.navigate(self.edit_route)
        return ResourceForm(
            self.definition,
            self.client,
            self.notifier,
            platform=self.platform,
            record_id=self.record_id,
            navigate=self.navigate,
        )
