"""
Resource list screen.

Loads one collection with the current filters, derives the searched view
from it and runs the row actions (view, edit, delete). The backend stays the
source of truth: deletes are followed by a full refetch.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from backoffice.app.core.exceptions import AppException, describe_error
from backoffice.app.core.http_client import ApiClient
from backoffice.app.core.reliability import RequestSequence
from backoffice.app.domain.resources.drafts import filter_records
from backoffice.app.domain.resources.form import ResourceForm
from backoffice.app.domain.resources.registry import ResourceDefinition
from backoffice.app.schemas.common import collection_from
from backoffice.app.services.notification_service import Notifier
from backoffice.app.services.platform import LocalPlatform

logger = logging.getLogger("backoffice.screens.list")


class ResourceListScreen:

    def __init__(
        self,
        definition: ResourceDefinition,
        client: ApiClient,
        notifier: Notifier,
        platform: LocalPlatform,
        filters: Optional[Mapping[str, Any]] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ):
        self.definition = definition
        self.client = client
        self.notifier = notifier
        self.platform = platform
        self.navigate = navigate
        self.records: List[Dict[str, Any]] = []
        self.filters: Dict[str, Any] = {name: "" for name in definition.filters}
        self.filters.update(filters or {})
        self.client_filters: Dict[str, Any] = {}
        self.search_term = ""
        self.loading = False
        self.form: Optional[ResourceForm] = None
        self.selected: Optional[Dict[str, Any]] = None
        self._sequence = RequestSequence()

    # Fetching

    def query_params(self) -> Dict[str, Any]:
        return {k: v for k, v in self.filters.items() if v not in (None, "")}

    async def load(self) -> List[Dict[str, Any]]:
        """Fetch the collection; only the latest of overlapping fetches is applied."""
        token = self._sequence.issue()
        self.loading = True
        try:
            response = await self.client.get(self.definition.path, params=self.query_params())
            records = self._normalize_all(collection_from(response.data, self.definition.list_key))
        except (AppException, ValidationError) as exc:
            if self._sequence.is_current(token):
                self.loading = False
                logger.warning("Fetching %s failed: %s", self.definition.plural, exc)
                self.notifier.error(describe_error(exc, f"Failed to fetch {self.definition.plural}"))
            return self.records

        if not self._sequence.is_current(token):
            return self.records

        self.records = records
        self.loading = False
        return self.records

    refresh = load

    def _normalize_all(self, raw_records: List[Any]) -> List[Dict[str, Any]]:
        """Normalize each record on its own; records that do not fit the schema are skipped."""
        records = []
        for raw in raw_records:
            try:
                records.append(self.definition.normalize(raw))
            except ValidationError as exc:
                logger.warning("Skipping malformed %s %s: %s", self.definition.label.lower(), raw.get("_id"), exc)
        return records

    async def set_filter(self, name: str, value: Any) -> List[Dict[str, Any]]:
        self.filters = {**self.filters, name: value}
        return await self.load()

    async def set_filters(self, **values: Any) -> List[Dict[str, Any]]:
        self.filters = {**self.filters, **values}
        return await self.load()

    # Derived view

    def search(self, term: str) -> List[Dict[str, Any]]:
        self.search_term = term
        return self.visible

    @property
    def visible(self) -> List[Dict[str, Any]]:
        return filter_records(self.records, self.search_term, self.definition.search_fields, self.client_filters)

    # Row actions

    def find(self, record_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self.records if r.get("_id") == record_id), None)

    def view(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Show an already loaded record; no request is made."""
        self.selected = self.find(record_id)
        return self.selected

    def close_view(self) -> None:
        self.selected = None

    def open_form(self, record_id: Optional[str] = None) -> ResourceForm:
        """
        Open the create/edit form as a modal bound to this list.

        Resources saved through a page route (a `success_route`) navigate
        there instead of calling back.
        """
        self.form = ResourceForm(
            self.definition,
            self.client,
            self.notifier,
            platform=self.platform,
            record_id=record_id,
            on_success=None if self.definition.success_route else self._form_saved,
            navigate=self.navigate,
        )
        return self.form

    def create(self) -> ResourceForm:
        return self.open_form()

    def edit(self, record_id: str) -> ResourceForm:
        return self.open_form(record_id)

    def close_form(self) -> None:
        if self.form is not None:
            self.form.cancel()
        self.form = None

    async def _form_saved(self) -> None:
        self.form = None
        await self.load()

    async def delete(self, record_id: str) -> bool:
        label = self.definition.label
        if not self.platform.confirm(f"Are you sure you want to delete this {label.lower()}?"):
            return False

        try:
            await self.client.delete(self.definition.item_path(record_id))
        except AppException as exc:
            logger.warning("Deleting %s %s failed: %s", label, record_id, exc)
            self.notifier.error(describe_error(exc, f"Failed to delete {label.lower()}"))
            return False

        self.notifier.success(f"{label} deleted successfully")
        await self.load()
        return True
