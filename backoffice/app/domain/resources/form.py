"""
Resource form (create/edit).

Owns one local draft for its lifetime. Every edit swaps in a new dict built
by the helpers in `drafts`; submission sends the whole draft with exactly
one POST (create) or PUT (update).
"""

import inspect
import json
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from backoffice.app.core.exceptions import AppException, FormValidationError, describe_error
from backoffice.app.core.http_client import ApiClient, ApiResponse
from backoffice.app.domain.resources import drafts
from backoffice.app.domain.resources.registry import FORM, MULTIPART, ResourceDefinition
from backoffice.app.schemas.common import MutationEnvelope, collection_from, item_from
from backoffice.app.schemas.lookup import LookupTable
from backoffice.app.services.notification_service import Notifier
from backoffice.app.services.platform import LocalPlatform

logger = logging.getLogger("backoffice.screens.form")


@dataclass
class Attachment:
    """A local file queued for upload, with its data-URL preview."""
    path: Path
    preview: str

    @property
    def filename(self) -> str:
        return self.path.name

    def as_upload(self):
        mime, _ = mimetypes.guess_type(self.path.name)
        return (self.path.name, self.path.read_bytes(), mime or "application/octet-stream")


class ResourceForm:

    def __init__(
        self,
        definition: ResourceDefinition,
        client: ApiClient,
        notifier: Notifier,
        platform: Optional[LocalPlatform] = None,
        record_id: Optional[str] = None,
        on_success: Optional[Callable[[], Any]] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ):
        self.definition = definition
        self.client = client
        self.notifier = notifier
        self.platform = platform or LocalPlatform()
        self.record_id = record_id
        self.on_success = on_success
        self.navigate = navigate
        self.draft: Dict[str, Any] = definition.default_draft()
        self.lookups: Dict[str, LookupTable] = {}
        self.attachments: List[Attachment] = []
        self.loading = False
        self.closed = False

    @property
    def is_edit(self) -> bool:
        return bool(self.record_id)

    @property
    def title(self) -> str:
        label = self.definition.label
        return f"Edit {label}" if self.is_edit else f"Add New {label}"

    # Loading

    async def load(self) -> Dict[str, Any]:
        await self.load_lookups()
        if self.is_edit:
            await self.load_record()
        return self.draft

    async def load_lookups(self) -> None:
        for name, source in self.definition.lookups.items():
            try:
                response = await self.client.get(source.path)
            except AppException as exc:
                # Selects simply stay empty
                logger.warning("Failed to fetch %s: %s", name, exc)
                continue
            self.lookups[name] = LookupTable(collection_from(response.data, source.list_key), source.label_field)

    async def load_record(self) -> None:
        label = self.definition.label.lower()
        self.loading = True
        try:
            response = await self.client.get(self.definition.item_path(self.record_id))
            raw = item_from(response.data, self.definition.item_keys)
            if raw is None:
                raise FormValidationError(f"Failed to fetch {label} details")
            self.draft = self.definition.draft_from(raw)
        except (AppException, ValidationError) as exc:
            logger.warning("Loading %s %s failed: %s", label, self.record_id, exc)
            self.notifier.error(describe_error(exc, f"Failed to fetch {label} details"))
        finally:
            self.loading = False

    # Editing

    def set_field(self, name: str, value: Any) -> Dict[str, Any]:
        self.draft = drafts.merge_field(self.draft, name, value)
        hook = self.definition.field_hooks.get(name)
        if hook is not None:
            self.draft = hook(self.draft, value, self.lookups)
        return self.draft

    def items(self, field: str) -> List[Any]:
        return list(drafts.get_path(self.draft, field) or [])

    def _store_items(self, field: str, items: List[Any]) -> List[Any]:
        number_key = self.definition.numbered_fields.get(field)
        if number_key:
            items = drafts.renumber(items, number_key)
        self.draft = drafts.merge_field(self.draft, field, items)
        return items

    def append_item(self, field: str, **overrides: Any) -> List[Any]:
        template = self.definition.item_templates.get(field)
        element = {**(template() if template else {}), **overrides}
        return self._store_items(field, drafts.append_item(self.items(field), element))

    def update_item(self, field: str, index: int, key: str, value: Any) -> List[Any]:
        return self._store_items(field, drafts.update_at(self.items(field), index, key, value))

    def remove_item(self, field: str, index: int) -> List[Any]:
        return self._store_items(field, drafts.remove_at(self.items(field), index))

    def add_unique(self, field: str, value: str) -> List[str]:
        values = drafts.add_unique(self.items(field), value)
        self.draft = drafts.merge_field(self.draft, field, values)
        return values

    def remove_value(self, field: str, value: str) -> List[str]:
        values = drafts.remove_value(self.items(field), value)
        self.draft = drafts.merge_field(self.draft, field, values)
        return values

    def attach(self, path: Union[str, Path]) -> Optional[Attachment]:
        path = Path(path)
        try:
            preview = self.platform.read_data_url(path)
        except OSError as exc:
            logger.warning("Reading %s failed: %s", path, exc)
            self.notifier.error(f"Failed to read file {path.name}")
            return None
        attachment = Attachment(path=path, preview=preview)
        if self.definition.encoding == FORM:
            # Single file field (receipt)
            self.attachments = [attachment]
        else:
            self.attachments = [*self.attachments, attachment]
        return attachment

    def detach(self, index: int) -> None:
        self.attachments = drafts.remove_at(self.attachments, index)

    def cancel(self) -> None:
        self.draft = self.definition.default_draft()
        self.attachments = []
        self.closed = True

    # Submission

    def validate(self) -> None:
        """Run every rule against the current draft; raise on the first failure."""
        for rule in self.definition.rules:
            if not rule.check(self.draft):
                raise FormValidationError(rule.message, rule.field)

    def request_body(self) -> Dict[str, Any]:
        encoding = self.definition.encoding
        if encoding == MULTIPART:
            body = {"data": {"data": json.dumps(self.draft)}}
        elif encoding == FORM:
            fields = {
                target: "" if self.draft.get(source) is None else str(self.draft.get(source))
                for source, target in self.definition.form_fields.items()
            }
            body = {"data": fields}
        else:
            return {"json": self.draft}

        if self.attachments:
            field = self.definition.attachment_field
            body["files"] = [(field, a.as_upload()) for a in self.attachments]
        return body

    async def _send(self) -> ApiResponse:
        body = self.request_body()
        if self.is_edit:
            return await self.client.put(self.definition.item_path(self.record_id), **body)
        return await self.client.post(self.definition.create_endpoint, **body)

    async def submit(self) -> bool:
        label = self.definition.label
        if self.loading:
            logger.info("Ignoring submit while a request for %s is in flight", label)
            return False

        try:
            self.validate()
        except FormValidationError as exc:
            self.notifier.error(exc.message)
            return False

        self.loading = True
        try:
            response = await self._send()
            envelope = MutationEnvelope.model_validate(response.data if isinstance(response.data, dict) else {})
            if not envelope.success:
                self.notifier.error(envelope.message or f"Failed to save {label.lower()}")
                return False
        except (AppException, ValidationError) as exc:
            logger.warning("Saving %s failed: %s", label, exc)
            self.notifier.error(describe_error(exc, f"Failed to save {label.lower()}"))
            return False
        except OSError as exc:
            # Attached file vanished or became unreadable
            logger.warning("Reading attachments for %s failed: %s", label, exc)
            self.notifier.error(f"Failed to save {label.lower()}. {exc.strerror or exc}")
            return False
        finally:
            self.loading = False

        self.notifier.success(f"{label} {'updated' if self.is_edit else 'created'} successfully")
        await self._after_save()
        return True

    async def _after_save(self) -> None:
        if self.on_success is not None:
            result = self.on_success()
            if inspect.isawaitable(result):
                await result
        elif self.definition.success_route and self.navigate is not None:
            self.navigate(self.definition.success_route)
