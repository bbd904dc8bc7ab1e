"""
Shared Pydantic building blocks.

Every backend payload goes through one of these schemas once, so that code
reading a record can rely on a fully defaulted shape. Field names are
snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


def _drop_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: v for k, v in value.items() if v is not None}
    return value


class Schema(BaseModel):
    """Base for nested payload objects. Null fields fall back to their defaults."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def fill_nulls(cls, data: Any) -> Any:
        return _drop_nulls(data)


class Document(Schema):
    """Base for top-level backend documents, identified by `_id`."""
    id: str = Field("", alias="_id")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "allow"

    def to_record(self) -> Dict[str, Any]:
        """Wire-shaped dict, unknown backend fields included."""
        return self.model_dump(by_alias=True)

    def to_draft(self) -> Dict[str, Any]:
        """Wire-shaped dict of the editable fields only."""
        extras = set(self.model_extra or {})
        return self.model_dump(by_alias=True, exclude=extras | {"id"})


class MutationEnvelope(BaseModel):
    """`{success, message?, data?}` envelope returned by mutations."""
    success: bool = True
    message: Optional[str] = None
    data: Any = None

    class Config:
        extra = "allow"


RefValue = Union[str, Dict[str, Any]]


def reference_id(value: Any) -> str:
    """Foreign id of a reference that may arrive populated (`{_id, ...}`) or bare."""
    if isinstance(value, dict):
        return str(value.get("_id") or value.get("id") or "")
    return "" if value is None else str(value)


def date_only(value: Any) -> str:
    """`2024-01-05T00:00:00.000Z` -> `2024-01-05`."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not value:
        return ""
    return str(value).split("T")[0][:10]


def collection_from(payload: Any, key: str) -> List[Dict[str, Any]]:
    """Collection stored under `key`; anything missing or malformed reads as empty."""
    if not isinstance(payload, dict):
        return []
    items = payload.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def item_from(payload: Any, keys: Sequence[str]) -> Optional[Dict[str, Any]]:
    """First of `keys` holding an object (`data`, `hotel`, ...)."""
    if not isinstance(payload, dict):
        return None
    for key in keys:
        value = payload.get(key)
        if isinstance(value, dict):
            return value
    return None
