"""
Export Service.

Requests backend-rendered files (CSV, Excel, PDF) and hands them to the
platform as downloads. Export endpoints sometimes answer with a JSON error
body and a 2xx status; those are detected here and reported instead of
being saved as a corrupt file.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from backoffice.app.core.exceptions import (
    AppException,
    BackendError,
    MalformedExportError,
    TransportError,
    extract_message,
)
from backoffice.app.core.http_client import ApiClient, ApiResponse
from backoffice.app.services.notification_service import Notifier
from backoffice.app.services.platform import LocalPlatform

logger = logging.getLogger("backoffice.export")

EXTENSIONS = {
    "csv": "csv",
    "excel": "xlsx",
    "pdf": "pdf",
}


def build_filename(kind: str, subject: Optional[str], extension: str, timestamp: Optional[int] = None) -> str:
    """`<kind>-<subject>-<timestamp>.<extension>`; the subject part is dropped when empty."""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    parts = [kind]
    if subject:
        parts.append(subject)
    parts.append(str(timestamp))
    return "-".join(parts) + f".{extension}"


def _parse_json_bytes(content: Any) -> Optional[Any]:
    if isinstance(content, (bytes, bytearray)):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(content, str):
        return content if isinstance(content, dict) else None
    text = content.strip()
    if not text.startswith("{"):
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def embedded_error(response: ApiResponse) -> Optional[Dict[str, Any]]:
    """
    Return the JSON error body hidden in a file response, or None.

    Checked by content type first, then by trying to parse the payload.
    """
    parsed = _parse_json_bytes(response.data)
    if "application/json" in response.content_type:
        return parsed if isinstance(parsed, dict) else {}
    if isinstance(parsed, dict) and (parsed.get("success") is False or extract_message(parsed)):
        return parsed
    return None


def export_failure_message(kind: str, exc: Exception) -> str:
    message = f"Failed to export as {kind.upper()}."
    if isinstance(exc, BackendError):
        detail = exc.backend_message
        if detail is None:
            detail = extract_message(_parse_json_bytes(exc.data))
        return f"{message} {detail or f'Server error (Status: {exc.status_code})'}"
    if isinstance(exc, TransportError):
        return f"{message} {exc.message}"
    if isinstance(exc, AppException) and exc.message:
        return f"{message} {exc.message}"
    if isinstance(exc, OSError):
        return f"{message} {exc.strerror or exc}"
    return message


class ExportService:
    """Downloads a backend export and stores it through the platform bridge."""

    def __init__(self, client: ApiClient, platform: LocalPlatform, notifier: Notifier):
        self.client = client
        self.platform = platform
        self.notifier = notifier

    async def fetch_file(self, path: str, params: Dict[str, Any]) -> bytes:
        response = await self.client.get(path, params=params, as_bytes=True)
        error = embedded_error(response)
        if error is not None:
            raise MalformedExportError(response.status, error)
        return response.data

    async def download(
        self,
        path: str,
        params: Dict[str, Any],
        kind: str,
        document: str,
        subject: Optional[str] = None,
        success_message: Optional[str] = None,
    ) -> Optional[Path]:
        """
        Fetch `path` and save it as `<document>-<subject>-<timestamp>.<ext>`.

        Failures are reported through the notifier and return None.
        """
        try:
            content = await self.fetch_file(path, params)
        except AppException as exc:
            logger.warning("Export %s from %s failed: %s", kind, path, exc)
            self.notifier.error(export_failure_message(kind, exc))
            return None

        filename = build_filename(document, subject, EXTENSIONS[kind])
        try:
            saved = self.platform.save_download(filename, content)
        except OSError as exc:
            logger.warning("Saving export %s failed: %s", filename, exc)
            self.notifier.error(export_failure_message(kind, exc))
            return None
        if success_message:
            self.notifier.success(success_message)
        return saved
