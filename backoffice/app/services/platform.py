"""
Platform bridge.

Stands in for the browser facilities the screens rely on: confirmation
dialogs, the clipboard, file downloads, the print flow and local file
previews.
"""

import base64
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

logger = logging.getLogger("backoffice.platform")


@dataclass
class PrintDocument:
    """Print-ready table: no controls, repeated header, totals footer."""
    title: str
    subtitle: str
    header: Sequence[str]
    rows: List[Sequence[str]] = field(default_factory=list)
    footer: Optional[Sequence[str]] = None
    summary: List[str] = field(default_factory=list)

    def render_text(self) -> str:
        columns = [list(self.header)] + [list(r) for r in self.rows]
        if self.footer:
            columns.append(list(self.footer))
        widths = [max(len(str(row[i])) for row in columns) for i in range(len(self.header))]

        def line(cells: Sequence[str]) -> str:
            return "  ".join(str(c).ljust(w) for c, w in zip(cells, widths)).rstrip()

        rule = "-" * (sum(widths) + 2 * (len(widths) - 1))
        out = [self.title, self.subtitle, "", line(self.header), rule]
        out.extend(line(r) for r in self.rows)
        if self.footer:
            out.extend([rule, line(self.footer)])
        if self.summary:
            out.append("")
            out.extend(self.summary)
        return "\n".join(out) + "\n"


class LocalPlatform:
    """
    Platform bridge backed by the local machine.

    Downloads are written under `download_dir`, clipboard text is kept in
    memory and printed documents are rendered to text files in the same
    directory.
    """

    def __init__(
        self,
        download_dir: Union[str, Path] = "exports",
        confirm_handler: Optional[Callable[[str], bool]] = None,
    ):
        self.download_dir = Path(download_dir)
        self._confirm_handler = confirm_handler
        self.clipboard: Optional[str] = None
        self.printed: List[PrintDocument] = []

    def confirm(self, prompt: str) -> bool:
        if self._confirm_handler is None:
            logger.info("No confirmation handler; declining %r", prompt)
            return False
        return bool(self._confirm_handler(prompt))

    def copy_to_clipboard(self, text: str) -> None:
        self.clipboard = text
        logger.info("Copied %d characters to clipboard", len(text))

    def save_download(self, filename: str, content: bytes) -> Path:
        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self.download_dir / Path(filename).name
        target.write_bytes(content)
        logger.info("Saved download %s (%d bytes)", target, len(content))
        return target

    def print_document(self, document: PrintDocument) -> Path:
        self.printed.append(document)
        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self.download_dir / "print-preview.txt"
        target.write_text(document.render_text(), encoding="utf-8")
        return target

    @staticmethod
    def read_data_url(path: Union[str, Path]) -> str:
        """base64 data URL of a local file, used for image and receipt previews."""
        path = Path(path)
        mime, _ = mimetypes.guess_type(path.name)
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        return f"data:{mime or 'application/octet-stream'};base64,{encoded}"
