"""Trace logging for stepping through the parse state machine."""

import html
import logging
from typing import Any, List, Tuple


class ParseLogger:
    """Named logger that also keeps every entry for later inspection."""

    def __init__(self, name: str):
        self.name = name
        self.disabled = False
        self.entries: List[Tuple[str, str]] = []

        self.logger = logging.getLogger(name)

        # Only add a default StreamHandler if no handlers exist, so that two
        # ParseLogger instances with the same name do not duplicate output.
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.DEBUG)
            self.logger.propagate = False
        elif self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.DEBUG)

    def _record(self, kind: str, message: str) -> None:
        self.entries.append((kind, message))

    def section(self, title: str):
        """Start a new section in the trace."""
        if self.disabled:
            return
        self.logger.debug(f"\n{'=' * 20} {title} {'=' * 20}\n")
        self._record("section", title)

    def info(self, message: str):
        if self.disabled:
            return
        self.logger.info(message)
        self._record("info", message)

    def debug(self, message: str):
        if self.disabled:
            return
        self.logger.debug(message)
        self._record("debug", message)

    def warning(self, message: str):
        if self.disabled:
            return
        self.logger.warning(message)
        self._record("warning", message)

    def result(self, label: str, value: Any):
        """Log a result with a label."""
        if self.disabled:
            return
        self.logger.info(f"{label}: {value}")
        self._record("result", f"{label}: {value}")

    def clear(self) -> None:
        self.entries.clear()

    def to_html(self) -> str:
        """Render the captured entries as an HTML fragment."""
        parts = ['<div class="content">']
        section_open = False
        for kind, message in self.entries:
            text = html.escape(message)
            if kind == "section":
                if section_open:
                    parts.append("</section>")
                parts.append(f'<section class="section"><h3>{text}</h3>')
                section_open = True
            else:
                parts.append(f'<p class="{kind}">{text}</p>')
        if section_open:
            parts.append("</section>")
        parts.append("</div>")
        return "\n".join(parts)
