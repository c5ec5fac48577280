"""Routes logging records into the TUI log panel.

Hides how library log output reaches the screen. Records may be emitted from
worker threads, so updates go through call_from_thread when needed.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import LogPanel


class PanelLogHandler(logging.Handler):
    """logging.Handler writing into a LogPanel."""

    def __init__(self, panel: "LogPanel", app: "App", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.panel = panel
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any) -> None:
        if self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args)
        else:
            func(*args)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._call_thread_safe(self.panel.write_record, record)
        except Exception:
            self.handleError(record)
