import logging
import threading
from collections.abc import Callable

from cliphist.config import DEFAULT_CONTENT_TYPE, MAX_ENTRIES
from cliphist.monitor import ClipboardMonitor
from cliphist.storage import StorageManager

logger = logging.getLogger(__name__)


class HistoryRecorder:
    """Feeds clipboard changes from a monitor into a store.

    Each insert and the trim that follows it run under one lock, so another
    recorded change cannot land between them. After each stored entry the
    history is trimmed to ``max_entries``.
    """

    def __init__(
        self,
        storage: StorageManager,
        monitor: ClipboardMonitor | None = None,
        max_entries: int = MAX_ENTRIES,
        on_change: Callable[[int], None] | None = None,
    ):
        self._storage = storage
        self._monitor = monitor if monitor is not None else ClipboardMonitor()
        self._max_entries = max_entries
        self._on_change = on_change
        self._write_lock = threading.Lock()

    @property
    def monitor(self) -> ClipboardMonitor:
        return self._monitor

    def start(self) -> bool:
        return self._monitor.start(self.record)

    def stop(self) -> None:
        self._monitor.stop()

    def is_running(self) -> bool:
        return self._monitor.is_running()

    def record(self, content: str, content_type: str = DEFAULT_CONTENT_TYPE) -> int | None:
        with self._write_lock:
            entry_id = self._storage.insert(content, content_type)
            if entry_id is None:
                return None
            self._storage.trim(self._max_entries)

        logger.debug("Recorded clipboard entry %d (%d chars)", entry_id, len(content))
        if self._on_change:
            self._on_change(entry_id)
        return entry_id

    def mark_copied(self, content: str) -> None:
        """Tell the monitor the host put ``content`` on the clipboard itself."""
        self._monitor.mark_seen(content)
