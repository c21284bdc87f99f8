import logging
import threading
import time
from collections.abc import Callable

from cliphist.config import POLL_INTERVAL
from cliphist.reader import ClipboardReader, ReadError, get_system_reader

logger = logging.getLogger(__name__)


class ClipboardMonitor:
    """Polls the clipboard on a background thread and reports new text.

    ``start`` spawns one daemon thread that reads the clipboard every
    ``interval`` seconds and calls ``notify(content)`` whenever the text is
    non-empty and differs from the last value seen. ``stop`` is cooperative:
    the thread finishes its current cycle and exits at the top of the next
    one.
    """

    def __init__(self, reader: ClipboardReader | None = None, interval: float = POLL_INTERVAL):
        self._reader = reader if reader is not None else get_system_reader()
        self._interval = interval
        self._state_lock = threading.Lock()
        self._running = False
        self._generation = 0
        self._content_lock = threading.Lock()
        self._last_content = ""
        self._thread: threading.Thread | None = None

    def start(self, notify: Callable[[str], None]) -> bool:
        """Begin polling. Returns False if the monitor was already running."""
        with self._state_lock:
            if self._running:
                return False
            self._running = True
            # A loop left over from before a quick stop/start sees a stale
            # generation and exits instead of polling alongside the new one.
            self._generation += 1
            generation = self._generation

        self._thread = threading.Thread(
            target=self._run,
            args=(notify, generation),
            name="ClipboardMonitor",
            daemon=True,
        )
        self._thread.start()
        logger.info("Clipboard monitor started (interval %.2fs)", self._interval)
        return True

    def stop(self) -> None:
        with self._state_lock:
            was_running = self._running
            self._running = False
        if was_running:
            logger.info("Clipboard monitor stopped")

    def is_running(self) -> bool:
        return self._running

    @property
    def last_content(self) -> str:
        with self._content_lock:
            return self._last_content

    def mark_seen(self, content: str) -> None:
        """Record ``content`` as already observed so it does not trigger a notification."""
        with self._content_lock:
            self._last_content = content

    def check_clipboard(self, notify: Callable[[str], None]) -> bool:
        """Run a single poll cycle. Returns True if ``notify`` was called."""
        try:
            content = self._reader.read()
        except ReadError as exc:
            logger.debug("Skipping clipboard poll: %s", exc)
            return False

        with self._content_lock:
            if not content or content == self._last_content:
                return False
            self._last_content = content

        # Called without the lock so a slow or re-entrant callback
        # cannot hold up the next cycle.
        try:
            notify(content)
        except Exception:
            logger.exception("Clipboard change callback failed")
        return True

    def _is_current(self, generation: int) -> bool:
        with self._state_lock:
            return self._running and generation == self._generation

    def _run(self, notify: Callable[[str], None], generation: int) -> None:
        while self._is_current(generation):
            try:
                self.check_clipboard(notify)
            except Exception:
                logger.exception("Error reading clipboard")
            time.sleep(self._interval)
