import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("CLIPHIST_DATA_DIR", Path.home() / ".local" / "share" / "cliphist"))
DB_PATH = DATA_DIR / "cliphist.db"
LOG_PATH = DATA_DIR / "cliphist.log"

POLL_INTERVAL = 0.5  # seconds between clipboard checks
PREVIEW_LENGTH = 100  # characters in a read-time preview
DEFAULT_LIMIT = 100  # page size for fetch/search
DEFAULT_CONTENT_TYPE = "text"


def _parse_max_entries() -> int:
    raw = os.environ.get("CLIPHIST_MAX_ENTRIES")
    if raw is None:
        return 500
    try:
        value = int(raw)
    except ValueError:
        return 500
    return max(10, min(100_000, value))


MAX_ENTRIES = _parse_max_entries()  # retention applied by the recorder
