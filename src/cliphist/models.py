from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ContentType(str, Enum):
    """Known content tags. The store accepts any string tag."""

    TEXT = "text"
    IMAGE = "image"
    FILE = "file"


@dataclass(frozen=True)
class ClipboardEntry:
    id: int
    content: str
    content_type: str
    created_at: datetime
    char_count: int
    preview: str  # derived on read, never stored
