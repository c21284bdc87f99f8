import logging
import sys

from cliphist.config import DATA_DIR, LOG_PATH


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def setup_logging(level: int = logging.INFO) -> None:
    """Log to the data directory and stderr. Intended for the host process entry point."""
    ensure_dirs()

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )
