"""Access to the system clipboard.

``get_system_reader()`` returns the reader for the running platform. Only
macOS has a real implementation (``pbpaste``); elsewhere the reader always
raises ``UnsupportedPlatformError``.
"""

import subprocess
import sys
from typing import Protocol


class ReadError(Exception):
    """The clipboard could not be read."""


class UnsupportedPlatformError(ReadError):
    """No clipboard implementation exists for this platform."""


class ProcessFailedError(ReadError):
    """The paste utility could not be run or exited non-zero."""


class DecodeFailedError(ReadError):
    """The paste utility produced output that is not valid UTF-8."""


class ClipboardReader(Protocol):
    def read(self) -> str:
        ...


class PbpasteReader:
    command = ("pbpaste",)

    def read(self) -> str:
        try:
            result = subprocess.run(list(self.command), capture_output=True)
        except OSError as exc:
            raise ProcessFailedError(f"cannot run {self.command[0]}: {exc}") from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ProcessFailedError(f"{self.command[0]} exited with {result.returncode}: {stderr}")

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeFailedError(f"{self.command[0]} output is not UTF-8") from exc


class UnsupportedReader:
    def __init__(self, platform: str = sys.platform):
        self.platform = platform

    def read(self) -> str:
        raise UnsupportedPlatformError(f"clipboard reading is not supported on {self.platform}")


def get_system_reader(platform: str = sys.platform) -> ClipboardReader:
    if platform == "darwin":
        return PbpasteReader()
    return UnsupportedReader(platform)
