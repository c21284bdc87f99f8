import subprocess
from unittest.mock import patch

import pytest

from cliphist.reader import (
    DecodeFailedError,
    PbpasteReader,
    ProcessFailedError,
    ReadError,
    UnsupportedPlatformError,
    UnsupportedReader,
    get_system_reader,
)


def _completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=["pbpaste"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestPbpasteReader:
    def test_returns_decoded_stdout(self):
        with patch("cliphist.reader.subprocess.run", return_value=_completed(stdout="héllo\n".encode())) as mock_run:
            assert PbpasteReader().read() == "héllo\n"
        mock_run.assert_called_once_with(["pbpaste"], capture_output=True)

    def test_empty_clipboard(self):
        with patch("cliphist.reader.subprocess.run", return_value=_completed(stdout=b"")):
            assert PbpasteReader().read() == ""

    def test_nonzero_exit(self):
        with patch("cliphist.reader.subprocess.run", return_value=_completed(returncode=1, stderr=b"no pasteboard")):
            with pytest.raises(ProcessFailedError, match="no pasteboard"):
                PbpasteReader().read()

    def test_missing_utility(self):
        with patch("cliphist.reader.subprocess.run", side_effect=FileNotFoundError("pbpaste")):
            with pytest.raises(ProcessFailedError):
                PbpasteReader().read()

    def test_invalid_utf8(self):
        with patch("cliphist.reader.subprocess.run", return_value=_completed(stdout=b"\xff\xfe\xfa")):
            with pytest.raises(DecodeFailedError):
                PbpasteReader().read()

    def test_errors_share_base_class(self):
        with patch("cliphist.reader.subprocess.run", return_value=_completed(returncode=2)):
            with pytest.raises(ReadError):
                PbpasteReader().read()


class TestUnsupportedReader:
    def test_always_fails(self):
        reader = UnsupportedReader("linux")
        with pytest.raises(UnsupportedPlatformError, match="linux"):
            reader.read()

    def test_never_spawns_process(self):
        with patch("cliphist.reader.subprocess.run") as mock_run:
            with pytest.raises(UnsupportedPlatformError):
                UnsupportedReader("win32").read()
        mock_run.assert_not_called()


class TestGetSystemReader:
    def test_macos_uses_pbpaste(self):
        assert isinstance(get_system_reader("darwin"), PbpasteReader)

    @pytest.mark.parametrize("platform", ["linux", "win32", "freebsd"])
    def test_other_platforms_unsupported(self, platform):
        reader = get_system_reader(platform)
        assert isinstance(reader, UnsupportedReader)
        assert reader.platform == platform
