"""Shared fixtures for artifact_unpack tests."""

import gzip
import io
import logging
import tarfile

import pytest
from artifact_unpack.common.logging import (
    DetailedFormatter,
    SimpleFormatter,
    StructuredFormatter,
)

DEFAULT_MTIME = 1_600_000_000

OWN_FORMATTERS = (StructuredFormatter, DetailedFormatter, SimpleFormatter)


class TarGzBuilder:
    """Builds .tar.gz archives in memory, one entry at a time."""

    def __init__(self, **tar_options):
        self._raw = io.BytesIO()
        tar_options.setdefault("format", tarfile.PAX_FORMAT)
        self._tar = tarfile.open(fileobj=self._raw, mode="w", **tar_options)

    def _add(self, info, data=None):
        self._tar.addfile(info, io.BytesIO(data) if data is not None else None)
        return self

    def file(self, name, data=b"", mode=0o644, mtime=DEFAULT_MTIME):
        info = tarfile.TarInfo(name)
        info.size = len(data)
        info.mode = mode
        info.mtime = mtime
        return self._add(info, data)

    def directory(self, name, mode=0o755):
        info = tarfile.TarInfo(name)
        info.type = tarfile.DIRTYPE
        info.mode = mode
        info.mtime = DEFAULT_MTIME
        return self._add(info)

    def symlink(self, name, target):
        info = tarfile.TarInfo(name)
        info.type = tarfile.SYMTYPE
        info.linkname = target
        return self._add(info)

    def special(self, name, entry_type, mode=0o644, linkname=""):
        info = tarfile.TarInfo(name)
        info.type = entry_type
        info.mode = mode
        info.linkname = linkname
        return self._add(info)

    def tar_bytes(self):
        if not self._tar.closed:
            self._tar.close()
        return self._raw.getvalue()

    def build(self):
        return gzip.compress(self.tar_bytes())

    def stream(self):
        return io.BytesIO(self.build())


@pytest.fixture
def targz():
    """Factory for in-memory .tar.gz archives."""
    return TarGzBuilder


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() changes to the root logger."""
    root = logging.getLogger()
    level = root.level
    factory = logging.getLogRecordFactory()
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, OWN_FORMATTERS):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.setLogRecordFactory(factory)
