"""Streaming extraction of gzip-compressed tar archives."""

import gzip
import os
import sys
import tarfile
import time
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Set, Union

from artifact_unpack.common import get_logger

from .errors import (
    ArchiveReadError,
    CreateError,
    InvalidCompressionError,
    InvalidEntryNameError,
    PathValidationError,
    SizeMismatchError,
    UnsupportedEntryTypeError,
    WriteError,
)
from .paths import NATIVE_STYLE, PathStyle, validate_entry_name

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 65536  # 64 KB

_O_BINARY = getattr(os, "O_BINARY", 0)

# Raised by the gzip and tar decoders on corrupt input
_DECODE_ERRORS = (tarfile.TarError, OSError, EOFError, zlib.error)

# Raised when a member payload ends before its declared size
_TRUNCATION_ERRORS = (tarfile.ReadError, EOFError)

_TYPE_NAMES = {
    tarfile.LNKTYPE: "hard link",
    tarfile.CHRTYPE: "character device",
    tarfile.BLKTYPE: "block device",
    tarfile.FIFOTYPE: "fifo",
}


class _CountingReader:
    """Read-only wrapper that counts the bytes taken from a stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self.bytes_read += len(data)
        return data


def requires_executable_unlink() -> bool:
    """Whether executables must be removed before being overwritten.

    macOS caches code-signing information per file; rewriting a signed
    binary in place leaves the cached signature stale and the new binary
    is killed on launch.
    """
    return sys.platform == "darwin"


@dataclass
class ExtractionRun:
    """State private to a single extraction run."""

    started_at: float = field(default_factory=time.time)
    made_dirs: Set[str] = field(default_factory=set)
    files_extracted: int = 0
    logged_mtime_error: bool = False


class TarGzExtractor:
    """Extracts a gzip-compressed tar stream into a destination directory."""

    def __init__(
        self,
        path_style: PathStyle = NATIVE_STYLE,
        unlink_executables: Optional[bool] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """Initialize extractor.

        Args:
            path_style: Host path syntax used to validate entry names and
                build target paths
            unlink_executables: Remove existing files before writing
                executable entries; None asks the host
            chunk_size: Bytes copied per read of an entry payload

        Raises:
            ValueError: If chunk_size is not positive
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.path_style = path_style
        if unlink_executables is None:
            unlink_executables = requires_executable_unlink()
        self.unlink_executables = unlink_executables
        self.chunk_size = chunk_size

    def run(
        self,
        stream: BinaryIO,
        dest_dir: Union[str, Path],
        archive_root: str = "",
    ) -> None:
        """Extract every entry of a .tar.gz stream.

        Entries are processed in stream order. The first error aborts the
        run; files written before it stay on disk.

        Args:
            stream: Readable binary stream of gzip-compressed tar data
            dest_dir: Directory to extract into (created as needed)
            archive_root: Leading prefix removed from every entry name; an
                entry naming exactly this prefix is skipped

        Raises:
            InvalidCompressionError: If the stream is not gzip data
            ArchiveReadError: If the tar container is corrupt
            InvalidEntryNameError: If an entry name is unsafe
            SizeMismatchError: If a file payload is shorter than declared
            UnsupportedEntryTypeError: If an entry is not a file, directory
                or symlink
            CreateError: If a file or directory cannot be created
            WriteError: If a file cannot be written
        """
        run = ExtractionRun()
        dest_dir = os.path.abspath(os.fspath(dest_dir))

        raw = _CountingReader(stream)
        with gzip.GzipFile(fileobj=raw, mode="rb") as gz:
            try:
                empty = not gz.peek(1)
            except (OSError, EOFError, zlib.error) as e:
                raise InvalidCompressionError(f"invalid gzip stream: {e}") from e

            # gzip reports zero-byte input as end of stream, not as an error
            if raw.bytes_read == 0:
                raise InvalidCompressionError("invalid gzip stream: no data")

            if empty:
                logger.info("Archive is empty, nothing to extract")
                return

            try:
                tar = tarfile.open(fileobj=gz, mode="r|")
            except _DECODE_ERRORS as e:
                raise ArchiveReadError(f"tar error: {e}") from e

            with tar:
                while True:
                    try:
                        member = tar.next()
                    except _DECODE_ERRORS as e:
                        raise ArchiveReadError(f"tar error: {e}") from e
                    if member is None:
                        break
                    self._extract_member(tar, member, dest_dir, archive_root, run)

        elapsed = time.time() - run.started_at
        logger.info(f"Extracted {run.files_extracted} file(s) to {dest_dir} in {elapsed:.2f}s")

    def _extract_member(
        self,
        tar: tarfile.TarFile,
        member: tarfile.TarInfo,
        dest_dir: str,
        archive_root: str,
        run: ExtractionRun,
    ) -> None:
        style = self.path_style

        if member.type == tarfile.XGLTYPE:
            # git archive emits a global header with an empty name
            logger.debug("Skipping global extended header")
            return

        try:
            rel = validate_entry_name(member.name, style)
        except PathValidationError as e:
            raise InvalidEntryNameError(
                f"tar file contained invalid name {member.name!r}: {e}",
                name=member.name,
            ) from e

        if style.normpath(rel) == style.normpath(archive_root):
            logger.debug(f"Skipping archive root entry {member.name!r}")
            return

        if rel.startswith(archive_root):
            rel = rel[len(archive_root):]

        target = style.normpath(style.join(dest_dir, rel.lstrip(style.sep + "/")))
        if not style.is_within(dest_dir, target):
            raise InvalidEntryNameError(
                f"tar file entry {member.name!r} escapes {dest_dir} "
                f"after removing archive root {archive_root!r}",
                name=member.name,
                archive_root=archive_root,
            )

        perm = member.mode & 0o777

        if member.isreg():
            self._write_file(tar, member, target, perm, run)
        elif member.isdir():
            self._make_dirs(target, perm)
            run.made_dirs.add(target)
        elif member.issym():
            # Not materialised; some hosts need privileges to create them.
            logger.debug(f"Skipping symlink {member.name!r} -> {member.linkname!r}")
        else:
            kind = _TYPE_NAMES.get(member.type, f"type {member.type!r}")
            raise UnsupportedEntryTypeError(
                f"tar file entry {member.name} contained unsupported file type "
                f"{kind} (mode {perm:o})",
                name=member.name,
                type=member.type,
                mode=member.mode,
            )

    def _make_dirs(self, path: str, mode: int) -> None:
        try:
            os.makedirs(path, mode, exist_ok=True)
        except OSError as e:
            raise CreateError(f"error creating directory {path}: {e}", path=path) from e

    def _write_file(
        self,
        tar: tarfile.TarFile,
        member: tarfile.TarInfo,
        target: str,
        perm: int,
        run: ExtractionRun,
    ) -> None:
        """Write a regular file entry and apply its modification time."""
        parent = self.path_style.module.dirname(target)
        if parent not in run.made_dirs:
            self._make_dirs(parent, perm)
            run.made_dirs.add(parent)

        if self.unlink_executables and perm & 0o111:
            try:
                os.remove(target)
            except FileNotFoundError:
                pass
            except OSError as e:
                raise CreateError(f"error removing {target}: {e}", path=target) from e

        source = tar.extractfile(member)
        try:
            fd = os.open(target, os.O_RDWR | os.O_CREAT | os.O_TRUNC | _O_BINARY, perm)
        except OSError as e:
            raise CreateError(f"error creating {target}: {e}", path=target) from e

        written = 0
        truncated = None
        try:
            with os.fdopen(fd, "wb") as out:
                while True:
                    try:
                        chunk = source.read(self.chunk_size)
                    except _TRUNCATION_ERRORS as e:
                        truncated = e
                        break
                    except (OSError, zlib.error) as e:
                        raise ArchiveReadError(
                            f"tar error reading {member.name!r}: {e}",
                            name=member.name,
                        ) from e
                    if not chunk:
                        break
                    out.write(chunk)
                    written += len(chunk)
        except OSError as e:
            raise WriteError(f"error writing to {target}: {e}", path=target) from e

        if written != member.size:
            raise SizeMismatchError(
                f"only wrote {written} bytes to {target}; expected {member.size}",
                path=target,
                written=written,
                expected=member.size,
            ) from truncated

        self._apply_mtime(target, member.mtime, run)
        run.files_extracted += 1

    def _apply_mtime(self, target: str, mtime: float, run: ExtractionRun) -> None:
        # Clamp to the run start; the archive producer's clock may be ahead.
        mtime = min(mtime, run.started_at)
        if not mtime:
            return

        try:
            os.utime(target, (mtime, mtime))
        except OSError as e:
            if not run.logged_mtime_error:
                logger.warning(f"error changing modtime: {e} (further modtime errors suppressed)")
                run.logged_mtime_error = True


def untar(
    stream: BinaryIO,
    dest_dir: Union[str, Path],
    archive_root: str = "",
    **options,
) -> None:
    """Extract a .tar.gz stream into dest_dir.

    Args:
        stream: Readable binary stream of gzip-compressed tar data
        dest_dir: Directory to extract into
        archive_root: Leading prefix removed from every entry name
        **options: Passed to TarGzExtractor

    Raises:
        ArchiveError: On the first failure; see TarGzExtractor.run
    """
    TarGzExtractor(**options).run(stream, dest_dir, archive_root)
