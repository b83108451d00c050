"""Extraction-specific errors."""

from artifact_unpack.common import UnpackError


class PathValidationError(UnpackError):
    """Archive entry name is not a safe relative path."""
    pass


class EmptyPathError(PathValidationError):
    """Entry name is empty."""
    pass


class AbsolutePathError(PathValidationError):
    """Entry name is an absolute path."""
    pass


class ParentTraversalError(PathValidationError):
    """Entry name refers to a parent of the destination directory."""
    pass


class VolumeRelativePathError(PathValidationError):
    """Entry name carries a volume qualifier or is rooted on the current volume."""
    pass


class ArchiveError(UnpackError):
    """Archive processing failed."""
    pass


class InvalidCompressionError(ArchiveError):
    """Input is not a valid gzip stream."""
    pass


class ArchiveReadError(ArchiveError):
    """Tar container is corrupt or truncated."""
    pass


class InvalidEntryNameError(ArchiveError):
    """An entry name failed validation or escapes the destination directory."""
    pass


class SizeMismatchError(ArchiveError):
    """Bytes written for a regular file differ from its declared size."""
    pass


class UnsupportedEntryTypeError(ArchiveError):
    """Entry is neither a regular file, a directory nor a symlink."""
    pass


class ExtractionError(ArchiveError):
    """Filesystem operation failed while materialising an entry."""
    pass


class CreateError(ExtractionError):
    """Failed to create a file or directory."""
    pass


class WriteError(ExtractionError):
    """Failed to write or close an extracted file."""
    pass
