"""Safe extraction of .tar.gz streams."""

from .errors import (
    PathValidationError, EmptyPathError, AbsolutePathError,
    ParentTraversalError, VolumeRelativePathError,
    ArchiveError, InvalidCompressionError, ArchiveReadError,
    InvalidEntryNameError, SizeMismatchError, UnsupportedEntryTypeError,
    ExtractionError, CreateError, WriteError,
)
from .paths import PathStyle, POSIX_STYLE, WINDOWS_STYLE, NATIVE_STYLE, validate_entry_name
from .extractor import TarGzExtractor, ExtractionRun, requires_executable_unlink, untar

__all__ = [
    'PathValidationError',
    'EmptyPathError',
    'AbsolutePathError',
    'ParentTraversalError',
    'VolumeRelativePathError',
    'ArchiveError',
    'InvalidCompressionError',
    'ArchiveReadError',
    'InvalidEntryNameError',
    'SizeMismatchError',
    'UnsupportedEntryTypeError',
    'ExtractionError',
    'CreateError',
    'WriteError',
    'PathStyle',
    'POSIX_STYLE',
    'WINDOWS_STYLE',
    'NATIVE_STYLE',
    'validate_entry_name',
    'TarGzExtractor',
    'ExtractionRun',
    'requires_executable_unlink',
    'untar',
]
