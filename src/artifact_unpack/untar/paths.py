"""Validation of archive entry names against host path syntax."""

import ntpath
import os
import posixpath
from dataclasses import dataclass
from types import ModuleType

from .errors import (
    AbsolutePathError,
    EmptyPathError,
    ParentTraversalError,
    VolumeRelativePathError,
)


def _windows_isabs(path: str) -> bool:
    """Absolute means a UNC share, or a drive letter followed by a separator."""
    drive, rest = ntpath.splitdrive(path)
    if drive[:2] in ("\\\\", "//"):
        return True
    return bool(drive) and rest[:1] in ("\\", "/")


@dataclass(frozen=True)
class PathStyle:
    """Separator and volume syntax of one host path flavour."""

    name: str
    module: ModuleType

    @property
    def sep(self) -> str:
        return self.module.sep

    def normpath(self, path: str) -> str:
        return self.module.normpath(path)

    def isabs(self, path: str) -> bool:
        if self.module is ntpath:
            return _windows_isabs(path)
        return self.module.isabs(path)

    def volume_name(self, path: str) -> str:
        return self.module.splitdrive(path)[0]

    def from_slash(self, path: str) -> str:
        if self.sep == "/":
            return path
        return path.replace("/", self.sep)

    def join(self, *parts: str) -> str:
        return self.module.join(*parts)

    def is_within(self, root: str, path: str) -> bool:
        """Whether ``path`` is ``root`` or lies beneath it, lexically."""
        root = self.normpath(root)
        try:
            return self.module.commonpath([root, self.normpath(path)]) == root
        except ValueError:
            return False


POSIX_STYLE = PathStyle("posix", posixpath)
WINDOWS_STYLE = PathStyle("windows", ntpath)
NATIVE_STYLE = WINDOWS_STYLE if os.name == "nt" else POSIX_STYLE


def _check_relative(name: str, clean: str, style: PathStyle) -> None:
    if style.isabs(clean):
        raise AbsolutePathError(f"path {name!r} is not relative", name=name)
    if clean == ".." or clean.startswith(".." + style.sep):
        raise ParentTraversalError(f"path {name!r} refers to a parent directory", name=name)


def validate_entry_name(name: str, style: PathStyle = NATIVE_STYLE) -> str:
    """Check that an archive entry name is a safe relative path.

    Archives use forward slashes regardless of the producing platform, but
    names built on Windows may carry backslashes. Names containing the host's
    own separator are checked with host rules; everything else is checked
    with slash rules and then converted to host separators. Normalisation
    is used only for detection, so ``a/./b`` comes back as ``a/./b``.

    Args:
        name: Raw entry name as stored in the archive
        style: Host path flavour to validate against

    Returns:
        The name using the host's native separator

    Raises:
        EmptyPathError: If name is empty
        AbsolutePathError: If name is absolute
        ParentTraversalError: If name resolves to a parent directory
        VolumeRelativePathError: If name carries a drive or is rooted on the
            current volume (``C:foo``, ``\\windows``)
    """
    if not name:
        raise EmptyPathError("path not provided", name=name)

    if style.sep != "/" and style.sep in name:
        clean = style.normpath(name)
        _check_relative(name, clean, style)
        if name.startswith(style.sep) or style.volume_name(clean):
            raise VolumeRelativePathError(f"path {name!r} is relative to volume", name=name)
        return name

    _check_relative(name, posixpath.normpath(name), POSIX_STYLE)
    native = style.from_slash(name)
    if style.volume_name(native):
        raise VolumeRelativePathError(f"path {name!r} begins with a native volume name", name=name)
    return native
