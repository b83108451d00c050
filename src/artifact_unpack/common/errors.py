"""Base error definitions for artifact_unpack packages."""

from typing import Any, Dict


class UnpackError(Exception):
    """Base exception for all artifact_unpack errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context
