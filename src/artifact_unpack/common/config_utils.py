"""Configuration utilities."""

import tempfile
import platformdirs
from pathlib import Path


def expand_path_variables(path: str, app_name: str | None = None) -> str:
    """Expand ${VAR} placeholders in configured paths.

    Supported variables:
        ${USER_HOME}: User's home directory
        ${USER_DATA}: User data directory
        ${USER_CACHE}: User cache directory
        ${TEMP}: Temporary directory

    Args:
        path: Path string with variables
        app_name: Application name used to scope the platformdirs directories

    Returns:
        Expanded path string; non-string values are returned unchanged
    """
    if not isinstance(path, str) or "${" not in path:
        return path

    replacements = {
        "${USER_HOME}": lambda: str(Path.home()),
        "${USER_DATA}": lambda: platformdirs.user_data_dir(app_name, appauthor=False),
        "${USER_CACHE}": lambda: platformdirs.user_cache_dir(app_name, appauthor=False),
        "${TEMP}": tempfile.gettempdir,
    }

    for var, resolve in replacements.items():
        if var in path:
            path = path.replace(var, resolve())

    return path
