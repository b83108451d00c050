"""CLI command for extracting .tar.gz archives."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .extractor import TarGzExtractor
from .config import UntarConfig
from artifact_unpack.common import setup_logging, get_logger, ConfigLoader, LogContext

APP_NAME = "artifact-unpack"

STDIN_ARCHIVE = "-"


def extract_command(
    config: UntarConfig,
    archive: str,
    dest_dir_override: Optional[Path] = None,
    archive_root_override: Optional[str] = None,
) -> int:
    """Extract one archive.

    Args:
        config: Configuration object
        archive: Archive path, or "-" for standard input
        dest_dir_override: Optional override for the destination directory
        archive_root_override: Optional override for the archive root prefix

    Returns:
        Exit code (0 for success)
    """
    logger = get_logger(__package__ or __name__)

    settings = config.extraction
    dest_dir = dest_dir_override if dest_dir_override else Path(settings.dest_dir)
    archive_root = archive_root_override if archive_root_override is not None else settings.archive_root

    extractor = TarGzExtractor(
        unlink_executables=settings.unlink_executables,
        chunk_size=settings.chunk_size,
    )

    with LogContext(logger, archive=archive, dest_dir=str(dest_dir)):
        logger.info(f"Extracting {archive} to {dest_dir}")
        try:
            if archive == STDIN_ARCHIVE:
                extractor.run(sys.stdin.buffer, dest_dir, archive_root)
            else:
                with open(archive, "rb") as stream:
                    extractor.run(stream, dest_dir, archive_root)
        except Exception as e:
            logger.exception(f"Extraction failed: {e}")
            return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the artifact-unpack command."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Safely extract a gzip-compressed tar archive"
    )
    parser.add_argument(
        "archive",
        help="Path to the .tar.gz archive, or '-' to read standard input"
    )
    parser.add_argument(
        "--dest-dir",
        type=Path,
        help="Directory to extract into (overrides config)"
    )
    parser.add_argument(
        "--archive-root",
        help="Leading directory prefix to strip from entry names (overrides config)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )

    args = parser.parse_args(argv)

    loader = ConfigLoader(app_name=APP_NAME, config_class=UntarConfig)
    config = loader.load(defaults_path=args.config)

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        log_file=Path(config.logging.file) if config.logging.file else None,
    )

    return extract_command(
        config=config,
        archive=args.archive,
        dest_dir_override=args.dest_dir,
        archive_root_override=args.archive_root,
    )


if __name__ == "__main__":
    sys.exit(main())
