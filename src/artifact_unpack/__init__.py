"""Safe extraction of gzip-compressed tar archives for artifact deployment."""

__version__ = "0.1.0"
