"""Utility functions for file handling and logging."""

from .file_utils import (
    ensure_directory,
    check_contig_consistency
)
from .logging_utils import (
    setup_logging,
    get_logger
)

__all__ = [
    'ensure_directory',
    'check_contig_consistency',
    'setup_logging',
    'get_logger'
]
