import os
import logging
from pathlib import Path
from typing import Sequence
from ..exceptions import OutputError


def ensure_directory(path) -> Path:
    """Create a directory and any missing parents; existing directories are fine."""
    path = Path(path)
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise OutputError(f"{path}: {e.strerror or e}")
    if not path.is_dir():
        raise OutputError(f"{path}: not a directory")
    return path


def check_contig_consistency(streams: Sequence) -> bool:
    """
    Warn when inputs declare different contig sets or orders. Loci are ordered
    by the merged contig table, so inputs sorted by different contig orders
    will be reported as unsorted while advancing.
    """
    logger = logging.getLogger()
    if not streams:
        return True

    reference = streams[0]
    ref_contigs = list(reference.contigs)
    consistent = True

    for stream in streams[1:]:
        contigs = list(stream.contigs)
        missing = [c for c in ref_contigs if c not in contigs]
        extra = [c for c in contigs if c not in ref_contigs]
        if missing or extra:
            consistent = False
            logger.warning(f"Contig names differ between {reference.path} and {stream.path}:")
            for chrom in missing:
                logger.warning(f"  - {chrom} (declared only in {reference.path})")
            for chrom in extra:
                logger.warning(f"  + {chrom} (declared only in {stream.path})")
            continue

        shared = [c for c in contigs if c in ref_contigs]
        if shared != ref_contigs:
            consistent = False
            logger.warning(f"Contig order differs between {reference.path} and {stream.path}.")

    return consistent
