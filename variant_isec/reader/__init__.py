"""Synchronised reading of sorted VCF/BCF streams."""

from .streams import (
    Stream,
    open_stream,
    passes_filters
)
from .collapse import (
    VariantClass,
    classify,
    records_match
)
from .locus_cursor import (
    Locus,
    LocusCursor
)

__all__ = [
    'Stream',
    'open_stream',
    'passes_filters',
    'VariantClass',
    'classify',
    'records_match',
    'Locus',
    'LocusCursor'
]
