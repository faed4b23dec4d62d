"""Set-operation classification of loci and routing of retained records."""

from .policy import (
    decide,
    popcount
)
from .router import (
    RecordRouter,
    format_site_line
)
from .output import (
    OutputManager,
    build_index
)
from .engine import (
    IsecStats,
    run_isec
)

__all__ = [
    'decide',
    'popcount',
    'RecordRouter',
    'format_site_line',
    'OutputManager',
    'build_index',
    'IsecStats',
    'run_isec'
]
