import os
import re
from enum import Enum
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple
from .exceptions import ConfigError


class OpKind(Enum):
    EQUAL = "="
    AT_LEAST = "+"
    AT_MOST = "-"


class CollapsePolicy(Enum):
    """Which records at the same position count as the same site"""
    NONE = "none"
    SNPS = "snps"
    INDELS = "indels"
    BOTH = "both"
    ANY = "any"


class OutputType(Enum):
    VCF_GZ = "z"
    BCF = "b"

    @property
    def extension(self) -> str:
        return "vcf.gz" if self is OutputType.VCF_GZ else "bcf"

    @property
    def write_mode(self) -> str:
        return "wz" if self is OutputType.VCF_GZ else "wb"


@dataclass(frozen=True)
class SetOperation:
    kind: OpKind
    n: int

    @classmethod
    def parse(cls, text: str) -> "SetOperation":
        """
        Parse the --nfiles syntax: an optional leading '+', '-' or '='
        followed by an integer. Bare digits mean '='.
        """
        match = re.fullmatch(r"([+=-]?)(\d+)", text.strip() if text else "")
        if match is None:
            raise ConfigError(f"Could not parse --nfiles {text}")
        kind = OpKind(match.group(1)) if match.group(1) else OpKind.EQUAL
        return cls(kind=kind, n=int(match.group(2)))

    def __str__(self):
        return f"{self.kind.value}{self.n}"


class Region(NamedTuple):
    contig: str
    start: Optional[int] = None
    stop: Optional[int] = None

    def fetch_args(self) -> Tuple[str, Optional[int], Optional[int]]:
        """Arguments for VariantFile.fetch (0-based, half-open)"""
        start = self.start - 1 if self.start is not None else None
        return self.contig, start, self.stop

    def __str__(self):
        if self.start is None:
            return self.contig
        if self.stop is None:
            return f"{self.contig}:{self.start}"
        return f"{self.contig}:{self.start}-{self.stop}"


def parse_region(text: str) -> Region:
    """Parse 'chr', 'chr:from' or 'chr:from-to' (1-based, inclusive)."""
    match = re.fullmatch(r"([^:\s]+)(?::([\d,]+)(?:-([\d,]+))?)?", text.strip())
    if match is None:
        raise ConfigError(f"Could not parse region: {text}")
    contig, start, stop = match.groups()
    start = int(start.replace(",", "")) if start else None
    stop = int(stop.replace(",", "")) if stop else None
    if start is not None and start < 1:
        raise ConfigError(f"Region start must be >= 1: {text}")
    if stop is not None and stop < start:
        raise ConfigError(f"Region end precedes start: {text}")
    return Region(contig, start, stop)


@dataclass(frozen=True)
class Config:
    """Configuration for a single intersection run"""
    inputs: Tuple[str, ...]
    operation: SetOperation
    collapse: CollapsePolicy = CollapsePolicy.NONE
    apply_filters: bool = False
    prefix: Optional[str] = None
    region: Optional[Region] = None
    output_type: OutputType = OutputType.VCF_GZ
    legacy_nfiles: bool = False

    def __post_init__(self):
        """Validate inputs; nothing is created on disk here"""
        if len(self.inputs) < 2:
            raise ConfigError(f"At least two input files are required, got {len(self.inputs)}")
        for path in self.inputs:
            if not os.path.exists(path):
                raise ConfigError(f"VCF file not found: {path}")

    @property
    def subsetting(self) -> bool:
        return self.prefix is not None
