"""Pytest fixtures for variant_isec tests."""

from pathlib import Path
from typing import Callable, Iterable, Sequence, Tuple

import pysam
import pytest

HEADER = (
    "##fileformat=VCFv4.2\n"
    '##FILTER=<ID=PASS,Description="All filters passed">\n'
    '##FILTER=<ID=LowQual,Description="Low quality">\n'
)
COLUMNS = "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"


def vcf_text(records: Iterable[Tuple], contigs: Sequence[str] = ("1", "2")) -> str:
    """Build VCF text from (chrom, pos, ref, alt[, filter]) tuples."""
    lines = [HEADER]
    lines.extend(f"##contig=<ID={contig},length=1000000>\n" for contig in contigs)
    lines.append(COLUMNS)
    for record in records:
        chrom, pos, ref, alt = record[:4]
        filt = record[4] if len(record) > 4 else "PASS"
        lines.append(f"{chrom}\t{pos}\t.\t{ref}\t{alt}\t50\t{filt}\t.\n")
    return "".join(lines)


def read_positions(path) -> list:
    """Return (chrom, pos, ref, alts) for every record of a VCF/BCF file."""
    with pysam.VariantFile(str(path)) as vcf:
        return [(rec.chrom, rec.pos, rec.ref, tuple(rec.alts or ())) for rec in vcf]


@pytest.fixture
def write_vcf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an uncompressed VCF into tmp_path."""

    def _write(name: str, records: Iterable[Tuple], contigs: Sequence[str] = ("1", "2")) -> Path:
        path = tmp_path / name
        path.write_text(vcf_text(records, contigs))
        return path

    return _write


@pytest.fixture
def write_indexed_vcf(write_vcf) -> Callable[..., Path]:
    """Factory writing a bgzipped, tabix-indexed VCF."""

    def _write(name: str, records: Iterable[Tuple], contigs: Sequence[str] = ("1", "2")) -> Path:
        plain = write_vcf(name, records, contigs)
        return Path(pysam.tabix_index(str(plain), preset="vcf", force=True))

    return _write


@pytest.fixture
def pair_ab(write_vcf) -> Tuple[Path, Path]:
    """A has loci 100, 200, 300 and B has 200, 300, 400 on contig 1."""
    a = write_vcf("A.vcf", [("1", 100, "A", "G"), ("1", 200, "C", "T"), ("1", 300, "G", "A")])
    b = write_vcf("B.vcf", [("1", 200, "C", "T"), ("1", 300, "G", "A"), ("1", 400, "T", "C")])
    return a, b


@pytest.fixture
def trio(write_vcf) -> Tuple[Path, Path, Path]:
    """Three inputs with loci shared by one, two or all three files."""
    a = write_vcf("A.vcf", [("1", 100, "A", "G"), ("1", 200, "C", "T"), ("2", 50, "G", "C")])
    b = write_vcf("B.vcf", [("1", 200, "C", "T"), ("1", 300, "G", "A"), ("2", 50, "G", "C")])
    c = write_vcf("C.vcf", [("1", 300, "G", "A"), ("2", 50, "G", "C"), ("2", 80, "T", "A")])
    return a, b, c
