"""Tests for opening streams and advancing loci across them."""

from contextlib import ExitStack

import pytest

from variant_isec.config import CollapsePolicy, parse_region
from variant_isec.exceptions import DataError, InputError
from variant_isec.reader.locus_cursor import Locus, LocusCursor, merge_contig_ranks
from variant_isec.reader.streams import open_stream


def walk(paths, collapse=CollapsePolicy.NONE, **kwargs):
    """Return [(bitmask, (chrom, pos), [alts or None per stream])] for the inputs."""
    with ExitStack() as stack:
        streams = [stack.enter_context(open_stream(str(p), i, **kwargs)) for i, p in enumerate(paths)]
        steps = []
        for bitmask, locus, records in LocusCursor(streams, collapse):
            alleles = [None if r is None else (r.ref, tuple(r.alts or ())) for r in records]
            steps.append((bitmask, (locus.contig, locus.pos), alleles))
        return steps


class TestOpenStream:
    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(InputError, match="Failed to open VCF file"):
            open_stream(str(tmp_path / "nope.vcf"), 0)

    def test_region_requires_index(self, pair_ab) -> None:
        with pytest.raises(InputError, match="index"):
            open_stream(str(pair_ab[0]), 0, region=parse_region("1:1-500"))

    def test_next_record_until_exhausted(self, pair_ab) -> None:
        with open_stream(str(pair_ab[0]), 0) as stream:
            positions = []
            while True:
                record = stream.next_record()
                if record is None:
                    break
                positions.append(record.pos)
            assert positions == [100, 200, 300]
            assert stream.exhausted
            assert stream.next_record() is None
            assert stream.records_read == 3
            assert stream.contigs == ["1", "2"]


class TestLocusCursor:
    def test_partial_overlap(self, pair_ab) -> None:
        steps = walk(pair_ab)
        assert [(mask, locus) for mask, locus, _ in steps] == [
            (0b01, ("1", 100)),
            (0b11, ("1", 200)),
            (0b11, ("1", 300)),
            (0b10, ("1", 400)),
        ]

    def test_records_absent_from_stream_are_none(self, pair_ab) -> None:
        steps = walk(pair_ab)
        assert steps[0][2] == [("A", ("G",)), None]
        assert steps[3][2] == [None, ("T", ("C",))]

    def test_bitmask_never_empty(self, trio) -> None:
        steps = walk(trio)
        assert all(mask != 0 for mask, _, _ in steps)
        assert [locus for _, locus, _ in steps] == [
            ("1", 100), ("1", 200), ("1", 300), ("2", 50), ("2", 80)
        ]
        assert [mask for mask, _, _ in steps] == [0b001, 0b011, 0b110, 0b111, 0b100]

    def test_different_alleles_are_distinct_without_collapse(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 100, "A", "G")])
        b = write_vcf("B.vcf", [("1", 100, "A", "T")])
        steps = walk([a, b])
        assert [(mask, locus) for mask, locus, _ in steps] == [(0b01, ("1", 100)), (0b10, ("1", 100))]

    def test_snp_collapse_merges_different_alleles(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 100, "A", "G")])
        b = write_vcf("B.vcf", [("1", 100, "A", "T")])
        steps = walk([a, b], CollapsePolicy.SNPS)
        assert len(steps) == 1
        mask, _, alleles = steps[0]
        assert mask == 0b11
        # each stream keeps its own record
        assert alleles == [("A", ("G",)), ("A", ("T",))]

    def test_snp_collapse_keeps_indels_apart(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 100, "A", "G")])
        b = write_vcf("B.vcf", [("1", 100, "A", "AT")])
        assert len(walk([a, b], CollapsePolicy.SNPS)) == 2
        assert len(walk([a, b], CollapsePolicy.ANY)) == 1

    def test_multiple_records_at_one_position(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 100, "A", "G"), ("1", 100, "A", "AT"), ("1", 150, "C", "T")])
        b = write_vcf("B.vcf", [("1", 100, "A", "AT")])
        steps = walk([a, b])
        assert [(mask, locus, alleles[0]) for mask, locus, alleles in steps] == [
            (0b01, ("1", 100), ("A", ("G",))),
            (0b11, ("1", 100), ("A", ("AT",))),
            (0b01, ("1", 150), ("C", ("T",))),
        ]

    def test_first_stream_supplies_the_key(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 100, "A", "AT")])
        b = write_vcf("B.vcf", [("1", 100, "A", "G"), ("1", 100, "A", "AT")])
        steps = walk([a, b])
        assert steps[0][0] == 0b11
        assert steps[0][2] == [("A", ("AT",)), ("A", ("AT",))]
        assert steps[1][0] == 0b10

    def test_unsorted_positions_raise(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 200, "A", "G"), ("1", 100, "C", "T")])
        b = write_vcf("B.vcf", [("1", 100, "C", "T")])
        with pytest.raises(DataError, match="not sorted"):
            walk([a, b])

    def test_unsorted_contigs_raise(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("2", 10, "A", "G"), ("1", 100, "C", "T")])
        b = write_vcf("B.vcf", [("1", 100, "C", "T")])
        with pytest.raises(DataError):
            walk([a, b])

    def test_apply_filters_skips_non_pass(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [("1", 100, "A", "G", "LowQual"), ("1", 200, "C", "T"), ("1", 300, "G", "A", ".")])
        b = write_vcf("B.vcf", [("1", 100, "A", "G")])
        steps = walk([a, b], apply_filters=True)
        assert [(mask, locus) for mask, locus, _ in steps] == [(0b10, ("1", 100)), (0b01, ("1", 200))]

    def test_region_restricts_loci(self, write_indexed_vcf) -> None:
        a = write_indexed_vcf("A.vcf", [("1", 100, "A", "G"), ("1", 200, "C", "T"), ("2", 5, "G", "A")])
        b = write_indexed_vcf("B.vcf", [("1", 200, "C", "T"), ("1", 400, "T", "C")])
        steps = walk([a, b], region=parse_region("1:150-450"))
        assert [(mask, locus) for mask, locus, _ in steps] == [(0b11, ("1", 200)), (0b10, ("1", 400))]

    def test_advance_after_exhaustion_returns_none(self, pair_ab) -> None:
        with ExitStack() as stack:
            streams = [stack.enter_context(open_stream(str(p), i)) for i, p in enumerate(pair_ab)]
            cursor = LocusCursor(streams)
            assert len(list(cursor)) == 4
            assert cursor.advance() is None


class TestContigRanks:
    def test_merged_order(self, write_vcf) -> None:
        a = write_vcf("A.vcf", [], contigs=("1", "2"))
        b = write_vcf("B.vcf", [], contigs=("1", "3", "2"))
        with open_stream(str(a), 0) as sa, open_stream(str(b), 1) as sb:
            assert merge_contig_ranks([sa, sb]) == {"1": 0, "2": 1, "3": 2}

    def test_locus_ordering(self) -> None:
        assert Locus(0, "1", 500) < Locus(1, "2", 10)
        assert Locus(1, "2", 10) < Locus(1, "2", 11)
