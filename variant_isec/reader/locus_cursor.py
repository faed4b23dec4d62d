from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from ..config import CollapsePolicy
from ..exceptions import DataError
from .collapse import records_match
from .streams import Stream


@dataclass(frozen=True, order=True)
class Locus:
    rank: int
    contig: str
    pos: int

    def __str__(self):
        return f"{self.contig}:{self.pos}"


def merge_contig_ranks(streams: Sequence[Stream]) -> Dict[str, int]:
    """
    Merge the contig tables of all headers into one ordering: the first file's
    order, then contigs only declared by later files in their own order.
    """
    ranks = {}
    for stream in streams:
        for contig in stream.contigs:
            if contig not in ranks:
                ranks[contig] = len(ranks)
    return ranks


class LocusCursor:
    """
    Walk N sorted streams in lockstep, one locus at a time.

    Each stream keeps the group of records sharing its smallest pending
    position. A locus is built from the first record at the globally smallest
    position (lowest stream index wins) plus, from every other stream, the
    first record at that position that the collapse policy considers the same
    site. Records left over at that position become later loci.
    """

    def __init__(self, streams: Sequence[Stream], collapse: CollapsePolicy = CollapsePolicy.NONE):
        self.streams = list(streams)
        self.collapse = collapse
        self.ranks = merge_contig_ranks(self.streams)
        self._pending: List[deque] = [deque() for _ in self.streams]
        self._heads: List[Optional[object]] = [None] * len(self.streams)
        self._started = [False] * len(self.streams)

    def _rank(self, contig: str) -> int:
        if contig not in self.ranks:
            self.ranks[contig] = len(self.ranks)
        return self.ranks[contig]

    def locus_of(self, record) -> Locus:
        return Locus(self._rank(record.chrom), record.chrom, record.pos)

    def _read(self, i: int):
        record = self.streams[i].next_record()
        self._started[i] = True
        return record

    def _fill(self, i: int):
        """Load the next same-position group of stream i if it has none."""
        group = self._pending[i]
        if group:
            return
        head = self._heads[i] if self._started[i] else self._read(i)
        if head is None:
            return

        locus = self.locus_of(head)
        group.append(head)
        while True:
            record = self._read(i)
            if record is None:
                self._heads[i] = None
                return
            next_locus = self.locus_of(record)
            if next_locus == locus:
                group.append(record)
                continue
            if next_locus < locus:
                raise DataError(
                    f"{self.streams[i].path} is not sorted: {next_locus} follows {locus}"
                )
            self._heads[i] = record
            return

    def advance(self) -> Optional[Tuple[int, Locus, List]]:
        """
        Return (bitmask, locus, records) for the next locus, where records[i]
        is stream i's record there or None. Returns None once exhausted.
        """
        for i in range(len(self.streams)):
            self._fill(i)

        loci = [self.locus_of(group[0]) if group else None for group in self._pending]
        present = [locus for locus in loci if locus is not None]
        if not present:
            return None
        current = min(present)

        key_stream = loci.index(current)
        key = self._pending[key_stream][0]

        bitmask = 0
        records = [None] * len(self.streams)
        for i, group in enumerate(self._pending):
            if loci[i] != current:
                continue
            for j, record in enumerate(group):
                if record is key or records_match(key, record, self.collapse):
                    del group[j]
                    records[i] = record
                    bitmask |= 1 << i
                    break
        return bitmask, current, records

    def __iter__(self):
        while True:
            step = self.advance()
            if step is None:
                return
            yield step
