from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TextIO
from tqdm import tqdm
from ..config import Config
from ..reader.streams import Stream, open_stream
from ..reader.locus_cursor import LocusCursor
from ..utils.file_utils import check_contig_consistency
from ..utils.logging_utils import get_logger, log_tqdm_summary
from .output import OutputManager
from .policy import decide, popcount


logger = get_logger(__name__)


@dataclass
class IsecStats:
    n_streams: int
    loci: int = 0
    retained: int = 0
    skipped: int = 0
    records_read: List[int] = field(default_factory=list)
    records_filtered: List[int] = field(default_factory=list)
    records_written: List[int] = field(default_factory=list)

    def as_dict(self, inputs: Sequence[str] = ()) -> dict:
        stats = {
            "Input files": f"{self.n_streams}",
            "Loci visited": f"{self.loci:,}",
            "Loci retained": f"{self.retained:,}",
            "Loci skipped": f"{self.skipped:,}",
        }
        for i, path in enumerate(inputs):
            read = self.records_read[i] if i < len(self.records_read) else 0
            written = self.records_written[i] if i < len(self.records_written) else 0
            stats[f"[{i:04d}] {path}"] = f"{read:,} read, {written:,} written"
        return stats


def open_streams(config: Config, stack: ExitStack) -> List[Stream]:
    """Open every input in argument order; each is closed when the stack unwinds."""
    streams = []
    for index, path in enumerate(config.inputs):
        stream = open_stream(path, index, apply_filters=config.apply_filters, region=config.region)
        streams.append(stack.enter_context(stream))
    return streams


def run_isec(config: Config, argv: Optional[Sequence[str]] = None,
             stdout: Optional[TextIO] = None) -> IsecStats:
    """
    Walk all inputs locus by locus, keep the loci whose membership count
    satisfies the set operation and route them to the report and sinks.
    """
    with ExitStack() as stack:
        streams = open_streams(config, stack)
        check_contig_consistency(streams)
        cursor = LocusCursor(streams, config.collapse)
        stats = IsecStats(n_streams=len(streams))
        logger.info(f"Operation: {config.operation.kind.name} {config.operation.n}, "
                    f"collapse: {config.collapse.value}")

        with OutputManager(config, streams, argv=argv, stdout=stdout) as outputs:
            router = outputs.router()
            with tqdm(desc="Scanning loci", unit="loci") as pbar:
                for bitmask, locus, records in cursor:
                    stats.loci += 1
                    pbar.update(1)
                    if not decide(popcount(bitmask), len(streams), config.operation,
                                  legacy=config.legacy_nfiles):
                        stats.skipped += 1
                        continue
                    router.route(locus, bitmask, records)
                    stats.retained += 1
                log_tqdm_summary(pbar, logger)
            stats.records_written = list(router.records_written)

        stats.records_read = [stream.records_read for stream in streams]
        stats.records_filtered = [stream.records_filtered for stream in streams]
        if config.apply_filters:
            for stream in streams:
                logger.info(f"{stream.path}: {stream.records_filtered:,} non-PASS records skipped")
    return stats
