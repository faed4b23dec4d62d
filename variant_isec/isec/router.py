from typing import List, Optional, Sequence, TextIO
from ..exceptions import OutputError


def format_site_line(record) -> str:
    """Tab-separated CHROM, POS, REF and comma-joined ALTs; absent alleles are '.'"""
    ref = record.ref if record.ref else "."
    alts = record.alts or ()
    alt = ",".join(alts) if alts else "."
    return f"{record.chrom}\t{record.pos}\t{ref}\t{alt}\n"


class RecordRouter:
    """Write retained loci to the sites report and to each contributing stream's sink."""

    def __init__(self, report: TextIO, sinks: Optional[Sequence] = None,
                 sink_paths: Optional[Sequence] = None, report_name: str = "<report>"):
        self.report = report
        self.sinks = list(sinks) if sinks else []
        self.sink_paths = [str(p) for p in sink_paths] if sink_paths else [f"<sink {i}>" for i in range(len(self.sinks))]
        self.report_name = report_name
        self.sites_written = 0
        self.records_written = [0] * len(self.sinks)

    def route(self, locus, bitmask: int, records: List):
        representative = next(
            (record for i, record in enumerate(records) if bitmask & (1 << i)), None
        )
        if representative is None:
            raise ValueError(f"No contributing record at {locus}")

        try:
            self.report.write(format_site_line(representative))
        except (OSError, ValueError) as e:
            raise OutputError(f"Could not write to {self.report_name}: {str(e)}")
        self.sites_written += 1

        # Each sink gets its own stream's record so its header stays consistent
        for i, sink in enumerate(self.sinks):
            if bitmask & (1 << i):
                try:
                    sink.write(records[i])
                except (OSError, ValueError) as e:
                    raise OutputError(f"Could not write to {self.sink_paths[i]}: {str(e)}")
                self.records_written[i] += 1
