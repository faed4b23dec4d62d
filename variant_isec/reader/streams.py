import pysam
from typing import Iterator, List, Optional
from ..config import Region
from ..exceptions import InputError, DataError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


def passes_filters(record) -> bool:
    """True only for records whose FILTER is exactly PASS."""
    return list(record.filter.keys()) == ["PASS"]


class Stream:
    """One sorted input file and the records it still has to offer."""

    def __init__(self, path: str, index: int, vcf: pysam.VariantFile,
                 region: Optional[Region] = None, apply_filters: bool = False):
        self.path = path
        self.index = index
        self.vcf = vcf
        self.region = region
        self.apply_filters = apply_filters
        self.exhausted = False
        self.records_read = 0
        self.records_filtered = 0
        self._records = self._iter_records(self._source())

    @property
    def header(self) -> pysam.VariantHeader:
        return self.vcf.header

    @property
    def contigs(self) -> List[str]:
        return list(self.vcf.header.contigs)

    def _source(self) -> Iterator:
        if self.region is None:
            return iter(self.vcf)
        if self.region.contig not in self.vcf.header.contigs:
            logger.warning(f"{self.path}: contig {self.region.contig} not declared in header; no records in region")
            return iter(())
        try:
            return self.vcf.fetch(*self.region.fetch_args())
        except (ValueError, OSError) as e:
            raise InputError(f"Could not query region {self.region} in {self.path}: {str(e)}")

    def _iter_records(self, records: Iterator) -> Iterator:
        while True:
            try:
                record = next(records)
            except StopIteration:
                return
            except (ValueError, OSError) as e:
                raise DataError(f"Error reading {self.path}: {str(e)}")
            self.records_read += 1
            if self.apply_filters and not passes_filters(record):
                self.records_filtered += 1
                continue
            yield record

    def next_record(self):
        """Return the next record, or None once the stream is exhausted."""
        if self.exhausted:
            return None
        record = next(self._records, None)
        if record is None:
            self.exhausted = True
        return record

    def close(self):
        self.vcf.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return f"Stream({self.index}, {self.path!r})"


def open_stream(path: str, index: int, apply_filters: bool = False,
                region: Optional[Region] = None) -> Stream:
    """Open a sorted VCF/BCF file, optionally restricted to a region."""
    try:
        vcf = pysam.VariantFile(path)
    except Exception as e:
        raise InputError(f"Failed to open VCF file {path}: {str(e)}")

    if region is not None and vcf.index is None:
        vcf.close()
        raise InputError(f"Could not load the index: {path} (required for --region)")

    try:
        return Stream(path, index, vcf, region=region, apply_filters=apply_filters)
    except InputError:
        vcf.close()
        raise
