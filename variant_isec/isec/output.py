import os
import sys
import pysam
from pathlib import Path
from typing import List, Optional, Sequence, TextIO
from ..config import Config, OutputType
from ..exceptions import OutputError, IndexBuildError
from ..reader.streams import Stream
from ..utils.file_utils import ensure_directory
from ..utils.logging_utils import get_logger
from .router import RecordRouter


logger = get_logger(__name__)

PROGRAM = "varisec"
SITES_NAME = "sites.txt"
README_NAME = "README.txt"


def sink_name(ordinal: int, output_type: OutputType) -> str:
    return f"{ordinal:04d}.{output_type.extension}"


def build_index(path, output_type: OutputType) -> str:
    """Index a finished subset file: tabix (.tbi) for vcf.gz, CSI for BCF."""
    path = str(path)
    try:
        if output_type is OutputType.VCF_GZ:
            pysam.tabix_index(path, preset="vcf", force=True)
            index_path = path + ".tbi"
        else:
            pysam.tabix_index(path, preset="vcf", csi=True, force=True)
            index_path = path + ".csi"
    except Exception as e:
        raise IndexBuildError(f"Could not index {path}: {str(e)}")
    if not os.path.exists(index_path):
        raise IndexBuildError(f"Could not index {path}: {index_path} was not created")
    return index_path


def _open_text(path: Path) -> TextIO:
    try:
        return open(path, "w")
    except OSError as e:
        raise OutputError(f"{path}: {e.strerror or e}")


class OutputManager:
    """
    Own the sites report and, in subsetting mode, the README manifest and one
    sink per input. Use as a context manager: on a clean exit the sinks are
    closed and indexed, on an error they are only closed.
    """

    def __init__(self, config: Config, streams: Sequence[Stream],
                 argv: Optional[Sequence[str]] = None, stdout: Optional[TextIO] = None):
        self.config = config
        self.streams = list(streams)
        self.argv = list(argv) if argv else [PROGRAM]
        self.stdout = stdout
        self.report: Optional[TextIO] = None
        self.readme: Optional[TextIO] = None
        self.sinks: List[pysam.VariantFile] = []
        self.sink_paths: List[Path] = []
        self.index_paths: List[str] = []

    @property
    def prefix(self) -> Optional[Path]:
        return Path(self.config.prefix) if self.config.subsetting else None

    @property
    def sites_path(self) -> Optional[Path]:
        return self.prefix / SITES_NAME if self.config.subsetting else None

    def open(self):
        if not self.config.subsetting:
            self.report = self.stdout or sys.stdout
            return

        prefix = ensure_directory(self.prefix)
        self.readme = _open_text(prefix / README_NAME)
        self.readme.write(f"This file was produced by {PROGRAM}.\n")
        self.readme.write(f"The command line was:\t{' '.join(self.argv)}\n")
        self.readme.write("\nUsing the following file names:\n")

        output_type = self.config.output_type
        for stream in self.streams:
            path = prefix / sink_name(stream.index, output_type)
            self.readme.write(f"{path}\tfor stripped\t{stream.path}\n")
            try:
                sink = pysam.VariantFile(str(path), output_type.write_mode, header=stream.header)
            except Exception as e:
                raise OutputError(f"Could not open {path}: {str(e)}")
            self.sinks.append(sink)
            self.sink_paths.append(path)
            logger.info(f"Subset of {stream.path} -> {path}")

        self.report = _open_text(prefix / SITES_NAME)

    def router(self) -> RecordRouter:
        report_name = str(self.sites_path) if self.config.subsetting else "<stdout>"
        return RecordRouter(self.report, self.sinks, sink_paths=self.sink_paths, report_name=report_name)

    def close(self):
        """Release every handle without indexing."""
        if self.readme is not None:
            self.readme.close()
            self.readme = None
        if self.report is not None:
            if self.config.subsetting:
                self.report.close()
            else:
                self.report.flush()
            self.report = None
        for sink in self.sinks:
            sink.close()
        self.sinks = []

    def finalize(self) -> List[str]:
        """Close everything, then index each subset file."""
        self.close()
        for path in self.sink_paths:
            self.index_paths.append(build_index(path, self.config.output_type))
            logger.info(f"Indexed {path}")
        return self.index_paths

    def __enter__(self):
        try:
            self.open()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.finalize()
        else:
            self.close()
        return False
