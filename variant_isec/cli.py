import sys
import time
import click
import datetime
from pathlib import Path
from .config import Config, CollapsePolicy, OutputType, SetOperation, parse_region
from .exceptions import ConfigError, VariantIsecError
from .isec.engine import run_isec
from .utils.file_utils import ensure_directory
from .utils.logging_utils import *


logger = get_logger(__name__)


def _parse_nfiles(ctx, param, value):
    if value is None:
        return None
    try:
        return SetOperation.parse(value)
    except ConfigError as e:
        raise click.BadParameter(str(e))

def _parse_region(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_region(value)
    except ConfigError as e:
        raise click.BadParameter(str(e))

@click.group()
def cli():
    """Create intersections, unions and complements of sorted VCF/BCF files."""
    pass

@cli.command("isec")
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('-c', '--collapse', type=click.Choice([p.value for p in CollapsePolicy]), default='none',
              show_default=True, help='Treat as identical sites with differing alleles for <snps|indels|both|any>')
@click.option('-f', '--apply-filters', is_flag=True, help='Skip records where FILTER is other than PASS')
@click.option('-n', '--nfiles', required=True, callback=_parse_nfiles,
              help='Output positions present in this many (=), this many or more (+), or this many or fewer (-) files, e.g. +2')
@click.option('-p', '--prefix', default=None, help='If given, subset each of the input files into this directory')
@click.option('-r', '--region', default=None, callback=_parse_region, help='Restrict to chr or chr:from-to (inputs must be indexed)')
@click.option('-O', '--output-type', type=click.Choice([t.value for t in OutputType]), default='z',
              show_default=True, help='Subset file type: z for bgzipped VCF, b for BCF')
@click.option('--legacy-nfiles', is_flag=True, help='Historical rules: "=" keeps sites present in every file; "+" and "-" keep every site')
@click.option('--log-file', default=None, help='Log file (default: <prefix>/isec.log when --prefix is given)')
def isec(files, collapse, apply_filters, nfiles, prefix, region, output_type, legacy_nfiles, log_file):
    """Classify loci of FILES by how many files contain them."""
    if len(files) < 2:
        raise click.UsageError(f"At least two input files are required, got {len(files)}")
    try:
        config = Config(
            inputs=tuple(files),
            operation=nfiles,
            collapse=CollapsePolicy(collapse),
            apply_filters=apply_filters,
            prefix=prefix,
            region=region,
            output_type=OutputType(output_type),
            legacy_nfiles=legacy_nfiles,
        )
    except ConfigError as e:
        raise click.UsageError(str(e))

    setup_logging()
    try:
        if log_file is None and prefix is not None:
            log_file = Path(ensure_directory(prefix)) / "isec.log"
        setup_logging(Path(log_file) if log_file else None)

        logger.info(f"{'Command:':<5}{get_clean_command()}")
        start_time = time.time()
        logger.info(f"Start time: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        log_step("Classifying loci")
        stats = run_isec(config, argv=sys.argv)
        if prefix is not None:
            logger.info(f"Sites and subsets saved in {prefix}")

        runtime = time.time() - start_time
        log_step("Summary")
        log_summary_block(
            cmd=get_clean_command(),
            start=start_time,
            duration=runtime,
            stats=stats.as_dict(config.inputs))
        log_all_warnings_and_errors()
    except VariantIsecError as e:
        logger.error(f"Error in isec: {str(e)}")
        raise click.Abort()


if __name__ == "__main__":
    cli()
