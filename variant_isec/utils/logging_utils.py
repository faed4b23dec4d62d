import sys
import logging
import datetime
from pathlib import Path
from typing import Optional

# Warnings and errors seen during the run, replayed in the final summary
captured_logs = []

class WarningErrorCaptureHandler(logging.Handler):
    def emit(self, record):
        if record.levelno >= logging.WARNING:
            captured_logs.append(self.format(record))

def log_all_warnings_and_errors():
    logger = logging.getLogger()
    if captured_logs:
        logger.info("")
        logger.info("Summary of Warnings and Errors:")
        for msg in captured_logs:
            logger.info(f"  - {msg}")

def log_tqdm_summary(pbar, logger):
    d = pbar.format_dict
    desc = pbar.desc or "Task"
    minutes = int(d["elapsed"] // 60)
    seconds = int(d["elapsed"] % 60)
    logger.info(f"{desc} completed: {d['n']:,} {d['unit']} processed in {minutes}m {seconds}s.")

def setup_logging(log_file: Optional[Path] = None):
    """Setup logging with a stderr console, an optional log file and the warning cache.

    The console writes to stderr because stdout carries the sites report
    when no output directory is given.
    """
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    captured_logs.clear()
    logger.setLevel(logging.INFO)

    formatter = logging.Formatter('%(message)s')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    capture_handler = WarningErrorCaptureHandler()
    capture_handler.setLevel(logging.WARNING)
    capture_handler.setFormatter(formatter)
    logger.addHandler(capture_handler)

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)

def log_step(title: str, width: int = 80, style: str = "box"):
    logger = logging.getLogger()
    if style == "box":
        text = f"[ {title} ]"
        side = (width - len(text)) // 2
        line = "═" * side + text + "═" * (width - len(text) - side)
        logger.info(line)
    elif style == "flat":
        logger.info("=" * width)
        logger.info(f"[ {title} ]")
        logger.info("-" * width)

def get_clean_command(argv=None) -> str:
    argv = list(sys.argv if argv is None else argv)
    program = Path(argv[0]).name if argv else "varisec"
    args = argv[1:]

    if not args:
        return f"Command:\n  {program}"

    # Pair each option with its value, e.g. ["-n", "=2"]; bare paths stay alone
    grouped = []
    i = 0
    while i < len(args):
        if args[i].startswith("-") and i + 1 < len(args) and not args[i + 1].startswith("-"):
            grouped.append((args[i], args[i + 1]))
            i += 2
        else:
            grouped.append((args[i], None))
            i += 1

    lines = [f"  {program} {args[0]}"]
    max_flag_len = max(len(flag) for flag, _ in grouped[1:]) if len(grouped) > 1 else 0

    for flag, val in grouped[1:]:
        if val is not None:
            lines.append(f"  {flag.ljust(max_flag_len)}   {val}")
        else:
            lines.append(f"  {flag}")

    return "\n".join(lines)


def log_summary_block(cmd: str, start: float, duration: float, stats: dict):

    end_time = datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    runtime_str = f"{int(duration // 3600)}:{int(duration % 3600 // 60):02d}:{int(duration % 60):02d}"
    start_time_str = datetime.datetime.fromtimestamp(start).strftime('%Y-%m-%d %H:%M:%S')
    logger = get_logger(__name__)
    logger.info(f"{'Command:':<5}{cmd}")
    logger.info(f"{'Start time:':<30}{start_time_str}")
    logger.info(f"{'End time:':<30}{end_time}")
    logger.info(f"{'Total runtime:':<30}{runtime_str}")
    logger.info('')

    for k, v in stats.items():
        logger.info(f"{k + ':':<30}{v}")
