"""
Utility functions for MySQL Snapshot.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import BackupJob, ShowFlag


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')
    stream = log_settings.get('stream', sys.stdout)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def format_elapsed(seconds: float) -> str:
    """Format a duration as HH:MM:SS.mmm."""
    millis = int(round(seconds * 1000))
    hours, millis = divmod(millis, 3600 * 1000)
    minutes, millis = divmod(millis, 60 * 1000)
    secs, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def format_show_flags(job: BackupJob) -> list[str]:
    """Show flags of a job in their script order."""
    return [flag.value for flag in ShowFlag if job.shows(flag)]


def print_dry_run_info(job: BackupJob) -> None:
    """Print information about what would be backed up in dry-run mode."""
    conn = job.connection
    logging.info(f"Would back up database: {conn.database} from {conn.host}:{conn.port}")
    logging.info(f"  Sections: {', '.join(format_show_flags(job))}")

    table_filter = job.table_filter
    if table_filter.is_empty:
        logging.info("  - All tables and views")
    elif table_filter.is_exclusion:
        logging.info("  - All tables and views except:")
        for entry in table_filter.patterns:
            logging.info(f"    - {entry}")
    else:
        for entry in table_filter.patterns:
            logging.info(f"  - {entry}")

    logging.info(f"  Output: {job.output_path()}")
    logging.info(f"  Page size: {job.page_size}, rows per INSERT: {job.batch_size}")
