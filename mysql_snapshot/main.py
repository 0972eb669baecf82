#!/usr/bin/env python3
"""
MySQL Snapshot - CLI Entry Point
================================
Writes a replayable SQL backup of a MySQL database:
- Table/view selection with prefix patterns and exclusion mode
- Consistent READ lock while the script is written
- Foreign keys deferred to ALTER TABLE statements
- Stored procedures, functions and triggers
- Paginated data dump with batched INSERT statements
- Optional gzip compression or ZIP packaging
"""

import argparse
import logging
import sys

import yaml

from .backup import DatabaseBackup
from .config import ConfigLoader
from .utils import format_elapsed, print_dry_run_info, setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='MySQL Snapshot - SQL backup of a MySQL database'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be backed up without connecting'
    )
    parser.add_argument(
        '--preview',
        action='store_true',
        help='Write the SQL script to stdout instead of a file'
    )
    parser.add_argument(
        '--zip',
        action='store_true',
        help='Package the SQL file into a ZIP archive'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    if args.preview:
        # stdout carries the script
        log_settings.setdefault('stream', sys.stderr)
    setup_logging(log_settings)

    try:
        job = config.build_job()
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if args.dry_run:
        logging.info("DRY RUN MODE - Nothing will be written")
        print_dry_run_info(job)
        sys.exit(0)

    try:
        backup = DatabaseBackup(job)
        if args.preview:
            stats = backup.preview()
        elif args.zip or config.get_output_settings().get('zip', False):
            backup.zip()
            stats = backup.stats
        else:
            stats = backup.run()

        # Print summary
        logging.info("=" * 50)
        logging.info("BACKUP COMPLETE")
        if stats.path:
            logging.info(f"File: {stats.path}")
        logging.info(f"Tables: {len(stats.tables)}")
        logging.info(f"Views: {len(stats.views)}")
        logging.info(f"Routines: {stats.routines}")
        logging.info(f"Triggers: {stats.triggers}")
        logging.info(f"Total Rows: {stats.total_rows}")
        logging.info(f"Elapsed: {format_elapsed(stats.elapsed)}")

    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
