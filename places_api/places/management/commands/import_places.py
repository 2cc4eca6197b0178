"""
Management command to import places from `;`-delimited CSV files.

Usage:
    python manage.py import_places <path ...>
    python manage.py import_places data/*.csv --dry-run
    python manage.py import_places data/ --batch-size 100 --verbose
"""

import glob
import logging
import time
from pathlib import Path
from typing import List

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError, CommandParser

from places.services import IngestError, IngestReport, StorageError, ingest_places

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Management command to import places CSV files.
    """

    help = "Import places from ;-delimited CSV files"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.stats = {
            "files_seen": 0,
            "files_processed": 0,
            "files_failed": 0,
            "records_total": 0,
            "records_ok": 0,
            "records_failed": 0,
            "overrides": 0,
            "batches": 0,
        }
        self.start_time = None
        self.dry_run = False
        self.batch_size = settings.PLACES_UPLOAD_BATCH_SIZE
        self.stop_on_error = False
        self.verbose = False

    def add_arguments(self, parser: CommandParser) -> None:
        """
        Add command line arguments.
        """
        parser.add_argument(
            "paths",
            nargs="+",
            type=str,
            help="File paths, directory paths, or glob patterns to import",
        )

        parser.add_argument(
            "--dry-run",
            action="store_true",
            default=False,
            help="Validate only, do not write to the database",
        )

        parser.add_argument(
            "--batch-size",
            type=int,
            default=settings.PLACES_UPLOAD_BATCH_SIZE,
            help="Number of records per upsert batch",
        )

        parser.add_argument(
            "--stop-on-error",
            action="store_true",
            default=False,
            help="Stop at the first file that cannot be imported",
        )

        parser.add_argument(
            "--verbose",
            action="store_true",
            default=False,
            help="Enable verbose debug logging and per-row failure output",
        )

    def handle(self, *args, **options) -> None:
        """
        Main command handler.
        """
        self.start_time = time.time()
        self.dry_run = options["dry_run"]
        self.batch_size = options["batch_size"]
        self.stop_on_error = options["stop_on_error"]
        self.verbose = options["verbose"]

        if self.batch_size < 1:
            raise CommandError("--batch-size must be a positive integer")

        if self.verbose:
            logging.getLogger("places").setLevel(logging.DEBUG)
            self.stdout.write("Verbose logging enabled")

        if self.dry_run:
            self.stdout.write(
                self.style.WARNING("DRY RUN MODE - No data will be saved")
            )

        files_to_process = self._discover_files(options["paths"])

        if not files_to_process:
            self.stdout.write(self.style.ERROR("No files found to process"))
            return

        self.stdout.write(f"Found {len(files_to_process)} files to process")

        for file_path in files_to_process:
            try:
                self._process_file(file_path)
            except IngestError as e:
                self.stats["files_failed"] += 1
                logger.error(f"Error importing {file_path}: {e}")
                self.stdout.write(self.style.ERROR(f"Error processing {file_path}: {e}"))
                if self.stop_on_error or isinstance(e, StorageError):
                    self._print_summary()
                    raise CommandError(f"Import stopped at {file_path}: {e}") from e

        self._print_summary()

    def _discover_files(self, paths: List[str]) -> List[Path]:
        """
        Discover all CSV files from paths, directories and globs.
        """
        files_to_process = []

        for path_str in paths:
            path = Path(path_str)

            if "*" in path_str or "?" in path_str:
                for glob_file in sorted(glob.glob(path_str, recursive=True)):
                    file_path = Path(glob_file)
                    if file_path.is_file():
                        files_to_process.append(file_path)

            elif path.is_file():
                files_to_process.append(path)

            elif path.is_dir():
                files_to_process.extend(
                    file_path for file_path in sorted(path.rglob("*")) if file_path.is_file()
                )

            else:
                self.stdout.write(self.style.WARNING(f"Path not found: {path_str}"))

        self.stats["files_seen"] = len(files_to_process)

        supported_files = []
        for file_path in files_to_process:
            if file_path.suffix.lower() == ".csv":
                supported_files.append(file_path)
            else:
                logger.info(f"Skipping unsupported file type: {file_path}")

        return supported_files

    def _process_file(self, file_path: Path) -> None:
        """
        Run the ingestion pipeline over one file.
        """
        self.stdout.write(f"Processing: {file_path}")

        report = ingest_places(
            file_path.read_bytes(),
            batch_size=self.batch_size,
            dry_run=self.dry_run,
            source=str(file_path),
        )

        self.stats["files_processed"] += 1
        self.stats["records_total"] += report.total_records
        self.stats["records_ok"] += report.success_records
        self.stats["records_failed"] += report.failed_records
        self.stats["overrides"] += report.override_records
        self.stats["batches"] += report.batches

        self._print_file_report(file_path, report)

    def _print_file_report(self, file_path: Path, report: IngestReport) -> None:
        self.stdout.write(
            f"  {report.total_records} rows: {report.success_records} ok, "
            f"{report.override_records} overrides, {report.failed_records} failed"
        )
        if self.verbose:
            for failure in report.failed_details:
                self.stdout.write(f"  FAILED {failure.code}: {failure.error}")

    def _print_summary(self) -> None:
        """
        Print a formatted summary table of the import operation.
        """
        duration = time.time() - self.start_time

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(self.style.SUCCESS("PLACES IMPORT SUMMARY"))
        self.stdout.write("=" * 60)

        self.stdout.write(f"Files seen:       {self.stats['files_seen']}")
        self.stdout.write(f"Files processed:  {self.stats['files_processed']}")
        self.stdout.write(f"Files failed:     {self.stats['files_failed']}")

        self.stdout.write(f"\nRows read:        {self.stats['records_total']}")
        self.stdout.write(f"Rows accepted:    {self.stats['records_ok']}")
        self.stdout.write(f"Rows failed:      {self.stats['records_failed']}")

        if not self.dry_run:
            self.stdout.write(f"\nOverrides:        {self.stats['overrides']}")
            self.stdout.write(f"Batches written:  {self.stats['batches']}")
        else:
            self.stdout.write(
                f"\n{self.style.WARNING('DRY RUN - No database changes made')}"
            )

        self.stdout.write(f"\nDuration:         {duration:.2f} seconds")
        self.stdout.write("=" * 60)

        if self.stats["files_failed"] or self.stats["records_failed"]:
            self.stdout.write(
                self.style.WARNING(
                    f"Import completed with {self.stats['files_failed']} failed files "
                    f"and {self.stats['records_failed']} failed rows. "
                    "Check logs for details."
                )
            )
        else:
            self.stdout.write(self.style.SUCCESS("Import completed successfully!"))
