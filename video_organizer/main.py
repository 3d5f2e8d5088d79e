"""
Main entry point for the Video Organizer application.

This module orchestrates the filing process: content addressing, tag
extraction, device classification, field normalization, place lookup and
copying into the target tree.
"""

import argparse
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import load_config
from .content_address import address_of
from .devices import classify
from .exceptions import OrganizerError, UsageError
from .file_organizer import FileOrganizer, scan_paths
from .geocoder import Geocoder, GoogleGeocodeClient, RateLimiter
from .logger import Logger
from .metadata_extractor import MetadataExtractor
from .models import FileRecord
from .normalizers import DEFAULT_UTC_OFFSET, normalize


class FileOutcome(Enum):
    FILED = "filed"
    ALREADY_FILED = "already_filed"


@dataclass
class RunSummary:
    """Per-run counters and the list of failed files."""

    total_files: int = 0
    filed: List[str] = field(default_factory=list)
    already_filed: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class VideoOrganizer:
    """
    Files videos into a date and place keyed directory tree.

    Files are handled one at a time in the order given. Any OrganizerError
    aborts the run unless ``keep_going`` is set, in which case the failure
    is recorded and the next file is processed.
    """

    def __init__(self, extractor, geocoder: Geocoder, file_organizer: FileOrganizer,
                 default_offset: str = DEFAULT_UTC_OFFSET, keep_going: bool = False,
                 logger: Optional[Logger] = None, show_progress: bool = True):
        """
        Initialize the video organizer.

        Args:
            extractor: Object with ``extract_tags(path) -> dict``
            geocoder: Place lookup
            file_organizer: Target tree
            default_offset: UTC offset for timestamps that carry none
            keep_going: Record per-file errors instead of aborting
            logger: Logging helper; a non-configuring one is created if omitted
            show_progress: Whether to draw a progress bar
        """
        self.logger = logger or Logger(configure=False)
        self.log = self.logger.get_logger(__name__)

        self.extractor = extractor
        self.geocoder = geocoder
        self.file_organizer = file_organizer
        self.default_offset = default_offset
        self.keep_going = keep_going
        self.show_progress = show_progress

    def process_file(self, file_path: str) -> FileOutcome:
        """
        Process a single video file.

        Args:
            file_path: Path to the video file

        Returns:
            FileOutcome.FILED if the file was copied, ALREADY_FILED otherwise
        """
        self.log.info(f"Processing {file_path}")

        content_hash = address_of(file_path)
        tags = self.extractor.extract_tags(file_path)
        profile = classify(tags)
        record = normalize(profile, tags, self.default_offset)
        self.log.debug(f"{file_path}: {profile.value} profile, date {record.date}")

        # Skip before the place lookup so reruns never hit the network
        if self.file_organizer.is_filed(record, content_hash, file_path):
            self.log.info(f"Already filed, skipping: {file_path}")
            return FileOutcome.ALREADY_FILED

        place = None
        if record.has_coordinates:
            self.log.info("Looking up place...")
            place = self.geocoder.resolve_place(record.latitude, record.longitude)
            self.logger.log_place_lookup(file_path, (record.latitude, record.longitude), place)

        result = self.file_organizer.file_into(FileRecord(file_path, record, content_hash, place))
        return FileOutcome.ALREADY_FILED if result.already_filed else FileOutcome.FILED

    def process_files(self, file_paths: Sequence[str]) -> RunSummary:
        """
        Process all files in order.

        Args:
            file_paths: Files to file

        Returns:
            RunSummary for the run
        """
        summary = RunSummary(total_files=len(file_paths))
        progress_bar = self.logger.create_progress_bar(
            len(file_paths), "Filing videos", enabled=self.show_progress
        )

        try:
            for file_path in file_paths:
                try:
                    outcome = self.process_file(file_path)
                except OrganizerError as e:
                    if not self.keep_going:
                        raise
                    self.log.error(f"Failed to process {file_path}: {e}")
                    summary.failures.append((file_path, str(e)))
                else:
                    if outcome is FileOutcome.FILED:
                        summary.filed.append(file_path)
                    else:
                        summary.already_filed.append(file_path)

                if progress_bar:
                    progress_bar.update(1)
        finally:
            if progress_bar:
                progress_bar.close()

        self.logger.log_operation_summary(
            summary.total_files, len(summary.filed),
            len(summary.already_filed), len(summary.failures)
        )
        cache_stats = self.geocoder.get_cache_stats()
        self.log.info(f"Geocoding cache: {cache_stats['cache_hits']} hits, {cache_stats['cache_misses']} misses ({cache_stats['hit_rate_percent']}% hit rate)")
        return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="video-organizer",
        description="File home videos into <target>/<year>/<MM-DD> <place>/ directories.",
        epilog="Environment: GOOGLE_MAPS_API_KEY, VIDEO_ORGANIZER_GEOCODE_INTERVAL, "
               "VIDEO_ORGANIZER_DEFAULT_UTC_OFFSET, EXIFTOOL_PATH (a .env file is read too).",
    )
    parser.add_argument("paths", nargs="*", metavar="PATH",
                        help="files or directories to file, followed by the target directory")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-file", help="also write the log to this file")
    parser.add_argument("--keep-going", action="store_true",
                        help="continue with the next file after an error")
    parser.add_argument("--no-progress", action="store_true", help="do not draw a progress bar")
    return parser


def split_arguments(paths: Sequence[str]) -> Tuple[List[str], str]:
    """
    Split positional arguments into sources and the target directory.

    Raises:
        UsageError: If fewer than two paths are given or the target is not a directory
    """
    if len(paths) < 2:
        raise UsageError("expected at least one file or directory followed by a target directory")
    *sources, target = paths
    if not Path(target).is_dir():
        raise UsageError(f"target is not a directory: {target}")
    return sources, target


def run(file_paths: Iterable[str], target: str, keep_going: bool = False,
        logger: Optional[Logger] = None, show_progress: bool = True) -> RunSummary:
    """Wire up the production components and file ``file_paths`` into ``target``."""
    config = load_config()
    client = GoogleGeocodeClient(config.api_key, config.geocode_url, config.request_timeout)
    geocoder = Geocoder(client, RateLimiter(config.min_request_interval))

    with MetadataExtractor(config.exiftool_path) as extractor:
        organizer = VideoOrganizer(
            extractor, geocoder, FileOrganizer(target),
            default_offset=config.default_utc_offset, keep_going=keep_going,
            logger=logger, show_progress=show_progress,
        )
        return organizer.process_files(list(file_paths))


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point for the application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = Logger(args.log_level, args.log_file)
    log = logger.get_logger(__name__)

    try:
        sources, target = split_arguments(args.paths)
        file_paths = scan_paths(sources)
    except UsageError as e:
        parser.error(str(e))

    try:
        summary = run(file_paths, target, keep_going=args.keep_going,
                      logger=logger, show_progress=not args.no_progress)
    except OrganizerError as e:
        log.error(f"Fatal error: {e}")
        sys.exit(1)

    sys.exit(0 if summary.ok else 1)


if __name__ == "__main__":
    main()
