"""
File organization module for video files.

Files are copied into ``<root>/<year>/<MM-DD>[ <place>]/<hash>.<ext>``.
Day directories are found by prefix so they can pick up a place suffix
after they were created; filing the same content address twice is a
no-op.
"""

import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .exceptions import FilesystemError, UsageError
from .metadata_extractor import MetadataExtractor
from .models import CanonicalRecord, FileRecord


@dataclass(frozen=True)
class FilingResult:
    """Where a file ended up and whether this call copied it."""

    destination: Path
    copied: bool

    @property
    def already_filed(self) -> bool:
        return not self.copied


class FileOrganizer:
    """
    Handles directory resolution and copying for filed videos.
    """

    def __init__(self, destination_root: str):
        """
        Initialize the file organizer.

        Args:
            destination_root: Root directory for organized files
        """
        self.logger = logging.getLogger(__name__)
        self.destination_root = Path(destination_root)

        self.copied_files_count = 0
        self.skipped_files_count = 0
        self.renamed_directories_count = 0

    def find_day_directory(self, record: CanonicalRecord) -> Optional[Path]:
        """
        Find the existing directory for the record's year and day.

        Args:
            record: Canonical record carrying the date

        Returns:
            The first matching directory in sorted order, or None
        """
        year_dir = self.destination_root / record.year
        if not year_dir.is_dir():
            return None

        try:
            candidates = sorted(
                entry for entry in year_dir.iterdir()
                if entry.is_dir() and entry.name.startswith(record.day)
            )
        except OSError as e:
            raise FilesystemError(f"Cannot list {year_dir}: {e}", str(year_dir)) from e

        return candidates[0] if candidates else None

    @staticmethod
    def destination_name(content_hash: str, source_path: str) -> str:
        """Destination filename: content hash plus the lowercased extension."""
        extension = Path(source_path).suffix.lower()
        return f"{content_hash}{extension}"

    def is_filed(self, record: CanonicalRecord, content_hash: str, source_path: str) -> bool:
        """
        Check whether a file is already present in the target tree.

        Only needs the date and content address, so it can run before the
        place lookup.
        """
        day_dir = self.find_day_directory(record)
        if day_dir is None:
            return False
        return (day_dir / self.destination_name(content_hash, source_path)).exists()

    def resolve_day_directory(self, record: CanonicalRecord, place: Optional[str]) -> Path:
        """
        Find or create the day directory, adding the place to its name.

        Args:
            record: Canonical record carrying the date
            place: Place name to carry in the directory name, or None

        Returns:
            Path of the directory to file into
        """
        safe_place = self._sanitize_filename(place) if place else None
        day_dir = self.find_day_directory(record)

        if day_dir is None:
            name = f"{record.day} {safe_place}" if safe_place else record.day
            day_dir = self.destination_root / record.year / name
            try:
                day_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(f"Failed to create directory {day_dir}: {e}", str(day_dir)) from e
            self.logger.info(f"Created directory: {day_dir}")
            return day_dir

        if not safe_place or safe_place in day_dir.name:
            return day_dir

        if day_dir.name == record.day:
            new_name = f"{record.day} {safe_place}"
        else:
            new_name = f"{day_dir.name}, {safe_place}"

        renamed = day_dir.with_name(new_name)
        try:
            day_dir.rename(renamed)
        except OSError as e:
            raise FilesystemError(f"Failed to rename {day_dir} to {renamed}: {e}", str(day_dir)) from e
        self.renamed_directories_count += 1
        self.logger.info(f"Renamed directory: {day_dir.name} -> {renamed.name}")
        return renamed

    def file_into(self, file_record: FileRecord) -> FilingResult:
        """
        Copy a file into its day directory unless it is already there.

        Args:
            file_record: Source path, canonical record, content hash and place

        Returns:
            FilingResult with the destination path

        Raises:
            FilesystemError: If a directory or copy operation fails
        """
        day_dir = self.resolve_day_directory(file_record.record, file_record.place)
        destination = day_dir / self.destination_name(file_record.content_hash, file_record.source_path)

        if destination.exists():
            self.skipped_files_count += 1
            self.logger.info(f"Already filed: {file_record.source_path} -> {destination}")
            return FilingResult(destination, copied=False)

        self.copy_file(file_record.source_path, destination)
        return FilingResult(destination, copied=True)

    def copy_file(self, source_path: str, destination: Path):
        """
        Copy a file to an exact destination path.

        The data is written to ``<destination>.part`` first and moved into
        place once complete.

        Raises:
            FilesystemError: If the copy fails
        """
        partial = destination.with_name(destination.name + ".part")
        try:
            shutil.copy2(source_path, partial)
            os.replace(partial, destination)
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise FilesystemError(f"Failed to copy {source_path} -> {destination}: {e}", source_path) from e

        self.copied_files_count += 1
        self.logger.info(f"Copied: {source_path} -> {destination}")

    def _sanitize_filename(self, filename: str) -> str:
        """
        Sanitize a place name for use inside a directory name.

        Args:
            filename: Original name

        Returns:
            Sanitized name
        """
        # Replace invalid characters
        invalid_chars = '<>:"/\\|?*'
        for char in invalid_chars:
            filename = filename.replace(char, '_')

        # Replace multiple spaces with single space
        filename = re.sub(r'\s+', ' ', filename)

        # Remove leading/trailing spaces and dots
        filename = filename.strip('. ')

        # Limit length
        if len(filename) > 100:
            filename = filename[:100]

        return filename


def scan_paths(paths: Iterable[str]) -> List[str]:
    """
    Expand command line arguments into the list of files to process.

    Directories are searched recursively for supported video files,
    skipping hidden files. Named files are used as given.

    Args:
        paths: Files and directories

    Returns:
        File paths in discovery order

    Raises:
        UsageError: If a path does not exist
    """
    logger = logging.getLogger(__name__)
    media_files = []

    for path in paths:
        source_path = Path(path)
        if source_path.is_dir():
            found = sorted(
                str(file_path) for file_path in source_path.rglob('*')
                if file_path.is_file()
                and not file_path.name.startswith('.')
                and MetadataExtractor.is_supported_file(file_path.name)
            )
            logger.info(f"Found {len(found)} video files in {path}")
            media_files.extend(found)
        elif source_path.is_file():
            media_files.append(str(path))
        else:
            raise UsageError(f"No such file or directory: {path}")

    return media_files
