"""
Metadata extraction module for video files.

This module wraps ExifTool (through PyExifTool) and returns the raw tag
map of a file. Interpreting the tags is left to the device classifier
and the field normalizers.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import exiftool
from exiftool.exceptions import ExifToolException

from .exceptions import TagExtractionError


class MetadataExtractor:
    """
    Extracts embedded metadata tags from video files.

    Keeps a single ExifTool process running between calls; use it as a
    context manager so the process is shut down at the end of a run.
    """

    # Supported video extensions
    VIDEO_EXTENSIONS = {'.mov', '.mp4', '.avi'}

    def __init__(self, executable: Optional[str] = None):
        """
        Initialize the metadata extractor.

        Args:
            executable: Path to the exiftool binary, or None to use PATH
        """
        self.logger = logging.getLogger(__name__)
        # No -G (group prefixes) and no -n, so tags keep their printed form
        helper_args = {"common_args": []}
        if executable:
            helper_args["executable"] = executable
        self._helper = exiftool.ExifToolHelper(**helper_args)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Stop the ExifTool process if it is running."""
        if self._helper.running:
            self._helper.terminate()

    @classmethod
    def is_supported_file(cls, file_path: str) -> bool:
        """
        Check if the file is a supported video file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if the extension is a supported video extension
        """
        return Path(file_path).suffix.lower() in cls.VIDEO_EXTENSIONS

    def extract_tags(self, file_path: str) -> Dict[str, Any]:
        """
        Read the tag map of a file.

        Args:
            file_path: Path to the video file

        Returns:
            Mapping of tag name to value

        Raises:
            TagExtractionError: If ExifTool cannot read the file
        """
        try:
            results = self._helper.get_metadata(str(file_path))
        except (ExifToolException, OSError) as e:
            raise TagExtractionError(f"exiftool failed for {file_path}: {e}") from e

        if not results:
            raise TagExtractionError(f"exiftool returned no metadata for {file_path}")

        tags = dict(results[0])
        tags.pop("SourceFile", None)
        self.logger.debug(f"Read {len(tags)} tags from {file_path}")
        return tags
