"""
Logging module for the video organizer application.

This module provides centralized logging functionality with configurable
log levels and output formats.
"""

import logging
import sys
from typing import Optional

from tqdm import tqdm


class Logger:
    """
    Centralized logging configuration for the video organizer application.

    Provides consistent logging across all modules with configurable
    log levels and output formats.
    """

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 configure: bool = True):
        """
        Initialize the logger.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional log file path
            configure: False to leave the root logger's handlers untouched
        """
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.log_file = log_file
        if configure:
            self._setup_logging()

    def _setup_logging(self):
        """Set up logging configuration."""
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file, mode='w', encoding='utf-8')
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Logging to file: {self.log_file}")

        # Set specific logger levels
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)
        logging.getLogger('exiftool').setLevel(logging.WARNING)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger instance for a specific module.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Configured logger instance
        """
        return logging.getLogger(name)

    def log_operation_summary(self, total_files: int, copied_files: int,
                              already_filed: int, failed_files: int):
        """
        Log a summary of a run.

        Args:
            total_files: Total number of files found
            copied_files: Number of files copied into the target tree
            already_filed: Number of files skipped because they were filed before
            failed_files: Number of files that failed
        """
        logger = logging.getLogger(__name__)

        logger.info("=" * 50)
        logger.info("OPERATION SUMMARY")
        logger.info("=" * 50)
        logger.info(f"Total files found: {total_files}")
        logger.info(f"Files copied: {copied_files}")
        logger.info(f"Already filed: {already_filed}")
        logger.info(f"Failed files: {failed_files}")
        logger.info("=" * 50)

    def log_place_lookup(self, file_path: str, coordinates: Optional[tuple],
                         place: Optional[str]):
        """
        Log the place lookup result for a file.

        Args:
            file_path: Path to the file
            coordinates: GPS coordinates (lat, lon) if found
            place: Place name if one was found
        """
        logger = logging.getLogger(__name__)

        if coordinates:
            lat, lon = coordinates
            logger.info(f"GPS found in {file_path}: ({lat:.3f}, {lon:.3f})")
            if place:
                logger.info(f"Place: {place}")
            else:
                logger.warning(f"No place found for {file_path}")
        else:
            logger.debug(f"No GPS data found in {file_path}")

    def create_progress_bar(self, total: int, desc: str = "Processing",
                            enabled: bool = True) -> Optional[tqdm]:
        """
        Create a progress bar for tracking operations.

        Args:
            total: Total number of items to process
            desc: Description for the progress bar
            enabled: False to skip the bar entirely

        Returns:
            tqdm progress bar instance, or None when disabled or empty
        """
        if enabled and total > 0:
            return tqdm(total=total, desc=desc, unit="files", ncols=80, file=sys.stderr)
        return None
