"""
Video Organizer Package

Files home videos into a date and place keyed directory tree.
Reads capture date and GPS position from camera metadata, reverse
geocodes the position to a place name and copies each video to
``<target>/<year>/<MM-DD> <place>/<hash>.<ext>`` exactly once.
"""

__version__ = "1.0.0"
__author__ = "Video Organizer Team"

from .metadata_extractor import MetadataExtractor
from .devices import DeviceProfile, classify
from .normalizers import normalize
from .geocoder import Geocoder, GoogleGeocodeClient, RateLimiter
from .content_address import address_of
from .file_organizer import FileOrganizer, scan_paths
from .logger import Logger

__all__ = [
    "MetadataExtractor",
    "DeviceProfile",
    "classify",
    "normalize",
    "Geocoder",
    "GoogleGeocodeClient",
    "RateLimiter",
    "address_of",
    "FileOrganizer",
    "scan_paths",
    "Logger"
]
