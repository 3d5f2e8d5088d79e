"""
Record types passed between the pipeline stages.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CanonicalRecord:
    """
    Device-independent metadata for one video.

    Attributes:
        date: ISO-8601 local timestamp with explicit offset,
              e.g. ``2022-06-15T14:30:00.0-05:00``
        latitude: Decimal degrees rounded to 3 places, or None
        longitude: Decimal degrees rounded to 3 places, or None
    """

    date: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __post_init__(self):
        if not self.date:
            raise ValueError("CanonicalRecord requires a date")
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be present or both absent")

    @property
    def year(self) -> str:
        return self.date[0:4]

    @property
    def day(self) -> str:
        """Month and day as ``MM-DD``."""
        return self.date[5:10]

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None


@dataclass(frozen=True)
class FileRecord:
    """Everything the filing step needs to know about one source file."""

    source_path: str
    record: CanonicalRecord
    content_hash: str
    place: Optional[str] = None
