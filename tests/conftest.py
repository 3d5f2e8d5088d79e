"""
Pytest configuration and shared fixtures for Video Organizer tests.

This module provides:
- Fixtures wrapping the fakes in fakes.py
- Tag maps for each supported camera
- Source and target directory fixtures
"""

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

from video_organizer.file_organizer import FileOrganizer  # noqa: E402
from video_organizer.geocoder import Geocoder, RateLimiter  # noqa: E402
from video_organizer.main import VideoOrganizer  # noqa: E402

from fakes import ECHO_PARK_RESPONSE, FakeExtractor, FakeGeocodeClient, ManualClock  # noqa: E402


# ============================================================================
# Tag map fixtures
# ============================================================================


@pytest.fixture
def sony_tags() -> Dict[str, Any]:
    """Tag map of a Sony ILCE-6500 clip with GPS."""
    return {
        "DeviceModelName": "ILCE-6500",
        "CreationDateValue": "2022:06:15 14:30:00-05:00",
        "AcquisitionRecordGroupItemName": ["Latitude", "LatitudeRef", "Longitude", "LongitudeRef"],
        "AcquisitionRecordGroupItemValue": ["34:5:10", "N", "118:15:22", "W"],
    }


@pytest.fixture
def canon_tags() -> Dict[str, Any]:
    """Tag map of a Canon EOS 60D clip (never has GPS)."""
    return {
        "Make": "Canon",
        "Model": "Canon EOS 60D",
        "MediaCreateDate": "2022:06:15 09:12:44",
    }


@pytest.fixture
def iphone_tags() -> Dict[str, Any]:
    """Tag map of an iPhone clip with GPS."""
    return {
        "Make": "Apple",
        "Model": "iPhone 12 Pro",
        "CreationDate": "2022:06:15 18:01:02-07:00",
        "GPSLatitude": "34 deg 5' 10.00\" N",
        "GPSLongitude": "118 deg 15' 22.00\" W",
    }


# ============================================================================
# Component fixtures
# ============================================================================


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def geocode_client() -> FakeGeocodeClient:
    return FakeGeocodeClient(ECHO_PARK_RESPONSE)


@pytest.fixture
def geocoder(geocode_client, manual_clock) -> Geocoder:
    return Geocoder(geocode_client, RateLimiter(5.0, clock=manual_clock, sleep=manual_clock.sleep))


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def source_dir(tmp_path) -> Path:
    source = tmp_path / "source"
    source.mkdir()
    return source


@pytest.fixture
def target_dir(tmp_path) -> Path:
    target = tmp_path / "target"
    target.mkdir()
    return target


@pytest.fixture
def make_video(source_dir):
    """Create a small stand-in video file and return its path string."""

    def _make(name: str, content: bytes = b"\x00\x00\x00\x18ftypmp42") -> str:
        path = source_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    return _make


@pytest.fixture
def video_organizer(fake_extractor, geocoder, target_dir) -> VideoOrganizer:
    return VideoOrganizer(
        fake_extractor, geocoder, FileOrganizer(str(target_dir)), show_progress=False
    )
