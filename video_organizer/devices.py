"""
Device classification for video files.

Picks the camera profile whose extraction rules apply to a tag map.
"""

import fnmatch
from enum import Enum
from typing import Any, Dict


class DeviceProfile(Enum):
    """Closed set of devices with their own metadata layout."""

    SONY_CAMERA = "Sony"
    CANON_CAMERA = "Canon"
    IPHONE = "iPhone"
    GENERIC = "Generic"


SONY_MODEL_NAME = "ILCE-6500"
CANON_MODEL = "Canon EOS 60D"
IPHONE_MODEL_PATTERN = "iPhone*"


def _tag_text(tags: Dict[str, Any], name: str) -> str:
    value = tags.get(name)
    if value is None:
        return ""
    return str(value).strip()


def classify(tags: Dict[str, Any]) -> DeviceProfile:
    """
    Classify a tag map into a device profile.

    Rules are checked in priority order; the first match wins and
    GENERIC is returned when nothing matches.

    Args:
        tags: Tag map produced by the metadata extractor

    Returns:
        The matching DeviceProfile
    """
    if _tag_text(tags, "DeviceModelName") == SONY_MODEL_NAME:
        return DeviceProfile.SONY_CAMERA

    model = _tag_text(tags, "Model")
    if model == CANON_MODEL:
        return DeviceProfile.CANON_CAMERA
    if fnmatch.fnmatchcase(model, IPHONE_MODEL_PATTERN):
        return DeviceProfile.IPHONE

    return DeviceProfile.GENERIC
