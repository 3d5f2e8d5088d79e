"""
Field normalizers for camera metadata.

Each device profile stores its capture date and GPS position differently.
The functions here turn a raw tag map into a CanonicalRecord:

- dates become ``YYYY-MM-DDTHH:MM:SS.0+HH:MM``
- coordinates become signed decimal degrees rounded half-up to 3 places
- latitude and longitude are returned together or not at all
"""

import logging
import math
import re
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .devices import DeviceProfile
from .exceptions import MissingDateError
from .models import CanonicalRecord

logger = logging.getLogger(__name__)

DEFAULT_UTC_OFFSET = "-05:00"

GENERIC_DATE_TAGS = ("CreationDate", "CreateDate", "DateTimeOriginal")
SONY_DATE_TAGS = ("CreationDateValue",) + GENERIC_DATE_TAGS
CANON_DATE_TAGS = ("MediaCreateDate",) + GENERIC_DATE_TAGS

SONY_ITEM_STEM = "AcquisitionRecordGroupItem"

_DATE_PATTERN = re.compile(
    r"^\s*(\d{4})[:-](\d{2})[:-](\d{2})[ T](\d{2}):(\d{2})(?::(\d{2}))?(?:\.\d+)?"
    r"\s*(Z|[+-]\d{2}:?\d{2})?\s*$"
)
_OFFSET_PATTERN = re.compile(r"^([+-])(\d{2}):?(\d{2})$")
_DEGREE_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*deg\s*(\d+(?:\.\d+)?)'\s*(\d+(?:\.\d+)?)\"\s*([NSEW])\s*$",
    re.IGNORECASE,
)

Coordinates = Tuple[Optional[float], Optional[float]]


def normalize_offset(offset: str) -> str:
    """
    Normalize a UTC offset to ``+HH:MM``.

    Raises:
        ValueError: If the offset is not ``Z``, ``+HHMM`` or ``+HH:MM``
    """
    if offset.upper() == "Z":
        return "+00:00"
    match = _OFFSET_PATTERN.match(offset.strip())
    if not match:
        raise ValueError(f"Invalid UTC offset: {offset!r}")
    sign, hours, minutes = match.groups()
    return f"{sign}{hours}:{minutes}"


def format_date(raw: Any, default_offset: str = DEFAULT_UTC_OFFSET) -> str:
    """
    Canonicalize a loosely formatted timestamp.

    Seconds default to ``00`` and a missing offset defaults to
    ``default_offset``. Fractional seconds are dropped and always
    rendered as ``.0``.

    Args:
        raw: Timestamp such as ``2022:06:15 14:30-05:00``
        default_offset: Offset to use when the timestamp has none

    Returns:
        Timestamp formatted as ``YYYY-MM-DDTHH:MM:SS.0+HH:MM``

    Raises:
        ValueError: If the value is not a usable timestamp
    """
    match = _DATE_PATTERN.match(str(raw))
    if not match:
        raise ValueError(f"Unrecognized timestamp: {raw!r}")

    year, month, day, hour, minute, second, offset = match.groups()
    # ExifTool reports unset QuickTime dates as all zeros
    if year == "0000" or month == "00" or day == "00":
        raise ValueError(f"Unset timestamp: {raw!r}")

    offset = normalize_offset(offset) if offset else default_offset
    return f"{year}-{month}-{day}T{hour}:{minute}:{second or '00'}.0{offset}"


def round_coordinate(value: float) -> float:
    """Round to 3 decimals, half-up on the magnitude."""
    magnitude = math.floor(abs(value) * 1000 + 0.5) / 1000
    return -magnitude if value < 0 else magnitude


def _apply_hemisphere(magnitude: float, ref: str) -> float:
    value = round_coordinate(magnitude)
    if ref.strip().upper() in ("S", "W"):
        return -value
    return value


def parse_colon_dms(value: Any, ref: Optional[Any] = None) -> float:
    """
    Convert a ``deg:min:sec`` string with a separate hemisphere ref.

    Args:
        value: Coordinate such as ``34:5:10.5``
        ref: ``N``, ``S``, ``E`` or ``W``; S and W negate the result

    Raises:
        ValueError: If the value does not have one to three numeric fields
    """
    parts = str(value).strip().split(":")
    if not 1 <= len(parts) <= 3:
        raise ValueError(f"Unrecognized coordinate: {value!r}")
    numbers = [float(part) for part in parts] + [0.0] * (3 - len(parts))
    degrees, minutes, seconds = numbers
    return _apply_hemisphere(degrees + minutes / 60 + seconds / 3600, str(ref or ""))


def parse_degree_string(value: Any) -> float:
    """
    Convert a ``D deg M' S.SS" H`` string to signed decimal degrees.

    Raises:
        ValueError: If the value does not match the expected layout
    """
    match = _DEGREE_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Unrecognized coordinate: {value!r}")
    degrees, minutes, seconds, ref = match.groups()
    magnitude = float(degrees) + float(minutes) / 60 + float(seconds) / 3600
    return _apply_hemisphere(magnitude, ref)


def pair_indexed_tags(tags: Dict[str, Any], stem: str) -> Dict[str, Any]:
    """
    Rebuild name/value pairs spread across indexed tags.

    ``{stem}Name3`` is paired with ``{stem}Value3``. List-valued
    ``{stem}Name`` / ``{stem}Value`` tags are zipped element by element.

    Args:
        tags: Raw tag map
        stem: Common key prefix, e.g. ``AcquisitionRecordGroupItem``

    Returns:
        Mapping of item name to item value
    """
    name_pattern = re.compile(re.escape(stem) + r"Name(\d*)$")
    pairs = {}

    for key in sorted(tags):
        match = name_pattern.match(key)
        if not match:
            continue
        value_key = f"{stem}Value{match.group(1)}"
        if value_key not in tags:
            continue

        names, values = tags[key], tags[value_key]
        if isinstance(names, list):
            if not isinstance(values, list):
                values = [values]
            for name, item_value in zip(names, values):
                pairs[str(name)] = item_value
        else:
            pairs[str(names)] = values

    return pairs


def _first_usable_date(tags: Dict[str, Any], candidates: Sequence[str],
                       profile: DeviceProfile, default_offset: str) -> str:
    for tag in candidates:
        raw = tags.get(tag)
        if raw is None:
            continue
        try:
            return format_date(raw, default_offset)
        except ValueError as e:
            logger.debug(f"Skipping {tag}: {e}")
    raise MissingDateError(profile.value, candidates)


def _checked_pair(parse: Callable[[], Coordinates]) -> Coordinates:
    try:
        return parse()
    except ValueError as e:
        logger.warning(f"Ignoring unreadable GPS position: {e}")
        return None, None


def _sony_coordinates(tags: Dict[str, Any]) -> Coordinates:
    items = pair_indexed_tags(tags, SONY_ITEM_STEM)
    if items.get("Latitude") is None or items.get("Longitude") is None:
        return None, None
    return _checked_pair(lambda: (
        parse_colon_dms(items["Latitude"], items.get("LatitudeRef")),
        parse_colon_dms(items["Longitude"], items.get("LongitudeRef")),
    ))


def _gps_string_coordinates(tags: Dict[str, Any]) -> Coordinates:
    latitude, longitude = tags.get("GPSLatitude"), tags.get("GPSLongitude")
    if latitude is None or longitude is None:
        return None, None
    return _checked_pair(lambda: (parse_degree_string(latitude), parse_degree_string(longitude)))


def normalize_sony(tags: Dict[str, Any], default_offset: str = DEFAULT_UTC_OFFSET) -> CanonicalRecord:
    date = _first_usable_date(tags, SONY_DATE_TAGS, DeviceProfile.SONY_CAMERA, default_offset)
    latitude, longitude = _sony_coordinates(tags)
    return CanonicalRecord(date, latitude, longitude)


def normalize_canon(tags: Dict[str, Any], default_offset: str = DEFAULT_UTC_OFFSET) -> CanonicalRecord:
    # This camera has no GPS receiver
    date = _first_usable_date(tags, CANON_DATE_TAGS, DeviceProfile.CANON_CAMERA, default_offset)
    return CanonicalRecord(date)


def normalize_iphone(tags: Dict[str, Any], default_offset: str = DEFAULT_UTC_OFFSET) -> CanonicalRecord:
    date = _first_usable_date(tags, GENERIC_DATE_TAGS, DeviceProfile.IPHONE, default_offset)
    latitude, longitude = _gps_string_coordinates(tags)
    return CanonicalRecord(date, latitude, longitude)


def normalize_generic(tags: Dict[str, Any], default_offset: str = DEFAULT_UTC_OFFSET) -> CanonicalRecord:
    date = _first_usable_date(tags, GENERIC_DATE_TAGS, DeviceProfile.GENERIC, default_offset)
    latitude, longitude = _gps_string_coordinates(tags)
    return CanonicalRecord(date, latitude, longitude)


NORMALIZERS = {
    DeviceProfile.SONY_CAMERA: normalize_sony,
    DeviceProfile.CANON_CAMERA: normalize_canon,
    DeviceProfile.IPHONE: normalize_iphone,
    DeviceProfile.GENERIC: normalize_generic,
}


def normalize(profile: DeviceProfile, tags: Dict[str, Any],
              default_offset: str = DEFAULT_UTC_OFFSET) -> CanonicalRecord:
    """
    Build the canonical record for a tag map using its profile's rules.

    Raises:
        MissingDateError: If no usable date tag exists
    """
    return NORMALIZERS[profile](tags, default_offset)
