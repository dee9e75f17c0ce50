# fra_pipeline/services/locations.py
import re
from typing import Optional

from fra_pipeline.config import INDIA_BBOX

# If labels leaked onto the value, trim trailing label words
TRAILING_LABELS = re.compile(
    r'\s*\b(?:state|district|village|tehsil|panchayat|gram\s*sabha|patta\s*holder)\s*$', re.I
)


def clean_value(s: Optional[str]) -> Optional[str]:
    """Collapse whitespace and drop leaked trailing labels; empty -> None."""
    if not s:
        return None
    s = " ".join(str(s).split())
    s = TRAILING_LABELS.sub("", s).strip(" ,;:-")
    return s or None


def normalize_part(s: Optional[str]) -> Optional[str]:
    """Title-case place and person names, leave codes (IFR-123/2020) alone."""
    s = clean_value(s)
    if not s:
        return None
    if re.search(r'[0-9\-\/]', s):
        return s
    return s.title()


def coords_plausible(lat, lon) -> bool:
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        return False
    min_lat, min_lon, max_lat, max_lon = INDIA_BBOX
    return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon
