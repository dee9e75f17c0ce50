# fra_pipeline/services/extractor.py
"""
Field extraction for FRA claim documents.

Every field is resolved independently:
  1) an NER hint at the field's ordinal position (e.g. persons[0] = applicant),
  2) else the first hit from the field's English/Hindi regex set,
  3) else None (text fields) or 0 (numeric fields).

Nothing in here raises on missing or malformed input.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from fra_pipeline.models import ClaimStatus, ClaimType, RawDocument, Region
from fra_pipeline.services.locations import clean_value, coords_plausible, normalize_part

logger = logging.getLogger(__name__)

# -------- Value shapes --------
SEP = r'\s*[:\-]\s*'                          # "Label: value" / "Label - value"
NAME = r"([A-Za-z][A-Za-z .'’]*)"             # stops at end-of-line, digits, commas
HINDI = r'([^\r\n,:;]+)'                      # anything up to end-of-line / punctuation
CODE = r'([A-Z0-9\/\-]*\d[A-Z0-9\/\-]*)'      # IFR/MP/2023/001, ST-1234 ...
NUM = r'(\d+(?:\.\d+)?)'


def _rx(*patterns: str) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p, re.I) for p in patterns)


P_APPLICATION_NO = _rx(
    r'application\s*(?:no\.?|number)\s*[:\-]?\s*' + CODE,
    r'आवेदन\s*(?:संख्या|क्रमांक)\s*[:\-]?\s*' + CODE,
)
P_APPLICANT = _rx(
    r"(?:applicant(?:'s)?\s*name|name\s*of\s*(?:the\s*)?(?:applicant|claimant)|applicant|claimant"
    r"|(?<!father's\s)(?<!fathers\s)(?<!father\s)\bname)" + SEP + NAME,
    r'(?:आवेदक\s*का\s*नाम|आवेदक)' + SEP + HINDI,
)
P_FATHER = _rx(
    r"father(?:'s|s)?\s*name" + SEP + NAME,
    r'पिता\s*का\s*नाम' + SEP + HINDI,
)
P_AADHAR = _rx(
    r'aadh?aa?r(?:\s*(?:no\.?|number))?[:\s]*(\d{4}\s*\d{4}\s*\d{4})',
    r'आधार(?:\s*संख्या)?[:\s]*(\d{4}\s*\d{4}\s*\d{4})',
)
P_VILLAGE = _rx(
    r'\b(?:village|vill\.)' + SEP + NAME,
    r'(?:ग्राम|गाँव|गांव)(?!\s*सभा)' + SEP + HINDI,
)
P_TEHSIL = _rx(
    r'\b(?:tehsil|taluka)' + SEP + NAME,
    r'तहसील' + SEP + HINDI,
)
P_DISTRICT = _rx(
    r'\bdistrict' + SEP + NAME,
    r'(?:जिला|ज़िला)' + SEP + HINDI,
)
P_LAND_AREA = _rx(
    r'area[:\s]*' + NUM + r'\s*(?:acres?|एकड़)',
    r'क्षेत्रफल[:\s]*' + NUM + r'\s*(?:एकड़|acres?)',
)
P_FOREST_AREA = _rx(
    r'(?:forest\s*)?area[:\s]*' + NUM + r'\s*(?:hectares?|ha\b|हेक्टेयर)',
    r'क्षेत्रफल[:\s]*' + NUM + r'\s*(?:हेक्टेयर|hectares?)',
)
P_SURVEY_NO = _rx(
    r'survey\s*(?:no\.?|number)[:\s]*([0-9][0-9\/\-]*)',
    r'खसरा(?:\s*(?:नं\.?|संख्या|क्रमांक))?[:\s]*([0-9][0-9\/\-]*)',
)
P_FOREST_BLOCK = _rx(r'forest\s*(?:block|range)' + SEP + r'([A-Z0-9][A-Z0-9\- ]*)')
P_LATITUDE = _rx(r'\blat(?:itude)?\b[:\s]*(-?\d{1,2}(?:\.\d+)?)', r'अक्षांश[:\s]*(-?\d{1,2}(?:\.\d+)?)')
P_LONGITUDE = _rx(r'\blong?(?:itude)?\b[:\s]*(-?\d{1,3}(?:\.\d+)?)', r'देशांतर[:\s]*(-?\d{1,3}(?:\.\d+)?)')
# Bare decimal coordinate pairs like "23.1984, 77.0951"
P_COORDS = re.compile(r'(?<![\d.])(-?\d{1,2}\.\d{3,}),\s*(-?\d{1,3}\.\d{3,})(?![\d.])')

P_STATUS = _rx(r'\b(?:claim\s*)?status' + SEP + r'([^\r\n]+)', r'स्थिति' + SEP + HINDI)
P_PATTA_NO = _rx(
    r'patta\s*(?:no\.?|number)\s*[:\-]?\s*' + CODE,
    r'पट्टा\s*(?:क्रमांक|संख्या)\s*[:\-]?\s*' + CODE,
)
P_APPLICATION_DATE = _rx(
    r'(?:application\s*date|date\s*of\s*application|submitted\s*on|applied\s*on)[:\s]*([^\r\n]+)',
    r'आवेदन\s*(?:की\s*)?तिथि[:\s]*([^\r\n]+)',
)
P_APPROVAL_DATE = _rx(r'(?:approval\s*date|approved\s*on|date\s*of\s*approval)[:\s]*([^\r\n]+)')
P_TRIBE = _rx(r'\btribe' + SEP + NAME, r'जनजाति' + SEP + HINDI)
P_ST_CERTIFICATE = _rx(
    r'\b(?:st|scheduled\s*tribe)\s*certificate\s*(?:no\.?|number)?\s*[:\-]?\s*' + CODE,
)
P_FAMILY_MEMBERS = _rx(r'(?:total\s*)?(?:family\s*)?members[:\s]*(\d+)', r'परिवार\s*के\s*सदस्य[:\s]*(\d+)')

P_GRAM_SABHA = _rx(r'gram\s*sabha(?:\s*name)?' + SEP + NAME, r'ग्राम\s*सभा' + SEP + HINDI)
P_PANCHAYAT = _rx(r'\b(?:gram\s*)?panchayat' + SEP + NAME, r'पंचायत' + SEP + HINDI)
P_FOREST_RECORD_NO = _rx(
    r'forest\s*(?:dept\.?|department)\s*record(?:\s*(?:no\.?|number))?[:\s]*' + CODE,
)
P_FOREST_TYPE = _rx(r'forest\s*type' + SEP + NAME)
P_FOREST_DENSITY = _rx(r'(?:forest\s*)?density' + SEP + NAME)
P_POPULATION = _rx(r'population[:\s]*(\d+)', r'जनसंख्या[:\s]*(\d+)')
P_TOTAL_FAMILIES = _rx(r'(?<!st\s)(?<!st)\b(?:total\s*)?families[:\s]*(\d+)', r'कुल\s*परिवार[:\s]*(\d+)')
P_ST_FAMILIES = _rx(r'\bst\s*families[:\s]*(\d+)')
P_ANNUAL_INCOME = _rx(r'annual\s*income[:\s]*(?:₹|rs\.?|inr)?\s*(\d[\d,]*(?:\.\d+)?)')
P_CONSERVATION = _rx(r'conservation\s*activities' + SEP + r'([^\r\n]+)')
P_BOUNDARY = {
    "north": _rx(r'\bnorth' + SEP + NAME, r'उत्तर' + SEP + HINDI),
    "south": _rx(r'\bsouth' + SEP + NAME, r'दक्षिण' + SEP + HINDI),
    "east": _rx(r'\beast' + SEP + NAME, r'पूर्व' + SEP + HINDI),
    "west": _rx(r'\bwest' + SEP + NAME, r'पश्चिम' + SEP + HINDI),
}

# Region names in both scripts, in lookup order. The first entry is the fallback.
REGION_MARKERS: Sequence[Tuple[Region, Tuple[str, ...]]] = (
    (Region.MADHYA_PRADESH, ("madhya pradesh", "मध्य प्रदेश")),
    (Region.TRIPURA, ("tripura", "त्रिपुरा")),
    (Region.ODISHA, ("odisha", "ओडिशा")),
    (Region.TELANGANA, ("telangana", "तेलंगाना")),
)

# DD-MM-YYYY | YYYY-MM-DD | "5 March 2021", tried in this order
P_DATE_DMY = re.compile(r'(?<!\d)(\d{2})[-\/](\d{2})[-\/](\d{4})(?!\d)')
P_DATE_YMD = re.compile(r'(?<!\d)(\d{4})[-\/](\d{2})[-\/](\d{2})(?!\d)')
P_DATE_TEXT = re.compile(r'(?<!\d)(\d{1,2})\s+([A-Za-z]+)\s+(\d{4})(?!\d)')


# -----------------------------------------------------------------------------
# Small helpers
# -----------------------------------------------------------------------------
def extract_pattern(text: Optional[str], patterns: Iterable[Pattern]) -> Optional[str]:
    """First captured group of the first pattern that matches, trimmed."""
    if not text:
        return None
    for pattern in patterns:
        m = pattern.search(text)
        if m and m.group(1) and m.group(1).strip():
            return m.group(1).strip()
    return None


def _ner_value(ner: Optional[Dict[str, List[str]]], category: str, index: int) -> Optional[str]:
    values = (ner or {}).get(category) or []
    if isinstance(values, (list, tuple)) and len(values) > index:
        return clean_value(values[index])
    return None


def _to_float(s: Optional[str], default: Optional[float] = 0.0) -> Optional[float]:
    if s is None:
        return default
    try:
        return float(str(s).replace(",", ""))
    except ValueError:
        return default


def _to_int(s: Optional[str], default: int = 0) -> int:
    if s is None:
        return default
    try:
        return int(str(s).replace(",", ""))
    except ValueError:
        return default


def _name(ner, category: str, index: int, text: str, patterns) -> Optional[str]:
    return normalize_part(_ner_value(ner, category, index) or extract_pattern(text, patterns))


def _code(text: str, patterns) -> Optional[str]:
    value = clean_value(extract_pattern(text, patterns))
    return value.upper() if value else None


# -----------------------------------------------------------------------------
# Region / date / status / coordinates
# -----------------------------------------------------------------------------
def identify_state(text: Optional[str]) -> Region:
    lowered = (text or "").lower()
    for region, names in REGION_MARKERS:
        if any(name in lowered for name in names):
            return region
    return REGION_MARKERS[0][0]


def _date_from_match(pattern: Pattern, m: "re.Match") -> datetime:
    if pattern is P_DATE_DMY:
        day, month, year = m.groups()
        return datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
    if pattern is P_DATE_YMD:
        year, month, day = m.groups()
        return datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
    raw = " ".join(m.groups())
    for fmt in ("%d %B %Y", "%d %b %Y"):
        try:
            return datetime.strptime(raw, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError(f"not a date: {raw!r}")


def parse_date(text: Optional[str]) -> Optional[datetime]:
    """First parseable date in text, trying the three formats in order."""
    if not text:
        return None
    for pattern in (P_DATE_DMY, P_DATE_YMD, P_DATE_TEXT):
        for m in pattern.finditer(text):
            try:
                return _date_from_match(pattern, m)
            except ValueError:
                continue
    return None


def extract_date(text: Optional[str]) -> datetime:
    """Application date; documents without a usable date get the current time."""
    return parse_date(text) or datetime.now(timezone.utc)


def normalize_status(value: Optional[str]) -> Optional[ClaimStatus]:
    if not value:
        return None
    v = value.lower()
    # अस्वीकृत (rejected) contains स्वीकृत (approved): check rejection first
    if "reject" in v or "अस्वीकृत" in v:
        return ClaimStatus.REJECTED
    if "approv" in v or "grant" in v or "स्वीकृत" in v:
        return ClaimStatus.APPROVED
    if "review" in v or "verification" in v or "विचाराधीन" in v:
        return ClaimStatus.UNDER_REVIEW
    if "pending" in v or "लंबित" in v:
        return ClaimStatus.PENDING
    return None


def find_coordinate_pairs(text: Optional[str]) -> List[Tuple[float, float]]:
    """All plausible (lat, lon) decimal pairs, in document order."""
    pairs = []
    for m in P_COORDS.finditer(text or ""):
        lat, lon = float(m.group(1)), float(m.group(2))
        if coords_plausible(lat, lon):
            pairs.append((lat, lon))
        else:
            logger.warning("Discarding implausible coordinate pair %s, %s", lat, lon)
    return pairs


def _point(text: str) -> Tuple[Optional[float], Optional[float]]:
    lat = _to_float(extract_pattern(text, P_LATITUDE), None)
    lon = _to_float(extract_pattern(text, P_LONGITUDE), None)
    if lat is not None and lon is not None:
        if coords_plausible(lat, lon):
            return lat, lon
        logger.warning("Discarding implausible coordinates lat=%s lon=%s", lat, lon)
        return None, None
    pairs = find_coordinate_pairs(text)
    return pairs[0] if pairs else (None, None)


def _common_fields(text: str) -> Dict[str, Any]:
    return {
        "application_number": _code(text, P_APPLICATION_NO),
        "tehsil": normalize_part(extract_pattern(text, P_TEHSIL)),
        "state": identify_state(text),
        # prefer a labelled date, then the first date anywhere in the text
        "application_date": parse_date(extract_pattern(text, P_APPLICATION_DATE)) or extract_date(text),
        "approval_date": parse_date(extract_pattern(text, P_APPROVAL_DATE)),
        "claim_status": normalize_status(extract_pattern(text, P_STATUS)),
        "patta_number": _code(text, P_PATTA_NO),
        "tribe": normalize_part(extract_pattern(text, P_TRIBE)),
        "st_certificate_number": _code(text, P_ST_CERTIFICATE),
    }


# -----------------------------------------------------------------------------
# Per claim type
# -----------------------------------------------------------------------------
def extract_individual_fields(document: RawDocument) -> Dict[str, Any]:
    text = document.extracted_text or ""
    ner = document.ner or {}
    latitude, longitude = _point(text)
    aadhar = extract_pattern(text, P_AADHAR)

    fields = _common_fields(text)
    fields.update({
        "applicant_name": _name(ner, "persons", 0, text, P_APPLICANT),
        "father_name": _name(ner, "persons", 1, text, P_FATHER),
        "aadhar_number": " ".join(aadhar.split()) if aadhar else None,
        "village": _name(ner, "locations", 0, text, P_VILLAGE),
        "district": _name(ner, "locations", 1, text, P_DISTRICT),
        "land_area": _to_float(extract_pattern(text, P_LAND_AREA)),
        "survey_number": extract_pattern(text, P_SURVEY_NO),
        "forest_block": clean_value(extract_pattern(text, P_FOREST_BLOCK)),
        "latitude": latitude,
        "longitude": longitude,
        "family_members": _to_int(extract_pattern(text, P_FAMILY_MEMBERS)),
    })
    return fields


def extract_community_fields(document: RawDocument) -> Dict[str, Any]:
    text = document.extracted_text or ""
    ner = document.ner or {}
    activities = extract_pattern(text, P_CONSERVATION)

    fields = _common_fields(text)
    fields.update({
        "gram_sabha_name": _name(ner, "locations", 0, text, P_GRAM_SABHA),
        "panchayat": normalize_part(extract_pattern(text, P_PANCHAYAT)),
        "village": _name(ner, "locations", 1, text, P_VILLAGE),
        "district": _name(ner, "locations", 2, text, P_DISTRICT),
        "forest_area": _to_float(extract_pattern(text, P_FOREST_AREA)),
        "forest_department_record_no": _code(text, P_FOREST_RECORD_NO),
        "forest_type": normalize_part(extract_pattern(text, P_FOREST_TYPE)),
        "forest_density": normalize_part(extract_pattern(text, P_FOREST_DENSITY)),
        "total_population": _to_int(extract_pattern(text, P_POPULATION)),
        "total_families": _to_int(extract_pattern(text, P_TOTAL_FAMILIES)),
        "st_families": _to_int(extract_pattern(text, P_ST_FAMILIES)),
        "annual_income": _to_float(extract_pattern(text, P_ANNUAL_INCOME)),
        "boundaries": {
            side: normalize_part(extract_pattern(text, patterns))
            for side, patterns in P_BOUNDARY.items()
        },
        "polygon_coordinates": find_coordinate_pairs(text),
        "conservation_activities": [
            a for a in (clean_value(x) for x in re.split(r'[,;]', activities or "")) if a
        ],
    })
    return fields


def extract_fields(document: RawDocument, claim_type: ClaimType) -> Dict[str, Any]:
    if claim_type == ClaimType.COMMUNITY:
        fields = extract_community_fields(document)
    else:
        fields = extract_individual_fields(document)
    logger.debug(
        "Extracted %s fields: %s",
        claim_type.value,
        sorted(k for k, v in fields.items() if v not in (None, 0, [], {})),
    )
    return fields
