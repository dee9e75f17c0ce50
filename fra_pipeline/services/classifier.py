# fra_pipeline/services/classifier.py
import logging
from typing import NamedTuple, Optional

from fra_pipeline.models import ClaimType

logger = logging.getLogger(__name__)

# Checked in this order; the first list with a hit wins.
INDIVIDUAL_MARKERS = ("individual forest rights", "ifr", "व्यक्तिगत वन अधिकार")
COMMUNITY_MARKERS = ("community forest", "cfr", "सामुदायिक वन")


class Classification(NamedTuple):
    claim_type: ClaimType
    marker: Optional[str]
    defaulted: bool


def classify_document(text: Optional[str]) -> Classification:
    """
    Decide IFR vs CFR from marker phrases.

    Never fails: a document with no marker is treated as an individual claim
    and flagged with defaulted=True.
    """
    lowered = (text or "").lower()
    for claim_type, markers in (
        (ClaimType.INDIVIDUAL, INDIVIDUAL_MARKERS),
        (ClaimType.COMMUNITY, COMMUNITY_MARKERS),
    ):
        for marker in markers:
            if marker in lowered:
                return Classification(claim_type, marker, False)

    logger.warning("No claim-type marker found; defaulting to %s", ClaimType.INDIVIDUAL.value)
    return Classification(ClaimType.INDIVIDUAL, None, True)


def classify(text: Optional[str]) -> ClaimType:
    return classify_document(text).claim_type
