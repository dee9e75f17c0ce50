# fra_pipeline/services/eligibility.py
"""
Welfare-scheme eligibility for FRA claim records.

Two separate rule sets:

* evaluate_schemes()          - full six-scheme catalog with reasons, stored on
                                the record and returned to the submitter.
* atlas_eligibility_flags()   - four boolean flags on atlas entries. Every flag
                                additionally requires an approved claim.
"""
import logging
from decimal import Decimal
from typing import Callable, Dict, Tuple

from fra_pipeline.models import ClaimStatus, ClaimType, SchemeEligibility

logger = logging.getLogger(__name__)

SCHEME_CATALOG: Dict[str, Dict[str, str]] = {
    "pmKisan": {
        "name": "PM-KISAN",
        "description": "Pradhan Mantri Kisan Samman Nidhi",
        "benefit": "₹6,000 per year",
        "ministry": "Ministry of Agriculture",
    },
    "jalJeevanMission": {
        "name": "Jal Jeevan Mission",
        "description": "Har Ghar Jal - Piped Water Supply",
        "benefit": "Clean drinking water connection",
        "ministry": "Ministry of Jal Shakti",
    },
    "mgnrega": {
        "name": "MGNREGA",
        "description": "Mahatma Gandhi National Rural Employment Guarantee Act",
        "benefit": "100 days employment at ₹220/day",
        "ministry": "Ministry of Rural Development",
    },
    "dajgua": {
        "name": "DAJGUA",
        "description": "Development Action for Jharkhand, Gujarat, Andhra Pradesh",
        "benefit": "Integrated tribal development",
        "ministry": "Multiple Ministries",
    },
    "pmay": {
        "name": "PM-AY (Grameen)",
        "description": "Pradhan Mantri Awas Yojana - Rural",
        "benefit": "₹1.2 lakh for house construction",
        "ministry": "Ministry of Rural Development",
    },
    "forestConservation": {
        "name": "Forest Conservation Fund",
        "description": "Support for forest conservation activities",
        "benefit": "Financial assistance for afforestation",
        "ministry": "Ministry of Environment",
    },
}

Rule = Callable[[object], Tuple[bool, str]]


def _fmt(value) -> str:
    """Area as written: 3.5, 1234.5678, 2500000 (no rounding, no exponent)."""
    return format(Decimal(str(float(value or 0))).normalize(), "f")


def _is_individual(record) -> bool:
    return record.record_type == ClaimType.INDIVIDUAL


def _is_community(record) -> bool:
    return record.record_type == ClaimType.COMMUNITY


# -----------------------------------------------------------------------------
# Full rules: (eligible, reason)
# -----------------------------------------------------------------------------
def _pm_kisan(record) -> Tuple[bool, str]:
    area = getattr(record, "land_area", 0) or 0
    if _is_individual(record) and area > 0:
        return True, f"Eligible as IFR patta holder with {_fmt(area)} acres of agricultural land"
    return False, "Requires an individual (IFR) claim with agricultural land area above 0 acres"


def _jal_jeevan(record) -> Tuple[bool, str]:
    if record.claim_status in (ClaimStatus.APPROVED, ClaimStatus.UNDER_REVIEW):
        return True, "Eligible for piped water connection in village"
    return False, f"Not available while the claim is {record.claim_status.value}"


def _mgnrega(record) -> Tuple[bool, str]:
    # Unconditional entitlement for every FRA applicant
    return True, "Guaranteed 100 days employment per household"


def _dajgua(record) -> Tuple[bool, str]:
    if record.tribe or record.st_certificate_number:
        return True, f"Eligible as {record.tribe or 'ST'} tribal community member"
    return False, "No tribe name or ST certificate found on the claim"


def _pmay(record) -> Tuple[bool, str]:
    if record.claim_status == ClaimStatus.APPROVED:
        return True, "Eligible for housing assistance as approved FRA patta holder"
    return False, "Housing assistance requires an approved FRA claim"


def _forest_conservation(record) -> Tuple[bool, str]:
    if _is_community(record):
        area = getattr(record, "forest_area", 0)
        return True, f"Eligible for conservation fund for {_fmt(area)} hectares CFR area"
    return False, "Only community forest resource (CFR) claims qualify"


SCHEME_RULES: Dict[str, Rule] = {
    "pmKisan": _pm_kisan,
    "jalJeevanMission": _jal_jeevan,
    "mgnrega": _mgnrega,
    "dajgua": _dajgua,
    "pmay": _pmay,
    "forestConservation": _forest_conservation,
}


def evaluate_schemes(record) -> Dict[str, SchemeEligibility]:
    """Evaluate every scheme independently; one rule never affects another."""
    results = {}
    for key, rule in SCHEME_RULES.items():
        eligible, reason = rule(record)
        results[key] = SchemeEligibility(eligible=eligible, reason=reason, **SCHEME_CATALOG[key])
    logger.info(
        "Eligibility for %s: %s",
        record.application_number,
        [k for k, v in results.items() if v.eligible],
    )
    return results


# -----------------------------------------------------------------------------
# Atlas flags (boolean only, approved claims only)
# -----------------------------------------------------------------------------
def atlas_eligibility_flags(record) -> Dict[str, bool]:
    approved = record.claim_status == ClaimStatus.APPROVED
    return {
        "pmKisan": approved and _is_individual(record) and (getattr(record, "land_area", 0) or 0) > 0,
        "jalJeevanMission": approved,
        "mgnrega": approved,
        "dajgua": approved,
    }
