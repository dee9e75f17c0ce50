# fra_pipeline/services/atlas.py
import time
from typing import Any, Dict, List, Tuple

from fra_pipeline.models import AtlasEntry, AtlasGeometry, ClaimType, utcnow
from fra_pipeline.services.eligibility import atlas_eligibility_flags


def _geometry(record) -> AtlasGeometry:
    # Records keep latitude first; GeoJSON wants [longitude, latitude]
    if record.record_type == ClaimType.COMMUNITY:
        ring: List[Tuple[float, float]] = [(p.longitude, p.latitude) for p in record.polygon_coordinates]
        return AtlasGeometry(type="Polygon", coordinates=ring)
    point = record.coordinates
    return AtlasGeometry(type="Point", coordinates=[point.longitude or 0, point.latitude or 0])


def _properties(record) -> Dict[str, Any]:
    if record.record_type == ClaimType.COMMUNITY:
        return {
            "gramSabhaName": record.gram_sabha_name,
            "area": record.forest_area,
            "claimStatus": record.claim_status.value,
            "beneficiaries": record.total_families,
            "pattaNumber": record.patta_number,
        }
    return {
        "applicantName": record.applicant_name,
        "area": record.land_area,
        "claimStatus": record.claim_status.value,
        "beneficiaries": record.family_members,
        "pattaNumber": record.patta_number,
    }


def project_record(record, entry_id: str) -> AtlasEntry:
    """
    Map projection of a saved record. Only the store calls this, once per
    record, inside save().
    """
    if not record.id:
        raise ValueError("cannot project a record that has no id")
    entry_type = ClaimType(record.record_type)
    return AtlasEntry(
        id=entry_id,
        entry_id=f"ATLAS_{entry_type.value}_{int(time.time() * 1000)}",
        entry_type=entry_type,
        reference_id=record.id,
        state=record.state,
        district=record.district,
        tehsil=record.tehsil,
        village=record.village,
        geometry=_geometry(record),
        properties=_properties(record),
        claim_status=record.claim_status,
        submitted_date=record.application_date,
        approved_date=record.approval_date,
        eligible_schemes=atlas_eligibility_flags(record),
        created_at=record.created_at or utcnow(),
    )
