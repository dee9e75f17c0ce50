# fra_pipeline/services/records.py
import logging
import time
from typing import Any, Dict, Optional

from fra_pipeline.models import (
    Boundaries,
    ClaimStatus,
    ClaimType,
    CommunityRecord,
    Coordinates,
    DocumentMetadata,
    IndividualRecord,
    LatLon,
    RawDocument,
    Region,
    SourceDocument,
)

logger = logging.getLogger(__name__)


def synthesize_application_number(claim_type: ClaimType, state: Region) -> str:
    """
    IFR/Madhya Pradesh/1717000000000 style number for documents without one.
    Two documents built in the same millisecond get the same number.
    """
    return f"{claim_type.value}/{state.value}/{int(time.time() * 1000)}"


def _source_document(metadata: DocumentMetadata, document: RawDocument) -> SourceDocument:
    return SourceDocument(
        document_id=metadata.document_id,
        file_name=metadata.file_name,
        uploaded_at=metadata.uploaded_at,
        ocr_confidence=document.confidence,
    )


def _common(fields: Dict[str, Any], metadata: DocumentMetadata,
            claim_type: ClaimType, document: RawDocument) -> Dict[str, Any]:
    state = fields.get("state") or Region.MADHYA_PRADESH
    return {
        "application_number": (
            fields.get("application_number")
            or synthesize_application_number(claim_type, Region(state))
        ),
        "village": fields.get("village"),
        "tehsil": fields.get("tehsil"),
        "district": fields.get("district"),
        "state": state,
        "claim_status": fields.get("claim_status") or ClaimStatus.UNDER_REVIEW,
        "application_date": fields.get("application_date"),
        "approval_date": fields.get("approval_date"),
        "patta_number": fields.get("patta_number"),
        "tribe": fields.get("tribe"),
        "st_certificate_number": fields.get("st_certificate_number"),
        "extracted_entities": dict(document.ner or {}),
        "source_document": _source_document(metadata, document),
    }


def _non_negative(value: Optional[float]) -> float:
    return max(value or 0, 0)


def build_individual_record(fields: Dict[str, Any], metadata: DocumentMetadata,
                            document: RawDocument) -> IndividualRecord:
    return IndividualRecord(
        **_common(fields, metadata, ClaimType.INDIVIDUAL, document),
        applicant_name=fields.get("applicant_name"),
        father_name=fields.get("father_name"),
        aadhar_number=fields.get("aadhar_number"),
        land_area=_non_negative(fields.get("land_area")),
        survey_number=fields.get("survey_number"),
        forest_block=fields.get("forest_block"),
        coordinates=Coordinates(
            latitude=fields.get("latitude"),
            longitude=fields.get("longitude"),
        ),
        family_members=_non_negative(fields.get("family_members")),
    )


def build_community_record(fields: Dict[str, Any], metadata: DocumentMetadata,
                           document: RawDocument) -> CommunityRecord:
    return CommunityRecord(
        **_common(fields, metadata, ClaimType.COMMUNITY, document),
        gram_sabha_name=fields.get("gram_sabha_name"),
        panchayat=fields.get("panchayat"),
        forest_area=_non_negative(fields.get("forest_area")),
        forest_department_record_no=fields.get("forest_department_record_no"),
        forest_type=fields.get("forest_type"),
        forest_density=fields.get("forest_density"),
        total_population=_non_negative(fields.get("total_population")),
        total_families=_non_negative(fields.get("total_families")),
        st_families=_non_negative(fields.get("st_families")),
        boundaries=Boundaries(**(fields.get("boundaries") or {})),
        polygon_coordinates=[
            LatLon(latitude=lat, longitude=lon)
            for lat, lon in fields.get("polygon_coordinates") or []
        ],
        conservation_activities=list(fields.get("conservation_activities") or []),
        annual_income=_non_negative(fields.get("annual_income")),
    )


def build_record(fields: Dict[str, Any], metadata: Optional[DocumentMetadata],
                 claim_type: ClaimType, document: Optional[RawDocument] = None):
    """
    Assemble an unsaved canonical record from extracted fields.

    id / created_at / updated_at are left for the store to stamp.
    """
    metadata = metadata or DocumentMetadata()
    document = document or RawDocument()
    if claim_type == ClaimType.COMMUNITY:
        record = build_community_record(fields, metadata, document)
    else:
        record = build_individual_record(fields, metadata, document)
    logger.info("Built %s record %s (%s)", claim_type.value, record.application_number, record.state.value)
    return record
