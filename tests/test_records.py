"""Tests for canonical record assembly."""

import re

import pytest
from pydantic import ValidationError

from fra_pipeline.models import (
    ClaimStatus,
    ClaimType,
    CommunityRecord,
    DocumentMetadata,
    IndividualRecord,
    RawDocument,
    Region,
)
from fra_pipeline.services.extractor import extract_fields
from fra_pipeline.services.records import build_record, synthesize_application_number


class TestBuildRecord:
    def test_individual_record(self, ifr_document: RawDocument, metadata: DocumentMetadata) -> None:
        fields = extract_fields(ifr_document, ClaimType.INDIVIDUAL)
        record = build_record(fields, metadata, ClaimType.INDIVIDUAL, ifr_document)

        assert isinstance(record, IndividualRecord)
        assert record.record_type == ClaimType.INDIVIDUAL
        assert record.id is None and record.created_at is None
        assert record.application_number == "IFR/MP/2023/001"
        assert record.land_area == 3.5
        assert record.coordinates.latitude == 23.1324
        assert record.coordinates.type == "Point"
        assert record.source_document.file_name == "claim.pdf"
        assert record.source_document.ocr_confidence == 0.92
        assert record.eligible_schemes == {}

    def test_community_record(self, cfr_document: RawDocument, metadata: DocumentMetadata) -> None:
        fields = extract_fields(cfr_document, ClaimType.COMMUNITY)
        record = build_record(fields, metadata, ClaimType.COMMUNITY, cfr_document)

        assert isinstance(record, CommunityRecord)
        assert record.state == Region.ODISHA
        assert record.boundaries.north == "Sal Forest"
        assert record.boundaries.east is None
        assert [(p.latitude, p.longitude) for p in record.polygon_coordinates][0] == (21.9451, 86.0823)
        assert len(record.conservation_activities) == 3

    def test_defaults_for_empty_fields(self) -> None:
        record = build_record({}, None, ClaimType.INDIVIDUAL)
        assert record.state == Region.MADHYA_PRADESH
        assert record.claim_status == ClaimStatus.UNDER_REVIEW
        assert record.land_area == 0
        assert record.family_members == 0
        assert record.extracted_entities == {}

    def test_synthesized_application_number(self) -> None:
        record = build_record({"state": Region.TRIPURA}, None, ClaimType.COMMUNITY)
        assert re.fullmatch(r"CFR/Tripura/\d{13}", record.application_number)

    def test_negative_quantities_clamped(self) -> None:
        record = build_record({"land_area": -4.0, "family_members": -2}, None, ClaimType.INDIVIDUAL)
        assert record.land_area == 0
        assert record.family_members == 0

    def test_records_are_immutable(self) -> None:
        record = build_record({}, None, ClaimType.INDIVIDUAL)
        with pytest.raises(ValidationError):
            record.land_area = 10

    def test_camel_case_wire_format(self, ifr_document: RawDocument, metadata: DocumentMetadata) -> None:
        fields = extract_fields(ifr_document, ClaimType.INDIVIDUAL)
        body = build_record(fields, metadata, ClaimType.INDIVIDUAL, ifr_document).to_json_dict()
        assert body["recordType"] == "IFR"
        assert body["applicationNumber"] == "IFR/MP/2023/001"
        assert body["claimStatus"] == "approved"
        assert body["sourceDocument"]["ocrConfidence"] == 0.92


def test_synthesize_application_number_format() -> None:
    number = synthesize_application_number(ClaimType.INDIVIDUAL, Region.TELANGANA)
    prefix, state, millis = number.split("/")
    assert (prefix, state) == ("IFR", "Telangana")
    assert millis.isdigit()
