# fra_pipeline/services/pipeline.py
"""
Document -> record -> atlas orchestration.

AtlasPipeline wires the stages together around one injected RecordStore:

    classify_document -> extract_fields -> build_record
        -> evaluate_schemes -> RecordStore.save (which projects the atlas entry)
"""
import logging
from typing import Any, Dict, List, Optional

from fra_pipeline.db import RecordStore
from fra_pipeline.models import (
    ClaimType,
    DocumentMetadata,
    MapCoordinates,
    RawDocument,
    Statistics,
    SubmissionResult,
)
from fra_pipeline.services.classifier import classify_document
from fra_pipeline.services.eligibility import evaluate_schemes
from fra_pipeline.services.extractor import extract_fields
from fra_pipeline.services.records import build_record

logger = logging.getLogger(__name__)


class AtlasPipeline:
    def __init__(self, store: RecordStore):
        self.store = store

    def preview(self, document: RawDocument, metadata: Optional[DocumentMetadata] = None):
        """Build and evaluate a record without storing it."""
        classification = classify_document(document.extracted_text)
        fields = extract_fields(document, classification.claim_type)
        record = build_record(fields, metadata, classification.claim_type, document)
        return record.model_copy(update={"eligible_schemes": evaluate_schemes(record)})

    def submit(self, document: RawDocument,
               metadata: Optional[DocumentMetadata] = None) -> SubmissionResult:
        record = self.preview(document, metadata)
        saved = self.store.save(record)

        claim_type = ClaimType(saved.record_type)
        # Community claims are polygons; their map point stays empty
        map_coordinates = MapCoordinates()
        if claim_type == ClaimType.INDIVIDUAL:
            map_coordinates = MapCoordinates(
                latitude=saved.coordinates.latitude,
                longitude=saved.coordinates.longitude,
            )

        logger.info("Submitted %s as %s", saved.application_number, saved.id)
        return SubmissionResult(
            record_id=saved.id,
            record_type=claim_type,
            data=saved,
            eligible_schemes=saved.eligible_schemes,
            map_coordinates=map_coordinates,
        )

    def list_records(self, state: Optional[str] = None,
                     district: Optional[str] = None) -> List[Any]:
        """Both filters optional; when both are given a record must match both."""
        records = self.store.get_by_state(state) if state else self.store.get_all()
        if district:
            records = [r for r in records if r.district == district]
        return records

    def get_record(self, record_id: str):
        return self.store.get_record(record_id)

    def geojson(self, state: Optional[str] = None, district: Optional[str] = None,
                entry_type: Optional[str] = None) -> Dict[str, Any]:
        return self.store.get_geojson(state=state, district=district, entry_type=entry_type)

    def statistics(self) -> Statistics:
        return self.store.get_statistics()
