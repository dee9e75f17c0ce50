# fra_pipeline/routes/atlas.py
import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile

from fra_pipeline.config import UPLOAD_DIR
from fra_pipeline.models import ClaimType, DocumentMetadata, RawDocument, Region, SubmitRequest
from fra_pipeline.ner import build_raw_document
from fra_pipeline.ocr import extract_text
from fra_pipeline.services.classifier import classify
from fra_pipeline.services.pipeline import AtlasPipeline

router = APIRouter(prefix="/api/fra-atlas", tags=["fra-atlas"])
logger = logging.getLogger(__name__)


def get_pipeline(request: Request) -> AtlasPipeline:
    return request.app.state.pipeline


def _submission_body(result) -> dict:
    body = result.to_json_dict()
    return {"success": True, "message": "FRA document processed successfully", **body}


def _save_upload(file: UploadFile) -> Path:
    ext = Path(file.filename).suffix.lower() if file.filename else ""
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    path = UPLOAD_DIR / f"{uuid.uuid4().hex}{ext or '.pdf'}"
    with open(path, "wb") as f:
        shutil.copyfileobj(file.file, f)
    return path


def _read_upload(file: UploadFile) -> Tuple[RawDocument, str]:
    """OCR + NER on an uploaded PDF. The temp copy is always removed afterwards."""
    path = _save_upload(file)
    try:
        text, confidence = extract_text(str(path))
    finally:
        path.unlink(missing_ok=True)
    return build_raw_document(text, confidence), path.stem


# =========================
# SUBMISSION
# =========================

@router.post("/submit")
def submit_document(payload: SubmitRequest, pipeline: AtlasPipeline = Depends(get_pipeline)):
    """Run one OCR/NER bundle through the pipeline and store the result."""
    try:
        result = pipeline.submit(payload.ocr_data, payload.metadata)
        return _submission_body(result)
    except Exception as e:
        logger.exception("submit failed file=%s", payload.metadata.file_name)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/upload")
def upload_document(file: UploadFile = File(...), pipeline: AtlasPipeline = Depends(get_pipeline)):
    """
    Upload an FRA claim PDF, run OCR + NER and submit it.
    The PDF itself is not kept. Response has the same shape as /submit.
    """
    try:
        document, document_id = _read_upload(file)
        metadata = DocumentMetadata(document_id=document_id, file_name=file.filename)
        result = pipeline.submit(document, metadata)
        return _submission_body(result)
    except Exception as e:
        logger.exception("upload failed file=%s", file.filename)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/parse")
def parse_document(file: UploadFile = File(...)):
    """
    OCR + NER only, for client-side review before submitting.
    Does NOT store anything; the uploaded PDF is deleted after OCR.
    """
    try:
        document, _ = _read_upload(file)
        return {
            "filename": file.filename,
            "extractedText": document.extracted_text,
            "ner": document.ner,
            "confidence": document.confidence,
            "recordType": classify(document.extracted_text).value,
        }
    except Exception as e:
        logger.exception("parse failed file=%s", file.filename)
        raise HTTPException(status_code=500, detail=str(e))


# =========================
# QUERIES
# =========================

@router.get("/records")
def list_records(
    state: Optional[Region] = None,
    district: Optional[str] = None,
    pipeline: AtlasPipeline = Depends(get_pipeline),
):
    """Stored records; state and district filters combine."""
    try:
        records = pipeline.list_records(state=state, district=district)
        return {
            "success": True,
            "count": len(records),
            "records": [r.to_json_dict() for r in records],
        }
    except Exception as e:
        logger.exception("list_records failed: state=%s district=%s", state, district)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/records/{record_id}")
def get_record(record_id: str, pipeline: AtlasPipeline = Depends(get_pipeline)):
    try:
        record = pipeline.get_record(record_id)
        if not record:
            raise HTTPException(status_code=404, detail="Record not found")
        return {"success": True, "record": record.to_json_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("get_record failed id=%s", record_id)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/geojson")
def get_geojson(
    state: Optional[Region] = None,
    district: Optional[str] = None,
    entry_type: Optional[ClaimType] = Query(None, alias="type"),
    pipeline: AtlasPipeline = Depends(get_pipeline),
):
    try:
        return pipeline.geojson(state=state, district=district, entry_type=entry_type)
    except Exception as e:
        logger.exception("geojson failed: state=%s district=%s type=%s", state, district, entry_type)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/statistics")
def get_statistics(pipeline: AtlasPipeline = Depends(get_pipeline)):
    try:
        return {"success": True, "statistics": pipeline.statistics().to_json_dict()}
    except Exception as e:
        logger.exception("statistics failed")
        raise HTTPException(status_code=500, detail=str(e))
