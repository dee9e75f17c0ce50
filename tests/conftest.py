"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from fra_pipeline.db import RecordStore
from fra_pipeline.main import app
from fra_pipeline.models import DocumentMetadata, RawDocument
from fra_pipeline.routes.atlas import get_pipeline
from fra_pipeline.services.pipeline import AtlasPipeline

IFR_TEXT = """Individual Forest Rights Claim (Form A)
Application No: IFR/MP/2023/001
Applicant Name: Ramesh Kumar
Father's Name: Shyam Lal
Aadhar No: 1234 5678 9012
Village: Bhedaghat
Tehsil: Jabalpur
District: Jabalpur
State: Madhya Pradesh
Land Area: 3.5 acres
Survey No: 45/2
Forest Block: FB-12
Latitude: 23.1324
Longitude: 79.8021
Tribe: Gond
ST Certificate No: ST-2020-4411
Family Members: 5
Date of Application: 15-03-2023
Status: Approved
Patta No: PT-778
"""

CFR_TEXT = """Community Forest Resource Rights Claim (Form C)
Application No: CFR/OD/2022/017
Gram Sabha Name: Baiga Chak
Panchayat: Kusumi
Village: Chada
District: Mayurbhanj
State: Odisha
Forest Area: 120.5 hectares
Forest Type: Tropical Dry Deciduous
Total Population: 450
Total Families: 85
ST Families: 60
North: Sal Forest
South: Burhner River
Coordinates: 21.9451, 86.0823; 21.9512, 86.0911; 21.9390, 86.0990
Conservation Activities: Fire protection, Plantation; Patrolling
Annual Income: Rs. 150,000
Status: Pending
"""


@pytest.fixture
def ifr_document() -> RawDocument:
    return RawDocument(extracted_text=IFR_TEXT, ner={}, confidence=0.92)


@pytest.fixture
def cfr_document() -> RawDocument:
    return RawDocument(extracted_text=CFR_TEXT, ner={}, confidence=0.88)


@pytest.fixture
def metadata() -> DocumentMetadata:
    return DocumentMetadata(document_id="doc-1", file_name="claim.pdf")


@pytest.fixture
def store() -> RecordStore:
    return RecordStore()


@pytest.fixture
def pipeline(store: RecordStore) -> AtlasPipeline:
    return AtlasPipeline(store)


@pytest.fixture
def test_client(pipeline: AtlasPipeline) -> TestClient:
    """FastAPI test client bound to a fresh, empty pipeline."""
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides = {}
