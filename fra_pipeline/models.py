# fra_pipeline/models.py
"""
Pydantic models for FRA claim records, atlas entries and pipeline I/O.

Attributes are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """JSON-safe dict with camelCase keys (what the dashboard consumes)."""
        return self.model_dump(by_alias=True, mode="json")


# -----------------------------------------------------------------------------
# Enumerations
# -----------------------------------------------------------------------------
class ClaimType(str, Enum):
    INDIVIDUAL = "IFR"
    COMMUNITY = "CFR"


class Region(str, Enum):
    """States covered by the atlas. The first member is the fallback."""
    MADHYA_PRADESH = "Madhya Pradesh"
    TRIPURA = "Tripura"
    ODISHA = "Odisha"
    TELANGANA = "Telangana"


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNDER_REVIEW = "under-review"


# -----------------------------------------------------------------------------
# Pipeline inputs (ephemeral)
# -----------------------------------------------------------------------------
class RawDocument(CamelModel):
    """OCR text plus the NER bundle produced upstream."""
    extracted_text: str = ""
    # persons / locations / dates / numbers / organizations -> ordered values
    ner: Dict[str, List[str]] = Field(default_factory=dict)
    confidence: Optional[float] = None


class DocumentMetadata(CamelModel):
    document_id: Optional[str] = None
    file_name: Optional[str] = None
    uploaded_at: datetime = Field(default_factory=utcnow)


class SubmitRequest(CamelModel):
    ocr_data: RawDocument
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)


# -----------------------------------------------------------------------------
# Canonical records
# -----------------------------------------------------------------------------
class Coordinates(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    type: Literal["Point"] = "Point"


class LatLon(CamelModel):
    latitude: float
    longitude: float


class Boundaries(CamelModel):
    north: Optional[str] = None
    south: Optional[str] = None
    east: Optional[str] = None
    west: Optional[str] = None


class SourceDocument(CamelModel):
    document_id: Optional[str] = None
    file_name: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    ocr_confidence: Optional[float] = None


class SchemeEligibility(CamelModel):
    eligible: bool
    reason: str
    name: str
    description: str
    benefit: str
    ministry: str


class ClaimRecord(CamelModel):
    """Fields shared by individual and community claims."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    application_number: str
    village: Optional[str] = None
    tehsil: Optional[str] = None
    district: Optional[str] = None
    state: Region = Region.MADHYA_PRADESH

    claim_status: ClaimStatus = ClaimStatus.UNDER_REVIEW
    application_date: Optional[datetime] = None
    approval_date: Optional[datetime] = None
    patta_number: Optional[str] = None

    tribe: Optional[str] = None
    st_certificate_number: Optional[str] = None

    extracted_entities: Dict[str, List[str]] = Field(default_factory=dict)
    source_document: SourceDocument = Field(default_factory=SourceDocument)

    eligible_schemes: Dict[str, SchemeEligibility] = Field(default_factory=dict)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IndividualRecord(ClaimRecord):
    record_type: Literal["IFR"] = "IFR"

    applicant_name: Optional[str] = None
    father_name: Optional[str] = None
    aadhar_number: Optional[str] = None

    land_area: float = Field(default=0, ge=0)  # acres
    survey_number: Optional[str] = None
    forest_block: Optional[str] = None
    coordinates: Coordinates = Field(default_factory=Coordinates)

    family_members: int = Field(default=0, ge=0)


class CommunityRecord(ClaimRecord):
    record_type: Literal["CFR"] = "CFR"

    gram_sabha_name: Optional[str] = None
    panchayat: Optional[str] = None

    forest_area: float = Field(default=0, ge=0)  # hectares
    forest_department_record_no: Optional[str] = None
    forest_type: Optional[str] = None
    forest_density: Optional[str] = None

    total_population: int = Field(default=0, ge=0)
    total_families: int = Field(default=0, ge=0)
    st_families: int = Field(default=0, ge=0)

    boundaries: Boundaries = Field(default_factory=Boundaries)
    polygon_coordinates: List[LatLon] = Field(default_factory=list)

    conservation_activities: List[str] = Field(default_factory=list)
    annual_income: float = Field(default=0, ge=0)


CanonicalRecord = Annotated[
    Union[IndividualRecord, CommunityRecord],
    Field(discriminator="record_type"),
]
RECORD_ADAPTER: TypeAdapter = TypeAdapter(CanonicalRecord)


# -----------------------------------------------------------------------------
# Atlas
# -----------------------------------------------------------------------------
class AtlasGeometry(CamelModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Point", "Polygon"]
    # Point: [lon, lat]; Polygon: [[lon, lat], ...]
    coordinates: List[Any]


class AtlasEntry(CamelModel):
    """Read-only map projection of one claim record."""
    model_config = ConfigDict(frozen=True)

    id: str
    entry_id: str
    entry_type: ClaimType
    reference_id: str
    state: Region
    district: Optional[str] = None
    tehsil: Optional[str] = None
    village: Optional[str] = None
    geometry: AtlasGeometry
    properties: Dict[str, Any] = Field(default_factory=dict)
    claim_status: ClaimStatus
    submitted_date: Optional[datetime] = None
    approved_date: Optional[datetime] = None
    eligible_schemes: Dict[str, bool] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)


# -----------------------------------------------------------------------------
# Outputs
# -----------------------------------------------------------------------------
class Statistics(CamelModel):
    total: int
    individual_count: int
    community_count: int
    count_by_state: Dict[str, int]
    last_updated: datetime


class MapCoordinates(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class SubmissionResult(CamelModel):
    record_id: str
    record_type: ClaimType
    data: CanonicalRecord
    eligible_schemes: Dict[str, SchemeEligibility]
    map_coordinates: MapCoordinates = Field(default_factory=MapCoordinates)
