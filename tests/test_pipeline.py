"""End-to-end tests for the document -> atlas pipeline."""

import pytest
from pydantic import ValidationError

from fra_pipeline.models import ClaimType, DocumentMetadata, RawDocument, Region
from fra_pipeline.services.pipeline import AtlasPipeline


class TestSubmit:
    def test_individual_submission(self, pipeline: AtlasPipeline, ifr_document, metadata) -> None:
        result = pipeline.submit(ifr_document, metadata)

        assert result.record_id == "FRA_1"
        assert result.record_type == ClaimType.INDIVIDUAL
        assert result.data.id == "FRA_1"
        assert result.data.eligible_schemes == result.eligible_schemes
        assert result.eligible_schemes["pmKisan"].eligible is True
        assert result.eligible_schemes["dajgua"].eligible is True
        assert result.eligible_schemes["forestConservation"].eligible is False
        assert (result.map_coordinates.latitude, result.map_coordinates.longitude) == (23.1324, 79.8021)

        stored = pipeline.get_record("FRA_1")
        assert stored.eligible_schemes == result.eligible_schemes

    def test_community_submission(self, pipeline: AtlasPipeline, cfr_document, metadata) -> None:
        result = pipeline.submit(cfr_document, metadata)

        assert result.record_type == ClaimType.COMMUNITY
        assert result.map_coordinates.latitude is None
        assert result.map_coordinates.longitude is None
        assert result.eligible_schemes["forestConservation"].eligible is True
        assert "120.5 hectares" in result.eligible_schemes["forestConservation"].reason
        assert result.eligible_schemes["jalJeevanMission"].eligible is False
        assert result.eligible_schemes["pmKisan"].eligible is False

        feature = pipeline.geojson()["features"][0]
        assert feature["geometry"]["type"] == "Polygon"
        assert len(feature["geometry"]["coordinates"]) == 3
        assert feature["properties"]["eligibleSchemes"]["mgnrega"] is False

    def test_minimal_individual_document(self, pipeline: AtlasPipeline) -> None:
        text = "Individual Forest Rights\nVillage: Bhedaghat\nLand Area: 3.5 acres"
        result = pipeline.submit(RawDocument(extracted_text=text, ner={}), DocumentMetadata())

        assert result.record_type == ClaimType.INDIVIDUAL
        assert result.data.village == "Bhedaghat"
        assert result.data.land_area == 3.5
        assert result.data.state == Region.MADHYA_PRADESH
        assert result.data.application_number.startswith("IFR/Madhya Pradesh/")
        assert "3.5" in result.eligible_schemes["pmKisan"].reason
        assert result.eligible_schemes["jalJeevanMission"].eligible is True

    def test_community_without_forest_area(self, pipeline: AtlasPipeline) -> None:
        result = pipeline.submit(RawDocument(extracted_text="Community Forest Resource claim"))
        assert result.data.forest_area == 0
        assert result.eligible_schemes["forestConservation"].eligible is True

    def test_unmarked_document_defaults_to_individual(self, pipeline: AtlasPipeline) -> None:
        result = pipeline.submit(RawDocument(extracted_text="illegible scan"))
        assert result.record_type == ClaimType.INDIVIDUAL

    def test_preview_does_not_store(self, pipeline: AtlasPipeline, ifr_document) -> None:
        record = pipeline.preview(ifr_document)
        assert record.id is None
        assert set(record.eligible_schemes) == {
            "pmKisan", "jalJeevanMission", "mgnrega", "dajgua", "pmay", "forestConservation",
        }
        assert pipeline.list_records() == []

    def test_store_errors_propagate(self, pipeline: AtlasPipeline, ifr_document, monkeypatch) -> None:
        def _reject(record):
            raise ValueError("store unavailable")

        monkeypatch.setattr(pipeline.store, "save", _reject)
        with pytest.raises(ValueError, match="store unavailable"):
            pipeline.submit(ifr_document)


class TestQueries:
    def _submit(self, pipeline, state, district, marker="Individual Forest Rights"):
        text = f"{marker}\nDistrict: {district}\nState: {state}"
        return pipeline.submit(RawDocument(extracted_text=text))

    def test_list_records_filters_combine(self, pipeline: AtlasPipeline) -> None:
        self._submit(pipeline, "Odisha", "Koraput")
        self._submit(pipeline, "Odisha", "Rayagada")
        self._submit(pipeline, "Tripura", "Koraput")

        assert len(pipeline.list_records()) == 3
        assert [r.district for r in pipeline.list_records(state="Odisha")] == ["Koraput", "Rayagada"]
        assert len(pipeline.list_records(district="Koraput")) == 2
        assert [r.state for r in pipeline.list_records(state="Odisha", district="Koraput")] == [Region.ODISHA]

    def test_statistics(self, pipeline: AtlasPipeline) -> None:
        self._submit(pipeline, "Telangana", "Adilabad")
        self._submit(pipeline, "Telangana", "Adilabad", marker="Community Forest")

        stats = pipeline.statistics()
        assert stats.total == 2
        assert stats.individual_count == 1
        assert stats.community_count == 1
        assert stats.count_by_state == {"Telangana": 2}

    def test_geojson_type_filter(self, pipeline: AtlasPipeline) -> None:
        self._submit(pipeline, "Odisha", "Koraput")
        self._submit(pipeline, "Odisha", "Koraput", marker="Community Forest")

        features = pipeline.geojson(entry_type=ClaimType.COMMUNITY)["features"]
        assert len(features) == 1
        assert features[0]["properties"]["entryType"] == "CFR"


def test_invalid_document_is_rejected() -> None:
    with pytest.raises(ValidationError):
        RawDocument(extracted_text="x", ner={"persons": "not a list"})
