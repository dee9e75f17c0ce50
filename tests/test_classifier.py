"""Tests for IFR / CFR document classification."""

import logging

from fra_pipeline.models import ClaimType
from fra_pipeline.services.classifier import classify, classify_document


class TestClassifier:
    def test_individual_marker(self) -> None:
        result = classify_document("Claim under Individual Forest Rights, Form A")
        assert result.claim_type == ClaimType.INDIVIDUAL
        assert result.marker == "individual forest rights"
        assert result.defaulted is False

    def test_community_marker(self) -> None:
        assert classify("COMMUNITY FOREST resource rights of the gram sabha") == ClaimType.COMMUNITY

    def test_abbreviations(self) -> None:
        assert classify("Form: CFR") == ClaimType.COMMUNITY
        assert classify("Form: IFR") == ClaimType.INDIVIDUAL

    def test_hindi_markers(self) -> None:
        assert classify("व्यक्तिगत वन अधिकार दावा") == ClaimType.INDIVIDUAL
        assert classify("सामुदायिक वन संसाधन अधिकार") == ClaimType.COMMUNITY

    def test_individual_checked_before_community(self) -> None:
        text = "Community forest adjacent to the Individual Forest Rights plot"
        assert classify(text) == ClaimType.INDIVIDUAL

    def test_unmarked_text_defaults_to_individual(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="fra_pipeline.services.classifier"):
            result = classify_document("Some scanned page with no form header")
        assert result.claim_type == ClaimType.INDIVIDUAL
        assert result.defaulted is True
        assert result.marker is None
        assert "defaulting" in caplog.text

    def test_empty_and_none_text(self) -> None:
        assert classify("") == ClaimType.INDIVIDUAL
        assert classify(None) == ClaimType.INDIVIDUAL
