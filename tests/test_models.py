"""Validation rules on the claim models."""
import pytest
from pydantic import ValidationError

from claimintel.models.base import generate_id
from claimintel.models.claim import ClaimCreate, FraudAssessment, BoundingBox

from conftest import PNG_URI


def form(**overrides):
    data = {
        "claimant_name": "Jane Doe",
        "policy_number": "POL-12345",
        "incident_date": "2024-03-02",
        "incident_description": "Water damage in the kitchen.",
    }
    data.update(overrides)
    return data


class TestClaimCreate:

    def test_valid_form_is_trimmed(self):
        claim = ClaimCreate(**form(claimant_name="  Jane Doe ", policy_number=" POL-12345 "))
        assert claim.claimant_name == "Jane Doe"
        assert claim.policy_number == "POL-12345"

    @pytest.mark.parametrize("field,value,message", [
        ("claimant_name", "J", "Claimant name must be at least 2 characters"),
        ("policy_number", "P-1", "Policy number must be at least 5 characters"),
        ("incident_date", "03/02/2024", "Invalid date format"),
        ("incident_date", "2024-03-02garbage", "Invalid date format"),
        ("incident_description", "Too short", "Description must be at least 10 characters"),
    ])
    def test_field_rules(self, field, value, message):
        with pytest.raises(ValidationError) as exc_info:
            ClaimCreate(**form(**{field: value}))
        assert message in str(exc_info.value)

    def test_datetime_incident_date_accepted(self):
        assert ClaimCreate(**form(incident_date="2024-03-02T10:30:00Z")).incident_date == "2024-03-02T10:30:00Z"

    def test_image_names_must_match_uris(self):
        with pytest.raises(ValidationError):
            ClaimCreate(**form(image_names=["a.png", "b.png"], image_uris=[PNG_URI]))


class TestFraudAssessment:

    def test_camel_case_payload(self):
        assessment = FraudAssessment.model_validate({
            "riskScore": 0.8,
            "fraudIndicators": ["Inconsistent dates"],
            "summary": "Dates do not line up."
        })
        assert assessment.risk_score == 0.8
        assert assessment.fraud_indicators == ["Inconsistent dates"]

    @pytest.mark.parametrize("raw,expected", [(1.7, 1.0), (-0.2, 0.0), ("0.35", 0.35)])
    def test_score_clamped(self, raw, expected):
        assert FraudAssessment(risk_score=raw).risk_score == expected

    @pytest.mark.parametrize("raw", [None, "high"])
    def test_score_must_be_numeric(self, raw):
        with pytest.raises(ValidationError):
            FraudAssessment(risk_score=raw)


class TestBoundingBox:

    def test_normalized_coordinates(self):
        with pytest.raises(ValidationError):
            BoundingBox(x=1.5, y=0, width=0.1, height=0.1)

    def test_page_is_one_indexed(self):
        with pytest.raises(ValidationError):
            BoundingBox(x=0, y=0, width=0.1, height=0.1, page=0)


class TestGenerateId:

    def test_prefix_and_shape(self):
        prefix, millis, counter, suffix = generate_id("clm").split("_")
        assert prefix == "clm"
        assert millis.isdigit() and counter.isdigit()
        assert len(suffix) == 8

    def test_unique_within_one_millisecond(self, monkeypatch):
        monkeypatch.setattr("claimintel.models.base.time.time", lambda: 1700000000.0)
        ids = {generate_id("clm") for _ in range(2000)}
        assert len(ids) == 2000
