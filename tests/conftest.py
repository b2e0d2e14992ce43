"""
Pytest configuration and fixtures for ClaimIntel tests.

The AI flows are replaced by stubs so no model provider is needed.
"""
import base64
import json
import random

import pytest
from fastapi.testclient import TestClient

from claimintel.ai.document_extraction import ExtractDocumentInformationOutput
from claimintel.ai.document_qa import QaOnDocumentOutput
from claimintel.core.dependencies import Services
from claimintel.main import create_app
from claimintel.models.claim import ClaimCreate, FraudAssessment
from claimintel.services.consistency import SimulatedConsistencyChecker


def make_data_uri(content: bytes = b"%PDF-1.4 claim form", mime_type: str = "application/pdf") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


PDF_URI = make_data_uri()
PNG_URI = make_data_uri(b"\x89PNG\r\n\x1a\n", "image/png")

EXTRACTED_JSON = json.dumps({
    "policyNumber": {"value": "POL-12345", "boundingBox": {"x": 0.1, "y": 0.1, "width": 0.2, "height": 0.05, "page": 1}},
    "claimantName": {"value": "Jane Doe"},
})


# =============================================================================
# AI Stubs
# =============================================================================

class StubExtractor:
    """Returns a fixed JSON string, or raises `error` when given."""

    def __init__(self, result: str = EXTRACTED_JSON, error: Exception = None):
        self.result = result
        self.error = error
        self.calls = []

    async def extract_document_information(self, flow_input):
        self.calls.append(flow_input)
        if self.error:
            raise self.error
        return ExtractDocumentInformationOutput(extracted_fields_json=self.result)


class StubFraudAssessor:

    def __init__(self, risk_score: float = 0.25, error: Exception = None):
        self.risk_score = risk_score
        self.error = error
        self.calls = []

    async def assess_fraud_risk(self, flow_input):
        self.calls.append(flow_input)
        if self.error:
            raise self.error
        return FraudAssessment(
            risk_score=self.risk_score,
            fraud_indicators=["Late reporting"],
            summary="Low risk."
        )


class StubDocumentQA:

    def __init__(self, answer: str = "The policy number is POL-12345.", error: Exception = None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def qa_on_document(self, flow_input):
        self.calls.append(flow_input)
        if self.error:
            raise self.error
        return QaOnDocumentOutput(answer=self.answer)


class FixedRandom(random.Random):
    """Random source with a pinned draw so the consistency outcome is known."""

    def __init__(self, draw: float = 0.9):
        super().__init__(0)
        self.draw = draw

    def random(self):
        return self.draw

    def choice(self, seq):
        return seq[0]

    def randint(self, a, b):
        return 3


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def extractor():
    return StubExtractor()


@pytest.fixture
def fraud_assessor():
    return StubFraudAssessor()


@pytest.fixture
def document_qa():
    return StubDocumentQA()


@pytest.fixture
def consistency_checker():
    return SimulatedConsistencyChecker(rng=FixedRandom(0.9))


@pytest.fixture
def services(tmp_path, extractor, fraud_assessor, document_qa, consistency_checker):
    return Services(
        data_dir=str(tmp_path),
        extractor=extractor,
        fraud_assessor=fraud_assessor,
        document_qa=document_qa,
        consistency_checker=consistency_checker
    )


@pytest.fixture
def claim_form():
    return ClaimCreate(
        claimant_name="Jane Doe",
        policy_number="POL-12345",
        incident_date="2024-03-02",
        incident_description="Rear-ended at a traffic light, bumper damaged.",
        document_name="police_report.pdf",
        document_uri=PDF_URI
    )


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as test_client:
        yield test_client
