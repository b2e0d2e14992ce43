"""Claim lifecycle through ClaimService with stubbed AI flows."""
import pytest

from claimintel.core.constants import (
    ClaimStatus, ConsistencyStatus, NotificationType, PARSING_ERROR_KEY, PARSING_ERROR_MESSAGE
)
from claimintel.core.dependencies import Services
from claimintel.core.exceptions import (
    ExtractionError, FraudAssessmentError, DocumentQuestionError, PersistenceError
)
from claimintel.models.claim import ClaimCreate
from claimintel.services.claim_service import (
    EMPTY_QUESTION_ANSWER, NO_DOCUMENT_ANSWER, QA_FAILURE_ANSWER
)

from conftest import PDF_URI, PNG_URI


def titles(services):
    """Notification titles in the order they were recorded."""
    return [n.title for n in reversed(services.notifications.list_notifications())]


class TestSubmitClaim:

    async def test_full_intake(self, services, claim_form):
        claim = await services.claims.submit_claim(claim_form)

        assert claim is not None
        assert claim.id.startswith("clm_")
        assert claim.status == ClaimStatus.PENDING
        assert claim.extracted_info["policyNumber"].value == "POL-12345"
        assert claim.extracted_info["policyNumber"].bounding_box.page == 1
        assert claim.fraud_assessment.risk_score == 0.25
        assert claim.consistency_report.status == ConsistencyStatus.CONSISTENT
        assert claim.consistency_report.details[0].document_b == "police_report.pdf"
        assert titles(services) == [
            "Document Processed",
            "Fraud Assessment Complete",
            "Consistency Check Complete",
            "Claim Submitted",
        ]

    async def test_claim_details_narrative(self, services, claim_form, fraud_assessor):
        await services.claims.submit_claim(claim_form)

        details = fraud_assessor.calls[0].claim_details
        assert details.startswith(
            "Jane Doe - Rear-ended at a traffic light, bumper damaged.. "
            "Policy: POL-12345. Incident Date: 2024-03-02. Extracted Info: {"
        )
        assert '"policyNumber"' in details
        assert fraud_assessor.calls[0].supporting_document_uri == PDF_URI

    async def test_submitted_notification_message(self, services, claim_form):
        claim = await services.claims.submit_claim(claim_form)

        latest = services.notifications.list_notifications()[0]
        assert latest.title == "Claim Submitted"
        assert latest.type == NotificationType.SUCCESS
        assert latest.claim_id == claim.id
        assert latest.message == f"New claim #{claim.id[:12]}... by Jane Doe received."

    async def test_without_document(self, services, extractor):
        form = ClaimCreate(
            claimant_name="Jane Doe",
            policy_number="POL-12345",
            incident_date="2024-03-02",
            incident_description="Hail damage to the roof and windows.",
            image_names=["roof.png"],
            image_uris=[PNG_URI]
        )
        claim = await services.claims.submit_claim(form)

        assert extractor.calls == []
        assert claim.extracted_info is None
        assert claim.fraud_assessment is not None
        assert claim.consistency_report is None
        assert titles(services) == ["Fraud Assessment Complete", "Claim Submitted"]

    async def test_minimal_claim(self, services):
        form = ClaimCreate(
            claimant_name="Jane Doe",
            policy_number="POL-12345",
            incident_date="2024-03-02",
            incident_description="Minor scratch on the driver door."
        )
        claim = await services.claims.submit_claim(form)

        assert claim.status == ClaimStatus.PENDING
        assert claim.extracted_info is None
        latest = services.notifications.list_notifications()[0]
        assert latest.title == "Claim Submitted"
        assert latest.claim_id == claim.id
        assert claim.id[:12] in latest.message

    async def test_unparseable_extraction(self, services, claim_form, extractor):
        extractor.result = "this is not json"
        claim = await services.claims.submit_claim(claim_form)

        assert list(claim.extracted_info) == [PARSING_ERROR_KEY]
        assert claim.extracted_info[PARSING_ERROR_KEY].value == PARSING_ERROR_MESSAGE
        assert claim.fraud_assessment is not None
        assert claim.consistency_report is None
        assert "Document Parsing Error" in titles(services)

    async def test_empty_extraction(self, services, claim_form, extractor):
        extractor.result = ""
        claim = await services.claims.submit_claim(claim_form)

        assert claim.extracted_info is None
        assert claim.consistency_report is None
        assert titles(services) == ["Fraud Assessment Complete", "Claim Submitted"]

    async def test_extraction_failure(self, services, claim_form, extractor):
        extractor.error = ExtractionError("model unavailable", "police_report.pdf")
        claim = await services.claims.submit_claim(claim_form)

        assert claim is not None
        assert claim.extracted_info is None
        assert claim.consistency_report is None
        assert titles(services)[0] == "Document Processing Failed"

    async def test_fraud_failure(self, services, claim_form, fraud_assessor):
        fraud_assessor.error = FraudAssessmentError("invalid response")
        claim = await services.claims.submit_claim(claim_form)

        assert claim.extracted_info is not None
        assert claim.fraud_assessment is None
        assert claim.consistency_report is None
        assert titles(services) == [
            "Document Processed", "Fraud Assessment Failed", "Claim Submitted"
        ]

    async def test_persistence_failure(self, services, claim_form, monkeypatch):
        def fail(entity):
            raise PersistenceError("claims", "disk full")

        monkeypatch.setattr(services.claims.store, "save", fail)
        claim = await services.claims.submit_claim(claim_form)

        assert claim is None
        latest = services.notifications.list_notifications()[0]
        assert latest.title == "Claim Submission Failed"
        assert latest.type == NotificationType.ERROR

    async def test_claim_survives_restart(self, tmp_path, services, claim_form):
        claim = await services.claims.submit_claim(claim_form)

        reloaded = Services(
            data_dir=str(tmp_path),
            extractor=object(),
            fraud_assessor=object(),
            document_qa=object()
        ).claims.get_claim_by_id(claim.id)

        assert reloaded.model_dump() == claim.model_dump()
        assert reloaded.submission_date.tzinfo is not None


class TestClaimQueries:

    async def test_list_newest_first(self, services, claim_form):
        first = await services.claims.submit_claim(claim_form)
        second = await services.claims.submit_claim(claim_form)

        assert [c.id for c in services.claims.list_claims()] == [second.id, first.id]

    async def test_unknown_claim(self, services):
        assert services.claims.get_claim_by_id("clm_missing") is None

    async def test_search_by_status(self, services, claim_form):
        first = await services.claims.submit_claim(claim_form)
        await services.claims.submit_claim(claim_form)
        services.claims.update_claim_status(first.id, ClaimStatus.APPROVED)

        approved, total = services.claims.search_claims(status=ClaimStatus.APPROVED)
        assert total == 1
        assert approved[0].id == first.id


class TestUpdateClaimStatus:

    async def test_status_and_notes(self, services, claim_form):
        claim = await services.claims.submit_claim(claim_form)

        updated = services.claims.update_claim_status(
            claim.id, ClaimStatus.INFORMATION_REQUESTED, "Need repair estimate"
        )

        assert updated.status == ClaimStatus.INFORMATION_REQUESTED
        assert updated.notes == "Need repair estimate"
        assert updated.last_updated_date >= claim.last_updated_date
        assert services.claims.get_claim_by_id(claim.id).status == ClaimStatus.INFORMATION_REQUESTED
        assert services.notifications.list_notifications()[0].title == "Claim Updated"

    async def test_notes_kept_when_omitted(self, services, claim_form):
        claim = await services.claims.submit_claim(claim_form)
        services.claims.update_claim_status(claim.id, ClaimStatus.UNDER_REVIEW, "Checking photos")

        updated = services.claims.update_claim_status(claim.id, ClaimStatus.APPROVED)

        assert updated.status == ClaimStatus.APPROVED
        assert updated.notes == "Checking photos"

    async def test_any_transition_allowed(self, services, claim_form):
        claim = await services.claims.submit_claim(claim_form)
        services.claims.update_claim_status(claim.id, ClaimStatus.REJECTED)

        updated = services.claims.update_claim_status(claim.id, ClaimStatus.PENDING)
        assert updated.status == ClaimStatus.PENDING

    def test_unknown_claim(self, services):
        assert services.claims.update_claim_status("clm_missing", ClaimStatus.APPROVED) is None
        assert services.notifications.list_notifications() == []


class TestAskQuestion:

    async def test_answer(self, services, document_qa):
        answer = await services.claims.ask_question_on_document(PDF_URI, " What is the policy number? ", "clm_1")

        assert answer == "The policy number is POL-12345."
        assert document_qa.calls[0].question == "What is the policy number?"
        assert services.notifications.list_notifications()[0].title == "Question Answered"

    @pytest.mark.parametrize("question", ["", "   "])
    async def test_empty_question(self, services, document_qa, question):
        answer = await services.claims.ask_question_on_document(PDF_URI, question)

        assert answer == EMPTY_QUESTION_ANSWER
        assert document_qa.calls == []

    async def test_no_document(self, services, document_qa):
        answer = await services.claims.ask_question_on_document(None, "Who is the claimant?")

        assert answer == NO_DOCUMENT_ANSWER
        assert document_qa.calls == []

    async def test_failure(self, services, document_qa):
        document_qa.error = DocumentQuestionError("timeout")
        answer = await services.claims.ask_question_on_document(PDF_URI, "Who is the claimant?", "clm_1")

        assert answer == QA_FAILURE_ANSWER
        latest = services.notifications.list_notifications()[0]
        assert latest.title == "Q&A Failed"
        assert latest.type == NotificationType.ERROR
