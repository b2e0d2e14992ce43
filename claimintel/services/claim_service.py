# claimintel/services/claim_service.py
"""Claim lifecycle: intake, lookup, status updates and document Q&A."""

from typing import List, Optional, Tuple

from claimintel.ai.intake import ClaimIntakeWorkflow
from claimintel.ai.document_qa import DocumentQA, QaOnDocumentInput
from claimintel.models.base import generate_id, utcnow
from claimintel.models.claim import Claim, ClaimCreate
from claimintel.services.notification_service import NotificationService
from claimintel.storage.claim_store import ClaimStore
from claimintel.core.constants import ClaimStatus, NotificationType
from claimintel.core.logging import get_logger

logger = get_logger(__name__)

EMPTY_QUESTION_ANSWER = "Please type a question."
NO_DOCUMENT_ANSWER = "This claim does not have a document to ask questions about."
QA_FAILURE_ANSWER = "Sorry, the AI could not answer your question about this document. Please try again later."


def short_id(claim_id: str) -> str:
    return f"{claim_id[:12]}..."


class ClaimService:
    """Single source of truth for claims, shared by every API surface."""

    def __init__(
        self,
        store: ClaimStore,
        notifications: NotificationService,
        intake: ClaimIntakeWorkflow,
        document_qa: DocumentQA
    ):
        self.store = store
        self.notifications = notifications
        self.intake = intake
        self.document_qa = document_qa

    async def submit_claim(self, form: ClaimCreate) -> Optional[Claim]:
        """
        Run the intake workflow and persist the resulting claim.

        AI failures only leave fields unset. Anything that goes wrong while
        assembling or persisting the claim is reported as a notification and
        None is returned.
        """
        claim_id = generate_id("clm")
        try:
            state = await self.intake.run(claim_id, form)

            submitted_at = utcnow()
            claim = Claim(
                id=claim_id,
                claimant_name=form.claimant_name,
                policy_number=form.policy_number,
                incident_date=form.incident_date,
                incident_description=form.incident_description,
                document_name=form.document_name,
                document_uri=form.document_uri,
                image_names=form.image_names,
                image_uris=form.image_uris,
                video_name=form.video_name,
                video_uri=form.video_uri,
                status=ClaimStatus.PENDING,
                submission_date=submitted_at,
                last_updated_date=submitted_at,
                extracted_info=state["extracted_info"],
                fraud_assessment=state["fraud_assessment"],
                consistency_report=state["consistency_report"],
            )

            self.store.save(claim)
            saved = self.store.find_by_id(claim_id) or claim
        except Exception as e:
            logger.exception(f"Error adding claim: {e}")
            self.notifications.add_notification(
                "Claim Submission Failed",
                "There was an error submitting the claim.",
                NotificationType.ERROR
            )
            return None

        self.notifications.add_notification(
            "Claim Submitted",
            f"New claim #{short_id(claim_id)} by {saved.claimant_name} received.",
            NotificationType.SUCCESS,
            claim_id=claim_id
        )
        logger.info(f"Claim submitted: {claim_id}")
        return saved

    def update_claim_status(
        self,
        claim_id: str,
        status: ClaimStatus,
        notes: Optional[str] = None
    ) -> Optional[Claim]:
        """Overwrite status (any transition allowed); notes only when given."""
        claim = self.store.find_by_id(claim_id)
        if claim is None:
            logger.warning(f"Status update for unknown claim {claim_id}")
            return None

        update = {"status": status, "last_updated_date": utcnow()}
        if notes:
            update["notes"] = notes
        updated = claim.model_copy(update=update)
        self.store.save(updated)

        self.notifications.add_notification(
            "Claim Updated",
            f"Claim #{short_id(claim_id)} status changed to {status.value}.",
            NotificationType.INFO,
            claim_id=claim_id
        )
        return updated

    def get_claim_by_id(self, claim_id: str) -> Optional[Claim]:
        return self.store.find_by_id(claim_id)

    def list_claims(self) -> List[Claim]:
        """All claims, newest submission first."""
        return self.store.list_by_submission_date()

    def search_claims(
        self,
        status: Optional[ClaimStatus] = None,
        policy_number: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Claim], int]:
        return self.store.search(status=status, policy_number=policy_number, skip=skip, limit=limit)

    async def ask_question_on_document(
        self,
        document_data_uri: Optional[str],
        question: str,
        claim_id: Optional[str] = None
    ) -> str:
        """Answer a question about a document; failures become a message."""
        question = (question or "").strip()
        if not question:
            return EMPTY_QUESTION_ANSWER
        if not document_data_uri:
            return NO_DOCUMENT_ANSWER

        try:
            result = await self.document_qa.qa_on_document(
                QaOnDocumentInput(document_data_uri=document_data_uri, question=question)
            )
        except Exception as e:
            logger.error(f"Error answering question on document: {e}", claim_id=claim_id)
            self.notifications.add_notification(
                "Q&A Failed",
                "The AI could not answer your question about the document.",
                NotificationType.ERROR,
                claim_id=claim_id
            )
            return QA_FAILURE_ANSWER

        target = f"claim #{short_id(claim_id)}" if claim_id else "the document"
        self.notifications.add_notification(
            "Question Answered",
            f"AI answered a question about {target}.",
            NotificationType.INFO,
            claim_id=claim_id
        )
        return result.answer
