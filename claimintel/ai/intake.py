# claimintel/ai/intake.py
"""LangGraph workflow running the AI steps of a claim submission."""

from typing import TypedDict, List, Dict, Any, Optional
import json

from langgraph.graph import StateGraph, END
from pydantic import ValidationError

from claimintel.ai.document_extraction import DocumentExtractor, ExtractDocumentInformationInput
from claimintel.ai.fraud_assessment import FraudAssessor, AssessFraudRiskInput
from claimintel.models.base import utcnow
from claimintel.models.claim import (
    ClaimCreate, ExtractedField, FraudAssessment, ConsistencyReport
)
from claimintel.services.consistency import SimulatedConsistencyChecker
from claimintel.services.notification_service import NotificationService
from claimintel.core.constants import (
    DocumentType, NotificationType, IMAGE_EXTENSIONS,
    PARSING_ERROR_KEY, PARSING_ERROR_MESSAGE
)
from claimintel.core.logging import get_logger

logger = get_logger(__name__)


# ===================
# State Definition
# ===================

class IntakeState(TypedDict):
    """State for the intake workflow."""
    # Input
    claim_id: str
    form: ClaimCreate

    # Step results
    extracted_info: Optional[Dict[str, ExtractedField]]
    extraction_succeeded: bool
    fraud_assessment: Optional[FraudAssessment]
    consistency_report: Optional[ConsistencyReport]

    # Audit trail
    steps: List[Dict[str, Any]]
    errors: List[str]


# ===================
# Helpers
# ===================

def infer_document_type(document_name: str) -> DocumentType:
    """Coarse document label from the file extension."""
    name = document_name.lower()
    if name.endswith(".pdf"):
        return DocumentType.PDF
    if name.endswith(IMAGE_EXTENSIONS):
        return DocumentType.IMAGE
    if name.endswith(".zip"):
        return DocumentType.ZIP
    return DocumentType.GENERAL


def _to_extracted_field(raw: Any) -> ExtractedField:
    if isinstance(raw, dict) and "value" in raw:
        try:
            return ExtractedField.model_validate(raw)
        except ValidationError:
            raw = raw["value"]
    if isinstance(raw, (str, dict)):
        return ExtractedField(value=raw)
    if raw is None:
        return ExtractedField(value="")
    if isinstance(raw, (bool, int, float)):
        return ExtractedField(value=str(raw))
    return ExtractedField(value=json.dumps(raw))


def parse_extracted_info(extracted_fields_json: str) -> Dict[str, ExtractedField]:
    """
    Parse the extraction flow's JSON string.

    Raises ValueError when the text is not JSON or not a JSON object.
    """
    data = json.loads(extracted_fields_json)
    if not isinstance(data, dict):
        raise ValueError("Extracted information is not a JSON object")
    return {str(key): _to_extracted_field(value) for key, value in data.items()}


def dump_extracted_info(extracted_info: Optional[Dict[str, ExtractedField]]) -> str:
    return json.dumps({
        key: field.model_dump(mode="json", exclude_none=True)
        for key, field in (extracted_info or {}).items()
    })


def build_claim_details(form: ClaimCreate, extracted_info: Optional[Dict[str, ExtractedField]]) -> str:
    """Narrative handed to the fraud assessment."""
    return (
        f"{form.claimant_name} - {form.incident_description}. "
        f"Policy: {form.policy_number}. "
        f"Incident Date: {form.incident_date}. "
        f"Extracted Info: {dump_extracted_info(extracted_info)}"
    )


class ClaimIntakeWorkflow:
    """
    Sequential AI processing of a new claim.

    Workflow:
    1. Extract document information (when a document is attached)
    2. Assess fraud risk
    3. Simulated consistency check (only when 1 and 2 both succeeded)

    Every step records a notification; no step aborts the submission.
    """

    def __init__(
        self,
        extractor: DocumentExtractor,
        fraud_assessor: FraudAssessor,
        consistency_checker: SimulatedConsistencyChecker,
        notifications: NotificationService
    ):
        self.extractor = extractor
        self.fraud_assessor = fraud_assessor
        self.consistency_checker = consistency_checker
        self.notifications = notifications
        self.graph = self._build_graph()

    def _build_graph(self):
        """Build the intake workflow graph."""
        workflow = StateGraph(IntakeState)

        workflow.add_node("extract_document", self._extract_document)
        workflow.add_node("assess_fraud", self._assess_fraud)
        workflow.add_node("check_consistency", self._check_consistency)

        workflow.set_entry_point("extract_document")
        workflow.add_edge("extract_document", "assess_fraud")
        workflow.add_edge("assess_fraud", "check_consistency")
        workflow.add_edge("check_consistency", END)

        return workflow.compile()

    @staticmethod
    def _step(state: IntakeState, name: str, status: str, details: str = "") -> List[Dict[str, Any]]:
        return state["steps"] + [{
            "step_name": name,
            "status": status,
            "details": details,
            "timestamp": utcnow().isoformat()
        }]

    def _notify(self, state: IntakeState, title: str, message: str, type: NotificationType):
        self.notifications.add_notification(title, message, type, claim_id=state["claim_id"])

    async def _extract_document(self, state: IntakeState) -> Dict:
        form = state["form"]
        if not (form.document_uri and form.document_name):
            return {"steps": self._step(state, "extract_document", "skipped", "No document attached")}

        document_type = infer_document_type(form.document_name)
        flow_input = ExtractDocumentInformationInput(
            document_data_uri=form.document_uri,
            document_type=document_type.value,
            document_name=form.document_name,
            is_directly_processable_media=document_type in (DocumentType.PDF, DocumentType.IMAGE)
        )

        try:
            result = await self.extractor.extract_document_information(flow_input)
        except Exception as e:
            logger.error(f"Error processing document with AI: {e}", claim_id=state["claim_id"])
            self._notify(
                state, "Document Processing Failed",
                f"AI could not extract info from {form.document_name}.",
                NotificationType.ERROR
            )
            return {
                "steps": self._step(state, "extract_document", "error", str(e)),
                "errors": state["errors"] + [str(e)]
            }

        if not result.extracted_fields_json:
            logger.warning("Extraction returned no content", claim_id=state["claim_id"])
            return {"steps": self._step(state, "extract_document", "warning", "Empty extraction result")}

        try:
            extracted_info = parse_extracted_info(result.extracted_fields_json)
        except ValueError as e:
            logger.error(f"Failed to parse extracted information JSON: {e}", claim_id=state["claim_id"])
            self._notify(
                state, "Document Parsing Error",
                f"Could not parse extracted info for {form.document_name}. Invalid JSON.",
                NotificationType.ERROR
            )
            return {
                "extracted_info": {PARSING_ERROR_KEY: ExtractedField(value=PARSING_ERROR_MESSAGE)},
                "steps": self._step(state, "extract_document", "error", f"Invalid JSON: {e}"),
                "errors": state["errors"] + [str(e)]
            }

        self._notify(
            state, "Document Processed",
            f"Info extracted from {form.document_name}.",
            NotificationType.SUCCESS
        )
        return {
            "extracted_info": extracted_info,
            "extraction_succeeded": True,
            "steps": self._step(state, "extract_document", "passed", f"{len(extracted_info)} fields extracted")
        }

    async def _assess_fraud(self, state: IntakeState) -> Dict:
        form = state["form"]
        flow_input = AssessFraudRiskInput(
            claim_details=build_claim_details(form, state["extracted_info"]),
            supporting_document_uri=form.document_uri,
            image_evidence_uris=form.image_uris,
            video_evidence_uri=form.video_uri
        )

        try:
            assessment = await self.fraud_assessor.assess_fraud_risk(flow_input)
        except Exception as e:
            logger.error(f"Error assessing fraud risk: {e}", claim_id=state["claim_id"])
            self._notify(
                state, "Fraud Assessment Failed",
                f"Could not assess fraud risk for {form.claimant_name}.",
                NotificationType.ERROR
            )
            return {
                "steps": self._step(state, "assess_fraud", "error", str(e)),
                "errors": state["errors"] + [str(e)]
            }

        self._notify(
            state, "Fraud Assessment Complete",
            f"Risk score: {assessment.risk_score:.2f} for claim by {form.claimant_name}.",
            NotificationType.INFO
        )
        return {
            "fraud_assessment": assessment,
            "steps": self._step(state, "assess_fraud", "passed", f"Risk score: {assessment.risk_score:.2f}")
        }

    async def _check_consistency(self, state: IntakeState) -> Dict:
        form = state["form"]
        if not (state["extraction_succeeded"] and state["fraud_assessment"] is not None):
            return {"steps": self._step(state, "check_consistency", "skipped", "Extraction or fraud assessment missing")}

        report = self.consistency_checker.run(form)
        self._notify(
            state, "Consistency Check Complete",
            f"Consistency status: {report.status.value} for claim by {form.claimant_name}.",
            NotificationType.INFO
        )
        return {
            "consistency_report": report,
            "steps": self._step(state, "check_consistency", "passed", report.status.value)
        }

    async def run(self, claim_id: str, form: ClaimCreate) -> IntakeState:
        """Run the AI steps for one submission and return the final state."""
        logger.info(f"Starting intake workflow for claim {claim_id}")
        initial_state: IntakeState = {
            "claim_id": claim_id,
            "form": form,
            "extracted_info": None,
            "extraction_succeeded": False,
            "fraud_assessment": None,
            "consistency_report": None,
            "steps": [],
            "errors": []
        }
        final_state = await self.graph.ainvoke(initial_state)
        logger.info(
            f"Intake workflow complete for {claim_id}",
            steps=len(final_state["steps"]),
            errors=len(final_state["errors"])
        )
        return final_state
