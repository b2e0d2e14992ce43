# claimintel/ai/fraud_assessment.py
"""Fraud risk assessment flow."""

from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError

from claimintel.ai.llm import LLMService
from claimintel.ai.media import text_part, media_part, labelled_media
from claimintel.models.claim import FraudAssessment
from claimintel.core.logging import get_logger
from claimintel.core.exceptions import FraudAssessmentError

logger = get_logger(__name__)


class AssessFraudRiskInput(BaseModel):
    claim_details: str = Field(..., description="Details of the claim, including all relevant information.")
    supporting_document_uri: Optional[str] = None
    image_evidence_uris: Optional[List[str]] = None
    video_evidence_uri: Optional[str] = None
    claim_history: Optional[str] = None


FRAUD_PROMPT = """You are an expert fraud analyst specializing in insurance claims.

Analyze the provided claim details, supporting document, image evidence, video evidence, and claim history to assess the risk of fraud.
Provide a risk score between 0 and 1, where 1 indicates the highest risk.
Highlight any specific fraud indicators or suspicious patterns.
Provide a summary of your assessment.
If image or video evidence is provided and it influences your assessment, briefly mention what you observed in the media.

Claim Details: {claim_details}
Claim History: {claim_history}"""

OUTPUT_FORMAT = """Return JSON:
{
  "risk_score": 0.0-1.0,
  "fraud_indicators": ["list of specific indicators"],
  "summary": "summary of the assessment"
}"""


class FraudAssessor:
    """Score the fraud risk of a claim from its narrative and media."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    def build_prompt(self, flow_input: AssessFraudRiskInput) -> list:
        parts = [text_part(FRAUD_PROMPT.format(
            claim_details=flow_input.claim_details,
            claim_history=flow_input.claim_history or "None"
        ))]
        parts.extend(labelled_media("Supporting Document:", flow_input.supporting_document_uri))

        if flow_input.image_evidence_uris:
            parts.append(text_part("Image Evidence:"))
            for uri in flow_input.image_evidence_uris:
                parts.append(text_part("Image:"))
                parts.append(media_part(uri))
        else:
            parts.append(text_part("Image Evidence: None"))

        parts.extend(labelled_media("Video Evidence:", flow_input.video_evidence_uri))
        parts.append(text_part(OUTPUT_FORMAT))
        return parts

    async def assess_fraud_risk(self, flow_input: AssessFraudRiskInput) -> FraudAssessment:
        logger.info("Assessing fraud risk")
        try:
            result = await self.llm.invoke_with_json_async(self.build_prompt(flow_input))
            assessment = FraudAssessment.model_validate(result)
        except (ValidationError, TypeError) as e:
            logger.error(f"Fraud assessment returned an invalid payload: {e}")
            raise FraudAssessmentError(f"invalid response: {e}")
        except Exception as e:
            logger.error(f"Fraud assessment failed: {e}")
            raise FraudAssessmentError(str(e))

        logger.info(f"Fraud assessment complete: score={assessment.risk_score:.2f}")
        return assessment
