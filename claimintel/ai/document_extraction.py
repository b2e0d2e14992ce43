# claimintel/ai/document_extraction.py
"""Document information extraction flow."""

from typing import Optional
from pydantic import BaseModel, Field

from claimintel.ai.llm import LLMService, strip_code_fences
from claimintel.ai.media import text_part, media_part
from claimintel.core.logging import get_logger
from claimintel.core.exceptions import ExtractionError

logger = get_logger(__name__)


# ===================
# Flow Schemas
# ===================

class ExtractDocumentInformationInput(BaseModel):
    document_data_uri: str = Field(
        ..., description="Document as a data URI: 'data:<mimetype>;base64,<encoded_data>'."
    )
    document_type: str = Field(..., description="Type of the document (e.g. PDF Document, Image).")
    document_name: Optional[str] = None
    is_directly_processable_media: Optional[bool] = None


class ExtractDocumentInformationOutput(BaseModel):
    extracted_fields_json: str = Field(
        ..., description="JSON string of a key/value object holding the extracted information."
    )


# ===================
# Extraction Prompt
# ===================

EXTRACTION_PROMPT = """You are an expert document processor specializing in extracting information from insurance claim documents.

Document Type: {document_type}
Document Name: {document_name}

Extract all relevant information from the document.
Return a single JSON object. Each key is a field name; each value is an object with:
- "value": the extracted text, or a nested object for grouped data
- "boundingBox": optional {{"x", "y", "width", "height"}} normalized to 0-1 plus a 1-indexed "page", or null

Be as comprehensive as possible with the keys and values.

Example:
{{"policyNumber": {{"value": "1234567890", "boundingBox": {{"x": 0.1, "y": 0.05, "width": 0.3, "height": 0.02, "page": 1}}}},
 "claimantName": {{"value": "John Doe", "boundingBox": null}},
 "dateOfAccident": {{"value": "2024-01-01"}}}}

Respond with the JSON object only. No markdown, no explanation."""

ARCHIVE_NOTE = """The document could not be rendered directly (it may be an archive).
Extract whatever you can and include a "processingNote" field explaining any limitation."""


class DocumentExtractor:
    """Extract structured fields from a claim document."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    def build_prompt(self, flow_input: ExtractDocumentInformationInput) -> list:
        prompt = EXTRACTION_PROMPT.format(
            document_type=flow_input.document_type,
            document_name=flow_input.document_name or "unknown"
        )
        parts = [text_part(prompt)]
        if flow_input.is_directly_processable_media is False:
            parts.append(text_part(ARCHIVE_NOTE))
        parts.append(text_part("Document:"))
        parts.append(media_part(flow_input.document_data_uri))
        return parts

    async def extract_document_information(
        self,
        flow_input: ExtractDocumentInformationInput
    ) -> ExtractDocumentInformationOutput:
        """Return the model's JSON string; parsing is left to the caller."""
        logger.info(
            "Extracting document information",
            document_type=flow_input.document_type,
            document_name=flow_input.document_name
        )
        try:
            raw = await self.llm.invoke(self.build_prompt(flow_input))
        except Exception as e:
            logger.error(f"Document extraction failed: {e}")
            raise ExtractionError(str(e), flow_input.document_name)

        return ExtractDocumentInformationOutput(extracted_fields_json=strip_code_fences(raw))
