# claimintel/ai/document_qa.py
"""Question answering over a single document."""

from pydantic import BaseModel, Field

from claimintel.ai.llm import LLMService
from claimintel.ai.media import text_part, media_part
from claimintel.core.logging import get_logger
from claimintel.core.exceptions import DocumentQuestionError

logger = get_logger(__name__)


class QaOnDocumentInput(BaseModel):
    document_data_uri: str
    question: str = Field(..., min_length=1)


class QaOnDocumentOutput(BaseModel):
    answer: str


QA_PROMPT = """You are a helpful AI assistant. Your task is to answer the user's question based *solely* on the content of the provided document.
Do not use any external knowledge. If the answer cannot be found within the document, clearly state that the information is not present in the document."""

QUESTION_TEMPLATE = """User's Question:
"{question}"

Based *only* on the document provided, what is the answer?"""


class DocumentQA:
    """Answer free-text questions about a document."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    async def qa_on_document(self, flow_input: QaOnDocumentInput) -> QaOnDocumentOutput:
        logger.info(f"Answering question: {flow_input.question[:100]}")
        try:
            parts = [
                text_part(QA_PROMPT),
                text_part("Document:"),
                media_part(flow_input.document_data_uri),
                text_part(QUESTION_TEMPLATE.format(question=flow_input.question)),
            ]
            answer = await self.llm.invoke(parts)
        except Exception as e:
            logger.error(f"Document Q&A failed: {e}")
            raise DocumentQuestionError(str(e))
        return QaOnDocumentOutput(answer=answer.strip())
