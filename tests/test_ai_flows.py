"""AI flows driven by a fake chat model."""
import pytest
from langchain_core.language_models import FakeListChatModel

from claimintel.ai.document_extraction import DocumentExtractor, ExtractDocumentInformationInput
from claimintel.ai.document_qa import DocumentQA, QaOnDocumentInput
from claimintel.ai.fraud_assessment import FraudAssessor, AssessFraudRiskInput
from claimintel.ai.llm import LLMProvider, LLMService, strip_code_fences
from claimintel.core.config import settings
from claimintel.core.exceptions import DocumentQuestionError, FraudAssessmentError, LLMConnectionError

from conftest import PDF_URI, PNG_URI


class FakeProvider(LLMProvider):

    name = "fake"

    def __init__(self, *responses):
        super().__init__()
        self.responses = list(responses)

    def _create_model(self):
        return FakeListChatModel(responses=self.responses)


def llm(*responses) -> LLMService:
    return LLMService(provider=FakeProvider(*responses))


class TestLLMService:

    @pytest.mark.parametrize("raw,expected", [
        ('```json\n{"a": 1}\n```', '{"a": 1}'),
        ('```\n{"a": 1}```', '{"a": 1}'),
        ('  {"a": 1} ', '{"a": 1}'),
    ])
    def test_strip_code_fences(self, raw, expected):
        assert strip_code_fences(raw) == expected

    async def test_invoke(self):
        assert await llm("hello").invoke("Say hello") == "hello"

    async def test_invoke_with_json(self):
        assert await llm('```json\n{"ok": true}\n```').invoke_with_json_async("Check") == {"ok": True}

    def test_invalid_json(self):
        with pytest.raises(ValueError):
            llm("not json").invoke_with_json("Check")

    def test_model_built_once(self):
        provider = FakeProvider("a")
        assert provider.get_model() is provider.get_model()

    def test_model_construction_failure(self):
        class BrokenProvider(FakeProvider):
            def _create_model(self):
                raise RuntimeError("missing api key")

        with pytest.raises(LLMConnectionError) as exc_info:
            BrokenProvider().get_model()
        assert exc_info.value.details == {"provider": "fake"}

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setattr(settings, "LLM_PROVIDER", "openai")
        with pytest.raises(ValueError):
            LLMService()


class TestDocumentExtractor:

    async def test_returns_unfenced_json(self):
        extractor = DocumentExtractor(llm('```json\n{"claimantName": {"value": "Jane"}}\n```'))
        result = await extractor.extract_document_information(ExtractDocumentInformationInput(
            document_data_uri=PNG_URI,
            document_type="Image",
            document_name="claim.png",
            is_directly_processable_media=True
        ))
        assert result.extracted_fields_json == '{"claimantName": {"value": "Jane"}}'

    def test_archive_note_only_for_unprocessable_media(self):
        extractor = DocumentExtractor(llm())
        direct = extractor.build_prompt(ExtractDocumentInformationInput(
            document_data_uri=PDF_URI, document_type="PDF Document", is_directly_processable_media=True
        ))
        archive = extractor.build_prompt(ExtractDocumentInformationInput(
            document_data_uri="data:application/zip;base64,UEsDBA==",
            document_type="ZIP Archive",
            is_directly_processable_media=False
        ))
        assert len(archive) == len(direct) + 1
        assert archive[-1]["mime_type"] == "application/zip"


class TestFraudAssessor:

    async def test_assessment(self):
        assessor = FraudAssessor(llm('{"riskScore": 1.3, "fraudIndicators": ["Staged photos"], "summary": "Suspicious."}'))
        assessment = await assessor.assess_fraud_risk(AssessFraudRiskInput(
            claim_details="Jane Doe - hail damage.",
            image_evidence_uris=[PNG_URI]
        ))
        assert assessment.risk_score == 1.0
        assert assessment.fraud_indicators == ["Staged photos"]

    async def test_missing_score(self):
        assessor = FraudAssessor(llm('{"summary": "No score"}'))
        with pytest.raises(FraudAssessmentError):
            await assessor.assess_fraud_risk(AssessFraudRiskInput(claim_details="x"))

    async def test_not_json(self):
        assessor = FraudAssessor(llm("I cannot help with that."))
        with pytest.raises(FraudAssessmentError):
            await assessor.assess_fraud_risk(AssessFraudRiskInput(claim_details="x"))

    def test_prompt_lists_each_image(self):
        parts = FraudAssessor(llm()).build_prompt(AssessFraudRiskInput(
            claim_details="x", image_evidence_uris=[PNG_URI, PNG_URI]
        ))
        image_parts = [p for p in parts if p["type"] == "image_url"]
        assert len(image_parts) == 2
        assert {"type": "text", "text": "Supporting Document: None"} in parts
        assert {"type": "text", "text": "Video Evidence: None"} in parts


class TestDocumentQA:

    async def test_answer_is_trimmed(self):
        qa = DocumentQA(llm("  The claimant is Jane Doe.\n"))
        result = await qa.qa_on_document(QaOnDocumentInput(document_data_uri=PNG_URI, question="Who?"))
        assert result.answer == "The claimant is Jane Doe."

    async def test_malformed_document(self):
        qa = DocumentQA(llm("unused"))
        with pytest.raises(DocumentQuestionError):
            await qa.qa_on_document(QaOnDocumentInput(
                document_data_uri="data:application/pdf;base64,abc", question="Who?"
            ))
