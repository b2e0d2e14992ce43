# claimintel/ai/llm.py
"""LLM provider abstraction layer."""

from typing import Optional, Any, Dict, List, Union
from abc import ABC, abstractmethod
import asyncio
import json
from concurrent.futures import ThreadPoolExecutor

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from claimintel.core.config import settings
from claimintel.core.logging import get_logger
from claimintel.core.exceptions import LLMConnectionError

logger = get_logger(__name__)

# Thread pool for sync LLM calls
_executor = ThreadPoolExecutor(max_workers=4)

# A prompt is either plain text or a list of multimodal content parts
PromptContent = Union[str, List[Dict[str, Any]]]


class LLMProvider(ABC):
    """
    Lazily builds one LangChain chat model and reuses it.

    Subclasses only say how the model is constructed.
    """

    name: str = ""

    def __init__(self):
        self._model: Optional[BaseChatModel] = None

    @abstractmethod
    def _create_model(self) -> BaseChatModel:
        """Construct the chat model from settings."""
        pass

    def get_name(self) -> str:
        return self.name

    def get_model(self) -> BaseChatModel:
        if self._model is None:
            try:
                self._model = self._create_model()
            except Exception as e:
                raise LLMConnectionError(self.name, str(e))
            logger.info(f"Initialized {self.name} LLM", model=getattr(self._model, "model", None))
        return self._model


class GoogleProvider(LLMProvider):
    """Gemini: the only provider accepting PDF and video parts."""

    name = "google"

    def _create_model(self) -> BaseChatModel:
        from langchain_google_genai import ChatGoogleGenerativeAI
        return ChatGoogleGenerativeAI(
            model=settings.GOOGLE_MODEL,
            google_api_key=settings.GOOGLE_API_KEY,
            temperature=settings.LLM_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_TOKENS
        )


class GroqProvider(LLMProvider):
    """Groq-hosted vision model; text and images only."""

    name = "groq"

    def _create_model(self) -> BaseChatModel:
        from langchain_groq import ChatGroq
        return ChatGroq(
            model_name=settings.GROQ_MODEL,
            api_key=settings.GROQ_API_KEY,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS
        )


class OllamaProvider(LLMProvider):
    """Local Ollama vision model; text and images only."""

    name = "ollama"

    def __init__(self, model_name: Optional[str] = None):
        super().__init__()
        self.model_name = model_name or settings.OLLAMA_MODEL

    def _create_model(self) -> BaseChatModel:
        from langchain_ollama import ChatOllama
        return ChatOllama(
            model=self.model_name,
            temperature=settings.LLM_TEMPERATURE,
            num_predict=settings.LLM_MAX_TOKENS
        )


PROVIDERS = {
    "google": GoogleProvider,
    "groq": GroqProvider,
    "ollama": OllamaProvider,
}


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence from model output."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def response_text(response: Any) -> str:
    """Flatten a chat model response into plain text."""
    content = response.content if hasattr(response, 'content') else response
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)


class LLMService:
    """
    Unified LLM service with provider abstraction.

    Every call is attempted once; failures propagate to the caller, which
    decides how to degrade.
    """

    def __init__(self, provider: Optional[LLMProvider] = None):
        self._provider = provider or self._create_provider()

    @staticmethod
    def _create_provider() -> LLMProvider:
        """Create the LLM provider named in config."""
        provider_name = settings.LLM_PROVIDER.lower()
        if provider_name not in PROVIDERS:
            raise ValueError(
                f"Unknown LLM provider: {provider_name}. Choose from: {', '.join(PROVIDERS)}"
            )
        logger.info(f"LLM Service initialized with provider: {provider_name}")
        return PROVIDERS[provider_name]()

    @property
    def model(self) -> BaseChatModel:
        """Get the current LLM model."""
        return self._provider.get_model()

    @property
    def provider_name(self) -> str:
        """Get current provider name."""
        return self._provider.get_name()

    def invoke_sync(
        self,
        prompt: PromptContent,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> str:
        """Synchronous LLM invocation."""
        messages = []

        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        try:
            response = self.model.invoke(messages, **kwargs)
        except Exception as e:
            logger.error(f"LLM invocation failed: {e}", provider=self.provider_name)
            raise
        return response_text(response)

    async def invoke(
        self,
        prompt: PromptContent,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> str:
        """Asynchronous LLM invocation."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            _executor,
            lambda: self.invoke_sync(prompt, system_prompt, **kwargs)
        )

    def invoke_with_json(
        self,
        prompt: PromptContent,
        system_prompt: Optional[str] = None
    ) -> Dict[str, Any]:
        """Invoke and parse JSON response."""
        instruction = "Respond with valid JSON only. No markdown, no explanation."
        if isinstance(prompt, str):
            json_prompt: PromptContent = f"{prompt}\n\n{instruction}"
        else:
            json_prompt = list(prompt) + [{"type": "text", "text": instruction}]

        response = strip_code_fences(self.invoke_sync(json_prompt, system_prompt))

        try:
            return json.loads(response)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            logger.debug(f"Raw response: {response}")
            raise ValueError(f"Invalid JSON response from LLM: {e}")

    async def invoke_with_json_async(
        self,
        prompt: PromptContent,
        system_prompt: Optional[str] = None
    ) -> Dict[str, Any]:
        """Async invoke and parse JSON response."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            _executor,
            lambda: self.invoke_with_json(prompt, system_prompt)
        )
