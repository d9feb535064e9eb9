"""
Model gateway: thin adapters over the two generation endpoints.

- AnthropicTextProvider: Messages API (system prompt + one user message)
- GeminiVisionProvider: generateContent with one inline image, JSON output preferred

Both return the raw response text. No retries happen here: a non-2xx
response or a transport failure becomes a ModelAPIError, a missing API key
becomes a ConfigurationError before any request is made.

Usage:
    from swipe_ai.services.llm_provider import get_text_provider

    provider = get_text_provider()
    text = await provider.complete(
        system_prompt="You are a helpful assistant",
        user_content="Hello",
        max_tokens=1024,
        temperature=0.4,
    )
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import json
import logging

import anthropic
import httpx

from swipe_ai.errors import ConfigurationError, ModelAPIError

logger = logging.getLogger(__name__)


class ModelProvider(ABC):
    """Common shape of the text and vision adapters"""

    api_key_setting: str = ""

    def __init__(self, api_key: str, model: str, timeout: float = 300.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging"""
        pass

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(f"{self.api_key_setting} not configured")
        return self.api_key


class AnthropicTextProvider(ModelProvider):
    """Text generation through the Anthropic Messages API"""

    api_key_setting = "ANTHROPIC_API_KEY"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: float = 300.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(api_key, model, timeout)
        self.base_url = base_url
        self._http_client = http_client
        self._client: Optional[anthropic.AsyncAnthropic] = None

    @property
    def name(self) -> str:
        return "Anthropic"

    def _get_client(self) -> anthropic.AsyncAnthropic:
        api_key = self._require_api_key()
        if self._client is None:
            kwargs: Dict[str, Any] = {
                "api_key": api_key,
                "max_retries": 0,
                "timeout": self.timeout,
            }
            if self.base_url:
                kwargs["base_url"] = self.base_url
            if self._http_client is not None:
                kwargs["http_client"] = self._http_client
            self._client = anthropic.AsyncAnthropic(**kwargs)
        return self._client

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int = 8192,
        temperature: float = 0.4,
    ) -> str:
        """Send system prompt + one user message, return the first text block"""
        client = self._get_client()

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_content}],
            )
        except anthropic.APIStatusError as e:
            body = e.body if isinstance(e.body, dict) else {}
            error = body.get("error", "unknown")
            error_text = json.dumps(error) if isinstance(error, (dict, list)) else str(error)
            logger.error(f"Claude API error {e.status_code}: {error_text[:500]}")
            raise ModelAPIError(f"Claude API error {e.status_code}: {error_text}", status_code=e.status_code) from e
        except anthropic.APIConnectionError as e:
            logger.error(f"Claude API unreachable: {e}")
            raise ModelAPIError(f"Claude API request failed: {e}") from e

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(
                f"{self.model}: in={usage.input_tokens} out={usage.output_tokens} "
                f"stop={response.stop_reason}"
            )

        for block in response.content or []:
            if getattr(block, "type", None) == "text":
                return block.text
        return ""


class GeminiVisionProvider(ModelProvider):
    """Vision generation through the Gemini generateContent REST endpoint"""

    api_key_setting = "GOOGLE_GEMINI_API_KEY"

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 300.0,
        error_body_limit: int = 300,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, model, timeout)
        self.api_base = api_base.rstrip("/")
        self.error_body_limit = error_body_limit
        self._transport = transport

    @property
    def name(self) -> str:
        return "Gemini"

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        image_base64: str,
        mime_type: str = "image/jpeg",
        max_tokens: int = 8192,
        temperature: float = 0.3,
    ) -> str:
        """Send prompt + context text + one inline image, return the first candidate's text"""
        api_key = self._require_api_key()

        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": f"{system_prompt}\n\n{user_content}"},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": image_base64,
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                "responseMimeType": "application/json",
            },
        }

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    params={"key": api_key},
                    json=payload,
                )
            except httpx.RequestError as e:
                logger.error(f"Gemini API unreachable: {e}")
                raise ModelAPIError(f"Gemini API request failed: {e}") from e

        if not response.is_success:
            error_text = response.text[: self.error_body_limit]
            logger.error(f"Gemini API error {response.status_code}: {error_text}")
            raise ModelAPIError(
                f"Gemini API error {response.status_code}: {error_text}",
                status_code=response.status_code,
            )

        data = response.json()
        usage = data.get("usageMetadata") or {}
        if usage:
            logger.info(
                f"{self.model}: in={usage.get('promptTokenCount')} "
                f"out={usage.get('candidatesTokenCount')}"
            )

        try:
            return data["candidates"][0]["content"]["parts"][0].get("text", "") or ""
        except (KeyError, IndexError, TypeError):
            return ""


# Provider instances (created on first use)
_text_provider: Optional[AnthropicTextProvider] = None
_vision_provider: Optional[GeminiVisionProvider] = None


def get_text_provider() -> AnthropicTextProvider:
    """Get the configured text provider"""
    global _text_provider

    if _text_provider is None:
        from swipe_ai.config import settings

        _text_provider = AnthropicTextProvider(
            api_key=settings.ANTHROPIC_API_KEY,
            model=settings.CLAUDE_MODEL,
            base_url=settings.ANTHROPIC_BASE_URL,
            timeout=settings.MODEL_REQUEST_TIMEOUT,
        )
        logger.info(f"Using Anthropic text provider with model: {settings.CLAUDE_MODEL}")

    return _text_provider


def get_vision_provider() -> GeminiVisionProvider:
    """Get the configured vision provider"""
    global _vision_provider

    if _vision_provider is None:
        from swipe_ai.config import settings

        _vision_provider = GeminiVisionProvider(
            api_key=settings.GOOGLE_GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            api_base=settings.GEMINI_API_BASE,
            timeout=settings.MODEL_REQUEST_TIMEOUT,
            error_body_limit=settings.GEMINI_ERROR_BODY_LIMIT,
        )
        logger.info(f"Using Gemini vision provider with model: {settings.GEMINI_MODEL}")

    return _vision_provider


def reset_providers():
    """Reset the provider instances (useful for testing)"""
    global _text_provider, _vision_provider
    _text_provider = None
    _vision_provider = None
