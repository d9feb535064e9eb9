"""Base class for the pipeline's generation stages"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Type, TypeVar
from pydantic import BaseModel, ValidationError
import logging
import time

from swipe_ai.errors import OutputValidationError
from swipe_ai.utils.json_extract import parse_json_response

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseStage(ABC, Generic[OutputT]):
    """
    Base class for every stage.

    Each stage:
    1. Builds a user message from its typed inputs
    2. Calls one model provider with its own system prompt
    3. Extracts the JSON object from the response text
    4. Validates it into its typed output model

    Stages never catch provider or parsing errors; they propagate to the
    orchestrator unchanged.
    """

    output_model: Type[OutputT]

    def __init__(self, name: str, provider, max_tokens: int, temperature: float):
        """
        Initialize the stage.

        Args:
            name: Stage name for logging
            provider: Model provider with an async complete(...) method
            max_tokens: Generation cap for this stage
            temperature: Sampling temperature for this stage
        """
        self.name = name
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature

    @abstractmethod
    def get_system_prompt(self) -> str:
        """Return the stage-specific system prompt"""
        pass

    async def _generate(self, user_content: str, **kwargs) -> str:
        """Call the provider and log prompt size and latency"""
        system_prompt = self.get_system_prompt()
        logger.info(
            f"{self.name}: calling {self.provider.name} "
            f"(system={len(system_prompt)} chars, user={len(user_content)} chars)"
        )
        start = time.time()
        text = await self.provider.complete(
            system_prompt=system_prompt,
            user_content=user_content,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            **kwargs,
        )
        logger.info(f"{self.name}: response {len(text)} chars in {time.time() - start:.1f}s")
        return text

    def _decode(self, text: str) -> OutputT:
        """Extract, parse and validate the model's JSON answer"""
        data: Dict[str, Any] = parse_json_response(text)
        try:
            return self.output_model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"{self.name}: output failed validation ({e.error_count()} errors)")
            raise OutputValidationError(
                f"{self.name} output did not match the expected schema: {e}"
            ) from e
