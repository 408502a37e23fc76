"""Google Gemini LLM provider using the google-genai SDK."""

from __future__ import annotations

from google import genai
from google.genai import types

from routing_engine.exceptions import ConfigurationError, GenerationError
from routing_engine.observability.logger import get_logger

logger = get_logger("gemini")


class GeminiProvider:
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash") -> None:
        if not api_key:
            raise ConfigurationError(
                "Google API key is not set. Export GOOGLE_API_KEY or ROUTER_GOOGLE_API_KEY."
            )
        self._client = genai.Client(api_key=api_key)
        self._model = model

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        try:
            config = types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            )
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.warning("gemini_call_failed", model=self._model, error=str(e))
            raise GenerationError(f"Gemini generation failed: {e}") from e

        text = response.text or ""
        logger.debug(
            "gemini_completed",
            model=self._model,
            prompt_len=len(prompt),
            completion_len=len(text),
        )
        return text
