"""Protocol for the language model gateway."""

from __future__ import annotations

from typing import Protocol


class LLMProvider(Protocol):
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """Return the completion text. Raises GenerationError on gateway failure."""
        ...
