from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class LLMResponse:
    content: str
    model: str
    usage: Optional[dict] = None

    @property
    def is_empty(self) -> bool:
        return not (self.content or "").strip()


class LLMProviderError(Exception):
    """Remote model call failed (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def prompt_messages(system_prompt: str, user_prompt: str) -> List[dict]:
    """Chat payload with one system and one user turn."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


class LLMProvider(ABC):
    """A chat-completions backend. ``generate`` raises ``LLMProviderError`` on failure."""

    @abstractmethod
    async def generate(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> LLMResponse: ...
