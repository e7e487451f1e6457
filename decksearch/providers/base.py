"""
Abstract base classes defining interfaces for providers.
All concrete implementations must inherit from these.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class GenerationResult:
    """Text reply of an LLM plus the provider's full response body."""
    text: str
    raw_response: Dict[str, Any] = field(default_factory=dict)
    model: str = ""
    provider: str = ""


class LLMProvider(ABC):
    """Interface for large language model text generation (async)."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
    ) -> GenerationResult:
        pass
