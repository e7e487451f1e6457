"""
Google Gemini LLM provider implementation.

Uses the official ``google-genai`` SDK for native system-instruction
support and async generation.
"""
import logging
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import GenerationResult, LLMProvider
from ..config import settings
from ..errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class GeminiLLMProvider(LLMProvider):
    """Google Gemini-based LLM provider (Gemini 2.5 Flash, Pro, etc.)."""

    def __init__(self, api_key: Optional[str] = None, default_model: Optional[str] = None):
        self.api_key = api_key or settings.gemini_api_key
        self.default_model = default_model or settings.gemini_model

        if not self.api_key:
            logger.error("GEMINI_API_KEY is not set on the server.")
            raise ConfigurationError(
                "Gemini API key not found. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.client = genai.Client(api_key=self.api_key)

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
    ) -> GenerationResult:
        """Generate a reply, keeping the full response body for relaying."""
        model_name = model or self.default_model

        if model_name.startswith("models/"):
            model_name = model_name[7:]

        config_kwargs: dict = {}
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt

        try:
            response = await self.client.aio.models.generate_content(
                model=model_name,
                contents=prompt,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API Error: status={e.code} body={e.message}")
            raise UpstreamError(f"Gemini API responded with status: {e.code}", status_code=e.code) from e
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamError(f"Failed to generate text with Gemini: {e}") from e

        return GenerationResult(
            text=(response.text or "").strip(),
            raw_response=response.model_dump(mode="json", by_alias=True, exclude_none=True),
            model=model_name,
            provider="gemini",
        )
