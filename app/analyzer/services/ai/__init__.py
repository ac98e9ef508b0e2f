"""
AI service package for project document analysis.

This package provides:
- prompts: Construction of the analysis prompt
- parsing: Extraction of the JSON summary from free-form model output
- exceptions: Errors raised by the remote call and the parser

The AnalysisRequester class sends the prompt to the configured
language model endpoint.
"""

import asyncio
import logging
from typing import Any

from fastapi import Request
from openai import OpenAI, OpenAIError

from ...config import Settings
from .exceptions import AnalysisParseError, UpstreamUnavailableError
from .parsing import AnalysisFields, parse_analysis_response
from .prompts import ANALYSIS_FIELD_KEYS, build_analysis_prompt

logger = logging.getLogger(__name__)

__all__ = [
    "ANALYSIS_FIELD_KEYS",
    "AnalysisFields",
    "AnalysisParseError",
    "AnalysisRequester",
    "UpstreamUnavailableError",
    "build_analysis_prompt",
    "get_analysis_requester",
    "parse_analysis_response",
]


class AnalysisRequester:
    """
    Client for the remote language model.

    Sends one chat request per analysis with a single user message and a
    bounded token budget. Failures are never retried.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4096,
        base_url: str | None = None,
        client: Any | None = None,
    ):
        """
        Initialize the requester.

        Args:
            api_key: Secret key for the model endpoint.
            model: Model identifier sent with every request.
            max_tokens: Token budget for the model response.
            base_url: Endpoint base URL. None uses the SDK default.
            client: Pre-built OpenAI-compatible client (used by tests).
        """
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.base_url = base_url
        self._client = client

        if not self.api_key and client is None:
            logger.warning(
                "LLM_API_KEY is not set. Document analysis requests will fail."
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisRequester":
        """Build a requester from application settings."""
        return cls(
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            base_url=settings.llm_base_url,
        )

    @property
    def client(self) -> Any:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise UpstreamUnavailableError(
                    "Language model API key not configured. Set LLM_API_KEY."
                )
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
            )
        return self._client

    async def request_analysis(self, combined_text: str) -> str:
        """
        Ask the model to summarize the combined document text.

        Args:
            combined_text: Text of every document in the batch.

        Returns:
            The first text segment of the model response, verbatim. An
            empty answer is returned as an empty string.

        Raises:
            UpstreamUnavailableError: On any transport error, error status
                or a response without choices.
        """
        prompt = build_analysis_prompt(combined_text)
        client = self.client

        logger.info(
            "Requesting analysis from %s (%d prompt chars, max_tokens=%d)",
            self.model,
            len(prompt),
            self.max_tokens,
        )

        try:
            response = await asyncio.to_thread(
                client.chat.completions.create,
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as e:
            logger.error("Error calling language model API: %s", e)
            raise UpstreamUnavailableError(f"Language model request failed: {e}") from e

        if not response.choices:
            logger.error("Language model response had no choices")
            raise UpstreamUnavailableError("Language model response had no choices")

        content = response.choices[0].message.content or ""
        if not content:
            logger.warning("Language model returned an empty answer")

        logger.info("Received analysis response (%d chars)", len(content))
        return content


def get_analysis_requester(request: Request) -> AnalysisRequester:
    """Dependency returning the requester built at application startup."""
    return request.app.state.analysis_requester
