"""
AI-assisted code analysis for bot command snippets.

Sends a snippet to a chat-completion provider and expects a JSON
object with three string arrays back: suggestions, security and
performance. No retries; failures surface as AnalysisFailedError.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import openai

from botdash.config import get_settings
from botdash.core.errors import AnalysisFailedError

logger = logging.getLogger(__name__)

ANALYSIS_FIELDS = ("suggestions", "security", "performance")

SYSTEM_PROMPT = (
    "You are a Discord bot code analyzer. Analyze the given code and provide "
    "suggestions for improvements, security concerns, and performance optimizations. "
    "Respond with a JSON object containing exactly three keys: \"suggestions\", "
    "\"security\" and \"performance\". Each value must be an array of strings."
)


@dataclass
class CodeAnalysis:
    """Structured analysis result."""
    suggestions: List[str] = field(default_factory=list)
    security: List[str] = field(default_factory=list)
    performance: List[str] = field(default_factory=list)


def parse_analysis(content: Optional[str]) -> CodeAnalysis:
    """
    Decode the provider's response text.

    Args:
        content: Raw message content returned by the model

    Returns:
        Parsed analysis; missing keys become empty lists

    Raises:
        AnalysisFailedError: If the content is not a JSON object of string arrays
    """
    if not content:
        raise AnalysisFailedError("Failed to analyze code: empty response from provider")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AnalysisFailedError(f"Failed to analyze code: invalid JSON in response ({e.msg})")

    if not isinstance(data, dict):
        raise AnalysisFailedError("Failed to analyze code: response is not a JSON object")

    result = {}
    for key in ANALYSIS_FIELDS:
        value = data.get(key, [])
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise AnalysisFailedError(f"Failed to analyze code: '{key}' must be an array of strings")
        result[key] = value

    return CodeAnalysis(**result)


class CodeAnalyzer(ABC):
    @abstractmethod
    async def analyze(self, code: str) -> CodeAnalysis:
        pass


class OpenAiCodeAnalyzer(CodeAnalyzer):
    """Code analyzer backed by the OpenAI chat completions API."""

    def __init__(self, api_key: str, model: str = "gpt-4o", timeout: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: Optional[openai.AsyncOpenAI] = None

    @property
    def client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    async def analyze(self, code: str) -> CodeAnalysis:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": code},
                ],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error(f"Code analysis request failed: {str(e)}")
            raise AnalysisFailedError(f"Failed to analyze code: {str(e)}")

        if not response.choices:
            raise AnalysisFailedError("Failed to analyze code: provider returned no choices")

        return parse_analysis(response.choices[0].message.content)


def create_analyzer() -> CodeAnalyzer:
    """Build the analyzer configured in settings."""
    analysis = get_settings().analysis
    return OpenAiCodeAnalyzer(
        api_key=analysis.OPENAI_API_KEY,
        model=analysis.MODEL,
        timeout=analysis.TIMEOUT_SECONDS,
    )
