"""
Base LLM provider interface
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

_JSON_FENCE = re.compile(r'^```(?:json)?\s*|\s*```$', re.IGNORECASE)


class LLMResponse(BaseModel):
    """Structured response from LLM"""
    content: str
    usage: Optional[Dict[str, Any]] = None
    model: str
    provider: str

    def json_content(self) -> Any:
        """
        Parse the response content as JSON.

        Tolerates a surrounding ```json fence. Raises ValueError when the
        content is not valid JSON.
        """
        return parse_json_content(self.content)


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, model: str, api_key: str, **kwargs):
        self.model = model
        self.api_key = api_key
        self.kwargs = kwargs

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> LLMResponse:
        """Generate response from LLM"""
        pass

    @abstractmethod
    def complete(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Blocking chat completion over a prepared message list"""
        pass

    @abstractmethod
    def get_model_info(self) -> Dict[str, Any]:
        """Get model information"""
        pass


def parse_json_content(content: str) -> Any:
    cleaned = _JSON_FENCE.sub('', (content or '').strip())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"LLM response is not valid JSON: {e}") from e
