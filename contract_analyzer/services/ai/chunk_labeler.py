"""
LLM chunk labelling for the semantic labeler.

Instances are callables that plug into `SemanticLabeler(llm_labeler=...)`.
Provider and parse errors propagate; the labeler logs them and keeps its
rule-based labels.
"""

import logging
from typing import Any, Dict, List, Optional

from ..llm.base import BaseLLMProvider
from ..llm.factory import LLMFactory
from ..llm.prompt.prompt import SYSTEM_CHUNK_LABELS

logger = logging.getLogger(__name__)


class LLMChunkLabeler:
    """Ask the chat model for {"type", "confidence", "metadata"} labels."""

    def __init__(self, llm: Optional[BaseLLMProvider] = None, temperature: float = 0.3):
        self._llm = llm
        self.temperature = temperature

    @property
    def llm(self) -> BaseLLMProvider:
        if self._llm is None:
            self._llm = LLMFactory.create_provider()
        return self._llm

    def __call__(self, text: str) -> List[Dict[str, Any]]:
        messages = [
            {"role": "system", "content": SYSTEM_CHUNK_LABELS},
            {"role": "user", "content": text},
        ]
        response = self.llm.complete(messages, temperature=self.temperature, json_mode=True)
        result = response.json_content()

        if not isinstance(result, dict):
            logger.warning("Chunk label response was not a JSON object")
            return []
        labels = result.get("labels") or []
        return labels if isinstance(labels, list) else []
