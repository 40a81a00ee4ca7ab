"""
Contract Assistant
LLM extraction of contract data, entities and obligations, plus question
answering over a single contract

`extract_contract_data` and `answer_question` are best-effort and fall
back to defaults or an apology; entity and obligation analysis raise
`ContractProcessingError` when the model call or its JSON fails.
"""

import logging
import random
from datetime import date
from typing import Any, Dict, Optional

from ...config.settings import settings
from ...utils.errors import ContractProcessingError
from ..llm.base import BaseLLMProvider
from ..llm.factory import LLMFactory
from ..llm.prompt.prompt import (
    CONTRACT_DATA_EXTRACTION,
    CONTRACT_ENTITIES,
    CONTRACT_OBLIGATIONS,
    CONTRACT_QUESTION,
    SYSTEM_CONTRACT_ANALYST,
    SYSTEM_CONTRACT_QA,
    SYSTEM_ENTITY_EXTRACTION,
    SYSTEM_OBLIGATION_ANALYST,
)

logger = logging.getLogger(__name__)

ANSWER_FALLBACK = (
    "I'm sorry, I encountered an error while analyzing this contract. "
    "Please try again or rephrase your question."
)
QA_MAX_TOKENS = 3000
MAX_KEY_TERMS = 5


def default_contract_number(today: Optional[date] = None) -> str:
    """Placeholder reference in the CT-<n>-<year> form."""
    year = (today or date.today()).year
    return f"CT-{random.randint(0, 999)}-{year}"


def _iso_date(value: Any) -> Optional[str]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        return None


class ContractAssistant:
    """Chat-model helpers for a single contract."""

    def __init__(self, llm: Optional[BaseLLMProvider] = None):
        self._llm = llm

    @property
    def llm(self) -> BaseLLMProvider:
        if self._llm is None:
            self._llm = LLMFactory.create_provider()
        return self._llm

    def _ask_json(self, system_prompt: str, prompt: str, temperature: float = 0.1) -> Any:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]
        response = self.llm.complete(messages, temperature=temperature, json_mode=True)
        return response.json_content()

    def check_availability(self) -> Dict[str, Any]:
        """Verify the configured key with a minimal completion."""
        if self._llm is None and not settings.openai_api_key:
            return {"available": False, "message": "OpenAI API key is not configured"}
        try:
            self.llm.complete([{"role": "user", "content": "Test connection"}], max_tokens=5)
        except Exception as e:
            logger.error(f"OpenAI availability check failed: {e}")
            return {"available": False, "message": str(e) or "Unknown error accessing OpenAI API"}
        return {"available": True, "message": "OpenAI API is available"}

    def extract_contract_data(self, text: str) -> Dict[str, Any]:
        """
        Contract header fields for a new contract record.

        Missing fields are filled with defaults, and any failure returns
        the defaults alone.
        """
        today = date.today()
        try:
            result = self._ask_json(SYSTEM_CONTRACT_ANALYST, CONTRACT_DATA_EXTRACTION.format(text=text))
        except Exception as e:
            logger.error(f"Error extracting contract data: {e}")
            result = {}
        if not isinstance(result, dict):
            result = {}

        value = result.get("value")
        return {
            "name": result.get("name") or "Untitled Contract",
            "contract_number": result.get("contract_number") or default_contract_number(today),
            "client_name": result.get("client_name") or "Unnamed Client",
            "start_date": _iso_date(result.get("start_date")) or today.isoformat(),
            "end_date": _iso_date(result.get("end_date")),
            "value": value if isinstance(value, (int, float)) else 0,
            "key_terms": list(result.get("key_terms") or [])[:MAX_KEY_TERMS],
            "performance_obligations": list(result.get("performance_obligations") or []),
        }

    def answer_question(self, text: str, question: str) -> str:
        """IFRS 15 / ASC 606 focused answer; the apology text on failure."""
        messages = [
            {"role": "system", "content": SYSTEM_CONTRACT_QA},
            {"role": "user", "content": CONTRACT_QUESTION.format(text=text, question=question)},
        ]
        try:
            response = self.llm.complete(messages, temperature=0.1, max_tokens=QA_MAX_TOKENS)
        except Exception as e:
            logger.error(f"Error answering contract question: {e}")
            return ANSWER_FALLBACK
        return response.content or ANSWER_FALLBACK

    def extract_entities(self, text: str) -> Dict[str, Any]:
        """
        Named entities grouped by kind.

        Raises:
            ContractProcessingError: provider call failed or returned non-JSON
        """
        return self._analysis(SYSTEM_ENTITY_EXTRACTION, CONTRACT_ENTITIES, text, "Failed to extract contract entities")

    def analyze_obligations(self, text: str) -> Dict[str, Any]:
        """
        Seller, buyer and mutual obligations with deliverables.

        Raises:
            ContractProcessingError: provider call failed or returned non-JSON
        """
        return self._analysis(
            SYSTEM_OBLIGATION_ANALYST, CONTRACT_OBLIGATIONS, text, "Failed to analyze contract obligations"
        )

    def _analysis(self, system_prompt: str, template: str, text: str, failure: str) -> Dict[str, Any]:
        try:
            result = self._ask_json(system_prompt, template.format(text=text))
        except Exception as e:
            logger.error(f"{failure}: {e}")
            raise ContractProcessingError(failure) from e

        if not isinstance(result, dict):
            raise ContractProcessingError(failure)
        return result
