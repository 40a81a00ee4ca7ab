"""
Revenue clause and trigger analysis with an LLM (IFRS 15 / ASC 606).
"""

import logging
from typing import Any, Dict, List, Optional

from ...utils.errors import ContractProcessingError
from ..analysis.revenue_insights import validate_revenue_triggers
from ..llm.base import BaseLLMProvider
from ..llm.factory import LLMFactory
from ..llm.prompt.prompt import REVENUE_CLAUSE_ANALYSIS, SYSTEM_REVENUE_ANALYST

logger = logging.getLogger(__name__)


class RevenueClauseAnalyzer:
    """JSON-mode LLM analysis of revenue triggers and obligations."""

    def __init__(self, llm: Optional[BaseLLMProvider] = None):
        self._llm = llm

    @property
    def llm(self) -> BaseLLMProvider:
        if self._llm is None:
            self._llm = LLMFactory.create_provider()
        return self._llm

    @staticmethod
    def build_prompt(
        text: str,
        industry_context: Optional[str] = None,
        contract_type: Optional[str] = None,
        special_focus: Optional[List[str]] = None,
    ) -> str:
        context = ""
        if industry_context:
            context += f"Industry Context: {industry_context}\n"
        if contract_type:
            context += f"Contract Type: {contract_type}\n"
        if special_focus:
            context += "Special Focus Areas:\n" + "\n".join(special_focus) + "\n"
        if context:
            context += "\n"
        return REVENUE_CLAUSE_ANALYSIS.format(context=context, text=text)

    def analyze(
        self,
        text: str,
        industry_context: Optional[str] = None,
        contract_type: Optional[str] = None,
        special_focus: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Analyze revenue clauses and triggers.

        The returned dict is the model's JSON plus "triggers_valid".

        Raises:
            ContractProcessingError: provider call failed or returned non-JSON
        """
        messages = [
            {"role": "system", "content": SYSTEM_REVENUE_ANALYST},
            {"role": "user", "content": self.build_prompt(text, industry_context, contract_type, special_focus)},
        ]
        try:
            response = self.llm.complete(messages, temperature=0.1, json_mode=True)
            analysis = response.json_content()
        except Exception as e:
            logger.error(f"Error analyzing revenue clauses: {e}")
            raise ContractProcessingError("Failed to analyze revenue clauses") from e

        if not isinstance(analysis, dict):
            raise ContractProcessingError("Failed to analyze revenue clauses")

        analysis.setdefault("triggers", [])
        analysis["triggers_valid"] = validate_revenue_triggers(analysis["triggers"])
        return analysis
