"""
Text Cleanup Service
LLM-backed repair of OCR output and PDF-extracted contract text

The cleanup calls are best-effort: any provider failure is logged and the
caller gets its original text back, so the rule-based pipeline always has
something to work with. Only `extract_text_with_ai`, which has no input
text to fall back on, raises.
"""

import logging
import time
from typing import Dict, Optional

from ...config.settings import settings
from ...utils.errors import ConfigurationError, ContractProcessingError
from ..llm.base import BaseLLMProvider
from ..llm.factory import LLMFactory
from ..llm.prompt.prompt import SYSTEM_CONTRACT_CLEANUP, SYSTEM_OCR_CLEANUP, SYSTEM_TEXT_EXTRACTION

logger = logging.getLogger(__name__)


class TextCleanupService:
    """AI cleanup of contract text."""

    def __init__(self, llm: Optional[BaseLLMProvider] = None):
        self.llm = llm
        if self.llm is None:
            try:
                self.llm = LLMFactory.create_provider()
            except ConfigurationError as e:
                logger.info(f"AI text cleanup disabled: {e}")

    def check_availability(self) -> Dict[str, bool]:
        return {
            "llm": self.llm is not None,
            "enabled": settings.enable_ai_cleanup,
        }

    def _run(self, system_prompt: str, text: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": text},
        ]
        response = self.llm.complete(messages, temperature=settings.openai_temperature)
        return response.content

    def clean_ocr_text(self, text: str) -> str:
        """Fix OCR errors; returns the input unchanged on any failure."""
        if not text or self.llm is None:
            return text
        try:
            start_time = time.time()
            cleaned = self._run(SYSTEM_OCR_CLEANUP, text)
            logger.debug(f"OCR cleanup took {time.time() - start_time:.2f}s")
            return cleaned or text
        except Exception as e:
            logger.error(f"Error cleaning OCR text: {e}")
            return text

    def clean_contract_text(self, text: str) -> str:
        """General cleanup of extracted contract text; never raises."""
        if not text or self.llm is None:
            return text
        try:
            return self._run(SYSTEM_CONTRACT_CLEANUP, text) or text
        except Exception as e:
            logger.error(f"Error cleaning contract text: {e}")
            return text

    def extract_text_with_ai(self, raw_text: str) -> str:
        """
        Reconstruct readable contract text from noisy extractor output.

        Raises:
            ContractProcessingError: provider missing or call failed
        """
        if self.llm is None:
            raise ContractProcessingError("Failed to extract text using AI")
        try:
            content = self._run(SYSTEM_TEXT_EXTRACTION, raw_text)
        except Exception as e:
            logger.error(f"Error extracting text with AI: {e}")
            raise ContractProcessingError("Failed to extract text using AI") from e

        if not content.strip():
            raise ContractProcessingError("Failed to extract text using AI")
        return content
