"""
Unit tests for LLM-backed text cleanup.
"""

import pytest

from contract_analyzer.services.ai.text_cleanup import TextCleanupService
from contract_analyzer.utils.errors import ConfigurationError, ContractProcessingError


def _raise(_):
    raise RuntimeError("provider unavailable")


def test_clean_ocr_text_uses_ocr_prompt(fake_llm):
    llm = fake_llm(lambda messages: "The obligation survives.")
    service = TextCleanupService(llm=llm)

    assert service.clean_ocr_text("The 0bligation surv1ves.") == "The obligation survives."
    messages = llm.calls[0]["messages"]
    assert messages[0]["role"] == "system"
    assert "OCR" in messages[0]["content"]
    assert messages[1] == {"role": "user", "content": "The 0bligation surv1ves."}


def test_cleanup_returns_original_on_failure(fake_llm):
    service = TextCleanupService(llm=fake_llm(_raise))

    assert service.clean_ocr_text("noisy text") == "noisy text"
    assert service.clean_contract_text("noisy text") == "noisy text"


def test_cleanup_returns_original_on_empty_reply(fake_llm):
    service = TextCleanupService(llm=fake_llm(lambda messages: ""))
    assert service.clean_contract_text("keep") == "keep"


def test_cleanup_without_provider(monkeypatch):
    def no_provider(*args, **kwargs):
        raise ConfigurationError("API key not found for provider: openai")

    monkeypatch.setattr("contract_analyzer.services.ai.text_cleanup.LLMFactory.create_provider", no_provider)
    service = TextCleanupService()

    assert service.check_availability() == {"llm": False, "enabled": False}
    assert service.clean_ocr_text("as is") == "as is"
    with pytest.raises(ContractProcessingError, match="Failed to extract text using AI"):
        service.extract_text_with_ai("raw")


def test_extract_text_with_ai(fake_llm):
    service = TextCleanupService(llm=fake_llm(lambda messages: "Section 1 Fees"))
    assert service.extract_text_with_ai("S e c t i o n 1 F e e s") == "Section 1 Fees"


@pytest.mark.parametrize("responder", [_raise, lambda messages: "   "])
def test_extract_text_with_ai_failures(fake_llm, responder):
    service = TextCleanupService(llm=fake_llm(responder))
    with pytest.raises(ContractProcessingError, match="Failed to extract text using AI"):
        service.extract_text_with_ai("raw")
