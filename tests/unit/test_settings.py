"""
Unit tests for environment-driven settings.
"""

from contract_analyzer.config import Settings, settings


def test_test_environment_is_loaded():
    assert settings.openai_api_key == "test-key"
    assert settings.enable_ocr_fallback is False
    assert settings.http_max_retries == 0
    assert settings.chunk_delay_seconds == 0


def test_defaults(monkeypatch):
    for name in ("CHUNK_SIZE", "CHUNK_OVERLAP", "MIN_TEXT_CHARS", "OPENAI_MODEL", "LLM_PROVIDER"):
        monkeypatch.delenv(name, raising=False)

    fresh = Settings(_env_file=None)

    assert fresh.chunk_size == 2000
    assert fresh.chunk_overlap == 200
    assert fresh.min_text_chars == 50
    assert fresh.openai_model == "gpt-4"
    assert fresh.llm_provider == "openai"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CHUNK_SIZE", "500")
    monkeypatch.setenv("ENABLE_AI_CLEANUP", "true")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")

    fresh = Settings(_env_file=None)

    assert fresh.chunk_size == 500
    assert fresh.enable_ai_cleanup is True
    assert fresh.max_upload_bytes == 1024
