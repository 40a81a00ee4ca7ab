"""Application settings using environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment."""

    # OpenAI
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-4")
    openai_temperature: float = Field(default=0.3)
    openai_max_tokens: int = Field(default=4000)

    # Azure Form Recognizer
    azure_form_recognizer_endpoint: str | None = Field(default=None)
    azure_form_recognizer_key: str | None = Field(default=None)
    azure_model_id: str = Field(default="prebuilt-document")
    azure_api_version: str = Field(default="2023-07-31")
    azure_poll_interval: float = Field(default=1.0)
    azure_poll_timeout: float = Field(default=120.0)

    # Hugging Face Inference API
    huggingface_api_key: str | None = Field(default=None)
    huggingface_base_url: str = Field(default="https://api-inference.huggingface.co/models")
    clause_classifier_model: str = Field(default="microsoft/deberta-v3-base")
    revenue_trigger_model: str = Field(default="microsoft/deberta-v3-base")
    forecast_model: str = Field(default="microsoft/time-series-transformer")

    llm_provider: str = Field(default="openai")

    # Extraction
    enable_ocr_fallback: bool = Field(default=True)
    min_text_chars: int = Field(default=50)
    ocr_language: str = Field(default="eng")
    ocr_dpi: int = Field(default=300)

    # Preprocessing / AI cleanup
    enable_ai_cleanup: bool = Field(default=False)

    # Chunked LLM analysis
    chunk_size: int = Field(default=2000)
    chunk_overlap: int = Field(default=200)
    # Fixed stagger between chunk requests, keeps us under vendor rate limits
    chunk_delay_seconds: float = Field(default=1.0)

    # Uploads
    max_upload_bytes: int = Field(default=10 * 1024 * 1024)

    # HTTP
    http_timeout: float = Field(default=60.0)
    http_max_retries: int = Field(default=2)

    log_level: str = Field(default="INFO")
    log_structured: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # Ignore extra fields from .env file
    )


settings = Settings()
