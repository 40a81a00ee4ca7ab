"""
Azure Form Recognizer (Document Intelligence) client.

Submits the PDF to the REST analyze endpoint and polls the returned
Operation-Location until the analysis finishes. Only the contract date,
parties and total value fields are read from the first document.
"""

import logging
import time
from typing import Any, Dict, Optional

from ...config.settings import settings
from ...utils.errors import ConfigurationError, ExternalServiceError
from ...utils.http import HttpClient

logger = logging.getLogger(__name__)

SERVICE = "azure_form_recognizer"


class AzureFormRecognizerClient:
    """Thin REST client for the prebuilt document model."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        poll_interval: Optional[float] = None,
        poll_timeout: Optional[float] = None,
    ):
        self.endpoint = (endpoint or settings.azure_form_recognizer_endpoint or "").rstrip("/")
        self.api_key = api_key or settings.azure_form_recognizer_key
        self.http = http_client or HttpClient()
        self.poll_interval = settings.azure_poll_interval if poll_interval is None else poll_interval
        self.poll_timeout = settings.azure_poll_timeout if poll_timeout is None else poll_timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.api_key)

    def analyze(self, pdf_bytes: bytes) -> Dict[str, Any]:
        """
        Extract contract metadata with Form Recognizer.

        Returns {"contract_date", "parties", "total_value"} (keys only when
        present) or {} on any failure, including missing credentials.
        """
        try:
            result = self.analyze_document(pdf_bytes)
            return self._extract_fields(result)
        except Exception as e:
            logger.error(f"Azure Form Recognizer error: {e}")
            return {}

    def analyze_document(self, pdf_bytes: bytes) -> Dict[str, Any]:
        """
        Run the analyze operation and return the raw analyzeResult.

        Raises:
            ConfigurationError: endpoint or key missing
            ExternalServiceError: operation failed or timed out
        """
        if not self.is_configured:
            raise ConfigurationError("Azure Form Recognizer credentials not configured")

        url = (
            f"{self.endpoint}/formrecognizer/documentModels/{settings.azure_model_id}:analyze"
            f"?api-version={settings.azure_api_version}"
        )
        response = self.http.post(
            url,
            headers={
                "Ocp-Apim-Subscription-Key": self.api_key,
                "Content-Type": "application/pdf",
            },
            content=pdf_bytes,
        )

        operation_url = response.headers.get("Operation-Location")
        if not operation_url:
            raise ExternalServiceError(SERVICE, "analyze response has no Operation-Location")

        return self._poll(operation_url)

    def _poll(self, operation_url: str) -> Dict[str, Any]:
        deadline = time.monotonic() + self.poll_timeout
        headers = {"Ocp-Apim-Subscription-Key": self.api_key}

        while True:
            data = self.http.get_json(operation_url, headers=headers)
            status = (data.get("status") or "").lower()

            if status == "succeeded":
                return data.get("analyzeResult") or {}
            if status == "failed":
                raise ExternalServiceError(SERVICE, f"analysis failed: {data.get('error')}")
            if time.monotonic() >= deadline:
                raise ExternalServiceError(SERVICE, f"analysis did not finish within {self.poll_timeout}s")

            logger.debug(f"Azure analysis status: {status or 'unknown'}")
            time.sleep(self.poll_interval)

    @staticmethod
    def _extract_fields(result: Dict[str, Any]) -> Dict[str, Any]:
        documents = result.get("documents") or []
        if not documents:
            return {}
        fields = documents[0].get("fields") or {}

        def content(name: str) -> Optional[str]:
            field = fields.get(name) or {}
            return field.get("content")

        metadata: Dict[str, Any] = {}

        contract_date = content("contractDate")
        if contract_date:
            metadata["contract_date"] = contract_date

        parties = content("parties")
        if parties:
            metadata["parties"] = [parties]

        total_value = content("totalValue")
        if total_value:
            try:
                metadata["total_value"] = float(total_value.replace(",", "").lstrip("$"))
            except ValueError:
                logger.debug(f"Unparseable Azure total value: {total_value}")

        return metadata
