"""OpenAI chat completions provider"""

from typing import Any, Dict, List, Optional

import httpx

from ....config.settings import settings
from ....utils.http import HttpClient
from ..base import BaseLLMProvider, LLMResponse


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider implementation"""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        super().__init__(model or settings.openai_model, api_key or settings.openai_api_key, **kwargs)
        self.base_url = settings.openai_base_url.rstrip("/")
        self.model_name = self.model
        self.http = http_client or HttpClient()
        self._async_transport = async_transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        payload = {
            "model": self.model_name,
            "messages": messages,
            "temperature": kwargs.get("temperature", settings.openai_temperature),
            "max_tokens": kwargs.get("max_tokens", settings.openai_max_tokens),
        }
        if kwargs.get("json_mode"):
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _to_response(self, data: Dict[str, Any]) -> LLMResponse:
        text = data.get("choices", [{}])[0].get("message", {}).get("content") or ""
        return LLMResponse(
            content=text,
            usage=data.get("usage", {}),
            model=data.get("model", self.model_name),
            provider="openai",
        )

    @staticmethod
    def build_messages(prompt: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def complete(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Blocking chat completion through the shared retrying HTTP client"""
        data = self.http.post_json(
            f"{self.base_url}/chat/completions",
            self._payload(messages, **kwargs),
            headers=self._headers(),
        )
        return self._to_response(data)

    async def generate(self, prompt: str, **kwargs) -> LLMResponse:
        """Generate response using OpenAI API"""
        messages = self.build_messages(prompt, kwargs.pop("system_prompt", None))
        url = f"{self.base_url}/chat/completions"

        async with httpx.AsyncClient(timeout=settings.http_timeout, transport=self._async_transport) as client:
            response = await client.post(url, headers=self._headers(), json=self._payload(messages, **kwargs))
            response.raise_for_status()
            return self._to_response(response.json())

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "provider": "openai",
            "model": self.model_name,
            "max_tokens": settings.openai_max_tokens,
            "supports_system_prompt": True,
            "supports_json_mode": True,
        }
