"""
LLM client used by the categorizer.

Credentials and base URLs are passed per call instead of being written to
litellm globals or the process environment.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

import litellm

from pocketledger.config import settings

logger = logging.getLogger(__name__)

litellm.drop_params = True

# provider -> (model prefix, default api base)
_PROVIDERS: Dict[str, tuple] = {
    "openai": ("", None),
    "anthropic": ("", None),
    "openrouter": ("openrouter/", "https://openrouter.ai/api/v1"),
    "ollama": ("ollama/", "http://localhost:11434"),
}

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


class AIClient:

    def __init__(self, provider: Optional[str] = None, model: Optional[str] = None):
        self.provider = provider or settings.ai_provider
        if self.provider not in _PROVIDERS:
            raise ValueError(f"Unsupported AI provider: {self.provider}")

        prefix, self.api_base = _PROVIDERS[self.provider]
        model = model or settings.ai_model
        self.model = model if not prefix or model.startswith(prefix) else f"{prefix}{model}"
        if settings.ai_base_url:
            self.api_base = settings.ai_base_url

    @property
    def api_key(self) -> Optional[str]:
        return {
            "openai": settings.openai_api_key,
            "anthropic": settings.anthropic_api_key,
            "openrouter": settings.openrouter_api_key,
        }.get(self.provider)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        json_mode: bool = False
    ) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "timeout": settings.ai_timeout_seconds,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            logger.error(f"AI completion error ({self.model}): {e}")
            raise
        return response.choices[0].message.content or ""

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> Any:
        """Complete in JSON mode and decode the reply, tolerating code fences."""
        response = await self.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True
        )
        return json.loads(_FENCE_RE.sub("", response.strip()))


_ai_client: Optional[AIClient] = None


def get_ai_client() -> AIClient:
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
