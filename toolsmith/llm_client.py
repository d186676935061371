from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from toolsmith.config import Settings
from toolsmith.errors import ConfigurationError, GenerationError

log = logging.getLogger(__name__)

Message = Dict[str, str]


class LLMClient:
    """Chat-completions handle for an OpenAI-compatible endpoint.

    Built once at startup from :class:`Settings` and passed to the idea,
    synthesis and refinement steps. Holds no per-request state.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.endpoint = settings.openai_endpoint
        self.model = settings.openai_model

    @property
    def has_token(self) -> bool:
        return bool(self.settings.openai_api_key)

    def status(self) -> Dict[str, Any]:
        return {
            "provider": "openai" if self.has_token else None,
            "model": self.model if self.has_token else None,
            "has_token": self.has_token,
            "endpoint": self.endpoint,
        }

    def complete(self, messages: Sequence[Message], model: Optional[str] = None) -> str:
        """Send one chat completion and return the assistant text ("" if the service sent none).

        Raises GenerationError on transport failures, non-200 answers and
        bodies that are not a chat completion.
        """
        if not self.has_token:
            raise ConfigurationError("Missing LLM credentials")
        body: Dict[str, Any] = {
            "model": model or self.model,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
        }
        if self.settings.temperature is not None:
            body["temperature"] = self.settings.temperature
        headers = {
            "Authorization": f"Bearer {self.settings.openai_api_key}",
            "Content-Type": "application/json",
        }
        log.info("llm request model=%s messages=%d", body["model"], len(body["messages"]))
        try:
            resp = requests.post(
                self.endpoint,
                headers=headers,
                json=body,
                timeout=self.settings.llm_timeout_secs,
            )
        except requests.RequestException as exc:
            log.warning("LLM request error: %r", exc)
            raise GenerationError(f"Generative service request failed: {exc}") from exc

        if resp.status_code != 200:
            msg = (resp.text or "")[:400]
            log.warning("LLM HTTP %s: %s", resp.status_code, msg)
            raise GenerationError(f"Generative service returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            log.warning("LLM: non-JSON HTTP body")
            raise GenerationError("Generative service returned a non-JSON body") from exc

        return _completion_text(data)


def _completion_text(data: Any) -> str:
    if not isinstance(data, dict):
        raise GenerationError("Generative service returned an unexpected payload")
    choices: List[Any] = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        raise GenerationError("Generative service returned no choices")
    message = choices[0].get("message") or {}
    text = message.get("content") if isinstance(message, dict) else None
    if not isinstance(text, str):
        log.warning("LLM: empty response text")
        return ""
    return text
