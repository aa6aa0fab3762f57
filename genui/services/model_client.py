"""
Language-model client.
The pipeline only depends on the ModelClient protocol (prompt in, text out);
GeminiClient is the production implementation over the Gemini REST API.
"""

from typing import Optional, Protocol

import httpx

from genui.config import Config, config
from genui.errors import ModelTimeoutError, ModelUnavailableError
from genui.services.api_client import APIClient
from genui.utils.logger import logger


class ModelClient(Protocol):
    async def complete(self, prompt: str) -> str:
        ...


def _error_message(response: httpx.Response) -> str:
    """Pull the provider's error message out of a failed response, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.text[:200]


class GeminiClient:
    """Gemini generateContent over httpx (timeout + bounded retry via APIClient)"""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        max_retries: int = 3,
        backoff: float = 1.0,
        temperature: Optional[float] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._client = APIClient(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff=backoff,
            headers={"content-type": "application/json"},
        )

    @classmethod
    def from_config(cls, cfg: Config = config) -> "GeminiClient":
        return cls(
            api_key=cfg.GEMINI_API_KEY,
            model=cfg.GEMINI_MODEL,
            base_url=cfg.GEMINI_API_URL,
            timeout=cfg.MODEL_TIMEOUT,
            max_retries=cfg.MODEL_MAX_RETRIES,
            temperature=cfg.MODEL_TEMPERATURE,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def close(self):
        await self._client.close()

    async def complete(self, prompt: str) -> str:
        if not self.is_configured:
            raise ModelUnavailableError("GEMINI_API_KEY is not configured")

        payload: dict = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if self.temperature is not None:
            payload["generationConfig"] = {"temperature": self.temperature}

        try:
            response = await self._client.post(
                f"/models/{self.model}:generateContent",
                headers={"x-goog-api-key": self.api_key},
                json=payload,
            )
        except httpx.TimeoutException as e:
            raise ModelTimeoutError(f"Gemini request timed out: {e!r}") from e
        except httpx.HTTPError as e:
            raise ModelUnavailableError(f"Gemini request failed: {e!r}") from e

        if response.status_code >= 400:
            raise ModelUnavailableError(
                f"Gemini returned {response.status_code}: {_error_message(response)}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ModelUnavailableError("Gemini returned a non-JSON body") from e

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise ModelUnavailableError(
                f"Gemini returned no candidates (blockReason={block_reason})"
            )

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        # Thinking models may interleave thought parts; only the answer counts
        text = "".join(p.get("text", "") for p in parts if not p.get("thought"))

        finish_reason = candidate.get("finishReason")
        if not text and finish_reason not in (None, "STOP"):
            raise ModelUnavailableError(
                f"Gemini rejected the prompt (finishReason={finish_reason})"
            )
        if finish_reason == "MAX_TOKENS":
            logger.warning(f"Gemini completion truncated at max tokens ({len(text)} chars)")

        return text
