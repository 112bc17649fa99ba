from __future__ import annotations

import logging
import os
import time

import httpx

from wordquiz.providers.base import LLMProvider

log = logging.getLogger("wordquiz.llm")


class GeminiProvider(LLMProvider):
    """Google Gemini through the ``generateContent`` REST endpoint."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash-001",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
        api_key: str | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key if api_key is not None else os.environ.get("GEMINI_API_KEY", "")

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")
        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json={
                    "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                    "generationConfig": {"temperature": temperature},
                },
            )
            resp.raise_for_status()
            data = resp.json()
        candidates = data.get("candidates") or []
        if not candidates:
            reason = data.get("promptFeedback", {}).get("blockReason", "no candidates")
            raise RuntimeError(f"Gemini returned no text ({reason})")
        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(p.get("text", "") for p in parts)
        log.info("── RESPONSE (%.1fs) ──\n%s", time.monotonic() - t0, text)
        return text

    def name(self) -> str:
        return f"gemini/{self.model}"
