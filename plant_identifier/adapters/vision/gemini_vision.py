"""
Gemini plant identifier.
Calls the generateContent REST endpoint directly with httpx, no Google SDK.
Needs GEMINI_API_KEY (passed in from Settings).
"""
import base64

import httpx

from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.config import GEMINI_API_BASE, GEMINI_MODEL
from plant_identifier.orchestrator.contracts import ImageArtifact
from plant_identifier.orchestrator.errors import NetworkOrModelError


class GeminiVision(VisionAdapter):
    name = "gemini_vision"

    def __init__(
        self,
        status_store,
        api_key: str | None,
        model: str = GEMINI_MODEL,
        api_base: str = GEMINI_API_BASE,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(status_store, api_key)
        self.model = model
        self._url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self._timeout = timeout
        self._transport = transport
        if self.ready:
            self.status.log(f"gemini_vision: ready (model={model})")
        else:
            self.status.log("gemini_vision: GEMINI_API_KEY not set")

    async def _generate(self, prompt: str, artifact: ImageArtifact) -> str:
        # inline_data carries the raw bytes base64'd, never the data: URL
        b64 = base64.standard_b64encode(artifact.binary_data).decode("ascii")
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {"inline_data": {"mime_type": artifact.mime_type, "data": b64}},
                    ]
                }
            ]
        }
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self._url, json=payload, headers=headers)
        if not resp.is_success:
            self.status.log(f"gemini_vision: HTTP {resp.status_code} - {resp.text[:300]}")
            raise NetworkOrModelError(f"HTTP {resp.status_code}")
        return self._extract_text(resp.json())

    def _extract_text(self, data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise NetworkOrModelError(f"model returned nothing ({reason})")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts)
        if not text.strip():
            reason = candidates[0].get("finishReason", "empty reply")
            raise NetworkOrModelError(f"model returned no text ({reason})")
        return text
