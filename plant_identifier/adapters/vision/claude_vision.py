"""
Claude plant identifier over the Anthropic messages API.
Needs ANTHROPIC_API_KEY (passed in from Settings).
"""
import base64

import anthropic

from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.config import CLAUDE_MODEL
from plant_identifier.orchestrator.contracts import ImageArtifact
from plant_identifier.orchestrator.errors import NetworkOrModelError


class ClaudeVision(VisionAdapter):
    name = "claude_vision"

    def __init__(self, status_store, api_key: str | None, model: str = CLAUDE_MODEL, timeout: float = 60.0):
        super().__init__(status_store, api_key)
        self.model = model
        self._client = None
        if self.ready:
            # max_retries=0: one request per identify, retries are the user's call
            self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
            self.status.log(f"claude_vision: ready ({model})")
        else:
            self.status.log("claude_vision: ANTHROPIC_API_KEY not set")

    async def _generate(self, prompt: str, artifact: ImageArtifact) -> str:
        b64 = base64.standard_b64encode(artifact.binary_data).decode("ascii")
        message = await self._client.messages.create(
            model=self.model,
            max_tokens=1024,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": artifact.mime_type,
                                "data": b64,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
        if not text.strip():
            raise NetworkOrModelError(f"model returned no text (stop_reason={message.stop_reason})")
        return text
