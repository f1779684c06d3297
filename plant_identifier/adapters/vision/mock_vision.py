import asyncio
import json

from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.orchestrator.contracts import ImageArtifact

_CANNED = {
    "name": "Rose",
    "scientificName": "Rosa",
    "family": "Rosaceae",
    "origin": "Asia",
    "characteristics": "Thorny shrub",
    "uses": "Ornamental",
}


class MockVision(VisionAdapter):
    """Offline stand-in: ignores the image and replies like the model would."""

    name = "mock_vision"
    requires_credential = False

    def __init__(self, status_store, reply: str | None = None):
        super().__init__(status_store)
        self._reply = reply if reply is not None else "```json\n" + json.dumps(_CANNED, indent=2) + "\n```"

    async def _generate(self, prompt: str, artifact: ImageArtifact) -> str:
        await asyncio.sleep(0)
        return self._reply
