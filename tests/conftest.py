"""Shared fixtures: fake camera, scripted model, and a quiet service configuration."""

import asyncio
import json
import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# The service module builds its adapters at import time; keep it offline.
os.environ["VISION_ADAPTER"] = "mock"
os.environ["CAMERA_ADAPTER"] = "mock"

from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.adapters.vision.base import VisionAdapter
from plant_identifier.orchestrator.acquisition import AcquisitionController
from plant_identifier.orchestrator.state_machine import Orchestrator
from plant_identifier.services.status_store import StatusStore

ROSE = {
    "name": "Rose",
    "scientificName": "Rosa",
    "family": "Rosaceae",
    "origin": "Asia",
    "characteristics": "Thorny shrub",
    "uses": "Ornamental",
}
ROSE_REPLY = "```json\n" + json.dumps(ROSE) + " \n```"

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake-frame\xff\xd9"


class FakeCamera(CameraAdapter):
    """Counts device opens and live tracks; can be told to refuse or drop frames."""

    def __init__(self, frame: bytes | None = JPEG_BYTES, fail_with: Exception | None = None):
        self.frame = frame
        self.fail_with = fail_with
        self.opens = 0
        self.releases = 0
        self._tracks = 0

    def open(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.opens += 1
        self._tracks += 1

    def capture_bytes(self) -> bytes | None:
        return self.frame if self._tracks else None

    def release(self) -> None:
        self.releases += 1
        self._tracks = 0

    @property
    def tracks_open(self) -> int:
        return self._tracks


class ScriptedVision(VisionAdapter):
    """Returns a fixed reply; optionally waits on `gate` so a request can be held in flight."""

    name = "scripted_vision"

    def __init__(self, status_store, reply: str = ROSE_REPLY, api_key: str | None = "test-key",
                 error: Exception | None = None):
        super().__init__(status_store, api_key)
        self.reply = reply
        self.error = error
        self.calls = 0
        self.gate: asyncio.Event | None = None
        self.artifacts = []

    async def _generate(self, prompt, artifact):
        self.calls += 1
        self.artifacts.append(artifact)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def camera():
    return FakeCamera()


@pytest.fixture
def vision(status):
    return ScriptedVision(status)


@pytest.fixture
def orch(camera, vision, status):
    return Orchestrator(AcquisitionController(camera, status), vision, status)
