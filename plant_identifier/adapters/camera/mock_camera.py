"""Mock camera: serves a random JPEG from a sample directory instead of a device."""
import random
from pathlib import Path

from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.orchestrator.errors import DeviceUnavailable

SAMPLES_DIR = Path(__file__).parent / "samples"


class MockCamera(CameraAdapter):
    def __init__(self, status_store, samples_dir: str | Path | None = None):
        self.status = status_store
        self._dir = Path(samples_dir) if samples_dir else SAMPLES_DIR
        self._open = False

    def _samples(self) -> list[Path]:
        if not self._dir.is_dir():
            return []
        return sorted(p for p in self._dir.iterdir() if p.suffix.lower() in (".jpg", ".jpeg"))

    def open(self) -> None:
        if not self._samples():
            self.status.log(f"mock_camera: no sample images in {self._dir}")
            raise DeviceUnavailable(f"no sample images in {self._dir}")
        self._open = True
        self.status.log("mock_camera: opened")

    def capture_bytes(self) -> bytes | None:
        if not self._open:
            return None
        jpegs = self._samples()
        if not jpegs:
            self.status.log("mock_camera: no sample images found")
            return None
        chosen = random.choice(jpegs)
        self.status.log(f"mock_camera: serving {chosen.name}")
        return chosen.read_bytes()

    def release(self) -> None:
        if self._open:
            self._open = False
            self.status.log("mock_camera: released")

    @property
    def tracks_open(self) -> int:
        return 1 if self._open else 0
