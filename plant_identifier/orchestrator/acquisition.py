"""
Acquisition controller: turns a file or a camera frame into an ImageArtifact.

The two sources are mutually exclusive in the UI but not here; whichever
finishes last produces the current artifact. The controller owns the camera
session and is the only thing allowed to open or release the device.
"""
import asyncio
import mimetypes
from pathlib import Path

from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.orchestrator.contracts import ImageArtifact
from plant_identifier.orchestrator.errors import DeviceUnavailable, NoActiveSession

CAPTURE_MIME = "image/jpeg"


class AcquisitionController:
    def __init__(self, camera: CameraAdapter, status_store):
        self.camera = camera
        self.status = status_store
        self._active = False
        self._lock = asyncio.Lock()

    @property
    def camera_active(self) -> bool:
        return self._active

    async def select_from_file(self, data: bytes, mime_type: str) -> ImageArtifact:
        # no size/type checks: the page's file picker already hints image/*
        artifact = await asyncio.to_thread(ImageArtifact.from_bytes, data, mime_type)
        self.status.log(f"acquisition: file selected ({mime_type}, {artifact.size} bytes)")
        return artifact

    async def select_from_path(self, path: str | Path) -> ImageArtifact:
        path = Path(path)
        data = await asyncio.to_thread(path.read_bytes)
        mime_type, _ = mimetypes.guess_type(path.name)
        return await self.select_from_file(data, mime_type or CAPTURE_MIME)

    async def start_camera_session(self) -> None:
        async with self._lock:
            if self._active:
                self.status.log("acquisition: camera already open, reusing session")
                return
            # open() raises DeviceUnavailable / PermissionDenied and leaves nothing open
            await asyncio.to_thread(self.camera.open)
            self._active = True
            self.status.log("acquisition: camera session started")

    async def capture_frame(self) -> ImageArtifact:
        async with self._lock:
            if not self._active:
                raise NoActiveSession("no camera session is open")
            try:
                data = await asyncio.to_thread(self.camera.capture_bytes)
            finally:
                await self._stop_session("capture")
            if not data:
                raise DeviceUnavailable("camera returned no frame")
            artifact = await asyncio.to_thread(ImageArtifact.from_bytes, data, CAPTURE_MIME)
            self.status.log(f"acquisition: frame captured ({artifact.size} bytes)")
            return artifact

    async def cancel_camera_session(self) -> None:
        async with self._lock:
            await self._stop_session("cancel")

    async def close(self) -> None:
        await self.cancel_camera_session()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def _stop_session(self, reason: str) -> None:
        # Called on every exit path; release() runs even if the session flag is already off.
        # The flag drops before the await so a cancelled release still reads as closed.
        was_active = self._active
        self._active = False
        await asyncio.to_thread(self.camera.release)
        if was_active:
            self.status.log(f"acquisition: camera session ended ({reason})")
