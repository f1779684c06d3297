"""
OpenCV webcam capture adapter.
Settings.camera_index (CAMERA_INDEX, default 0) selects the webcam device.
"""
import sys
from pathlib import Path

import cv2

from plant_identifier.adapters.camera.base import CameraAdapter
from plant_identifier.orchestrator.errors import DeviceUnavailable, PermissionDenied


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int = 0, jpeg_quality: int = 90):
        self.status = status_store
        self._index = index
        self._quality = jpeg_quality
        self._cap = None

    def open(self) -> None:
        if self._cap is not None and self._cap.isOpened():
            return
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            if self._device_node_exists():
                self.status.log(f"cv2_camera: device {self._index} refused access")
                raise PermissionDenied(f"camera {self._index} exists but could not be opened")
            self.status.log(f"cv2_camera: no device at index {self._index}")
            raise DeviceUnavailable(f"no camera at index {self._index}")
        self._cap = cap
        w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.status.log(f"cv2_camera: opened device {self._index} ({w}x{h})")

    def capture_bytes(self) -> bytes | None:
        if self._cap is None or not self._cap.isOpened():
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        # frame is already at the device's native resolution
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._quality])
        if not ok:
            self.status.log("cv2_camera: jpeg encode failed")
            return None
        return bytes(buf)

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.status.log(f"cv2_camera: released device {self._index}")

    @property
    def tracks_open(self) -> int:
        return 1 if self._cap is not None and self._cap.isOpened() else 0

    def _device_node_exists(self) -> bool:
        # Only Linux exposes a device node we can check; elsewhere a failed open reads as "no device"
        if sys.platform.startswith("linux"):
            return Path(f"/dev/video{self._index}").exists()
        return False
