from abc import ABC, abstractmethod


class CameraAdapter(ABC):
    """One physical (or simulated) capture device. All methods block."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the device. Raises DeviceUnavailable or PermissionDenied."""
        ...

    @abstractmethod
    def capture_bytes(self) -> bytes | None:
        """Read one frame at native resolution. Returns JPEG bytes or None on failure."""
        ...

    @abstractmethod
    def release(self) -> None:
        """Stop every track and give the device back. Safe to call twice."""
        ...

    @property
    @abstractmethod
    def tracks_open(self) -> int:
        ...
