import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Wire keys the model is asked for, in display order
RECORD_KEYS = ["name", "scientificName", "family", "origin", "characteristics", "uses"]


@dataclass(frozen=True)
class ImageArtifact:
    binary_data: bytes
    mime_type: str
    preview_encoding: str      # data:<mime>;base64,<payload>

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ImageArtifact":
        b64 = base64.standard_b64encode(data).decode("ascii")
        return cls(binary_data=data, mime_type=mime_type, preview_encoding=f"data:{mime_type};base64,{b64}")

    @property
    def size(self) -> int:
        return len(self.binary_data)


@dataclass(frozen=True)
class PlantRecord:
    name: str
    scientific_name: str
    family: str
    origin: str
    characteristics: str
    uses: str

    def to_wire(self) -> dict[str, str]:
        return {
            "name": self.name,
            "scientificName": self.scientific_name,
            "family": self.family,
            "origin": self.origin,
            "characteristics": self.characteristics,
            "uses": self.uses,
        }


class RequestStatus(str, Enum):
    IDLE = "idle"
    IMAGE_READY = "image_ready"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class RequestState:
    status: RequestStatus = RequestStatus.IDLE
    record: Optional[PlantRecord] = None       # only set when SUCCEEDED
    error_code: Optional[str] = None           # only set when FAILED
    error: Optional[str] = None


@dataclass
class IdentifyResult:
    ok: bool
    duration_ms: int
    error_code: Optional[str] = None
    error: Optional[str] = None
    record: Optional[PlantRecord] = None
    # True when the answer arrived after a newer image replaced the one it was for
    stale: bool = False


@dataclass
class AcquireResult:
    ok: bool
    artifact: Optional[ImageArtifact] = None
    error_code: Optional[str] = None
    error: Optional[str] = None
    camera_active: bool = False
