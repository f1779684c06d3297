from pydantic import BaseModel
from typing import Literal, Optional

from plant_identifier.orchestrator.contracts import PlantRecord

StatusName = Literal["idle", "image_ready", "pending", "succeeded", "failed"]


class PlantOut(BaseModel):
    # field names are the wire keys the page renders as table rows
    name: str
    scientificName: str
    family: str
    origin: str
    characteristics: str
    uses: str

    @classmethod
    def from_record(cls, record: Optional[PlantRecord]) -> Optional["PlantOut"]:
        return cls(**record.to_wire()) if record else None


class SelectFileRequest(BaseModel):
    image: str                        # base64, or a full data: URL from FileReader
    mime_type: Optional[str] = None   # required unless image is a data: URL


class AcquireResponse(BaseModel):
    ok: bool
    status: StatusName
    camera_active: bool = False
    preview: Optional[str] = None     # data URL of the new image
    error_code: Optional[str] = None
    error: Optional[str] = None


class IdentifyResponse(BaseModel):
    ok: bool
    status: StatusName
    duration_ms: int = 0
    plant: Optional[PlantOut] = None
    stale: bool = False
    error_code: Optional[str] = None
    error: Optional[str] = None


class StatusResponse(BaseModel):
    status: StatusName
    has_image: bool
    preview: Optional[str] = None
    mime_type: Optional[str] = None
    camera_active: bool = False
    plant: Optional[PlantOut] = None
    error_code: Optional[str] = None
    error: Optional[str] = None
    logs: list[str]
