import base64
import re
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from plant_identifier.config import load_settings
from plant_identifier.services.models import (
    AcquireResponse, IdentifyResponse, PlantOut, SelectFileRequest, StatusResponse,
)
from plant_identifier.services.factory import build_orchestrator
from plant_identifier.services.status_store import StatusStore
from plant_identifier.orchestrator import errors
from plant_identifier.orchestrator.contracts import AcquireResult

_DATA_URL = re.compile(r"^data:([^;,]+)?(?:;[^,]*)?;base64,(.*)$", re.DOTALL)
DEFAULT_MIME = "image/jpeg"


settings = load_settings()
status = StatusStore()
orch = build_orchestrator(settings, status)


async def shutdown():
    # release the camera if the process stops mid-session
    await orch.close()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await shutdown()


app = FastAPI(title="plant-identifier api", lifespan=lifespan)


def _decode_image(image: str, mime_type: Optional[str]) -> tuple[bytes, str]:
    m = _DATA_URL.match(image.strip())
    if m:
        mime_type = mime_type or m.group(1)
        image = m.group(2)
    data = base64.b64decode(image, validate=True)
    return data, mime_type or DEFAULT_MIME


def _acquire_response(res: AcquireResult) -> AcquireResponse:
    return AcquireResponse(
        ok=res.ok,
        status=orch.view.status.value,
        camera_active=res.camera_active,
        preview=res.artifact.preview_encoding if res.artifact else None,
        error_code=res.error_code,
        error=res.error,
    )


@app.get("/status", response_model=StatusResponse)
def get_status():
    view = orch.view
    art = view.artifact
    return StatusResponse(
        status=view.status.value,
        has_image=art is not None,
        preview=art.preview_encoding if art else None,
        mime_type=art.mime_type if art else None,
        camera_active=orch.acquisition.camera_active,
        plant=PlantOut.from_record(view.state.record),
        error_code=view.state.error_code,
        error=view.state.error,
        logs=status.logs,
    )


@app.post("/select_file", response_model=AcquireResponse)
async def select_file(req: SelectFileRequest):
    try:
        data, mime_type = _decode_image(req.image, req.mime_type)
    except ValueError as e:
        status.log(f"SELECT_FILE decode error: {e}")
        return AcquireResponse(
            ok=False, status=orch.view.status.value, camera_active=orch.acquisition.camera_active,
            error_code=errors.ERR_BAD_REQUEST, error="base64 decode failed",
        )
    status.log(f"SELECT_FILE received ({mime_type})")
    return _acquire_response(await orch.select_file(data, mime_type))


@app.post("/camera/start", response_model=AcquireResponse)
async def camera_start():
    status.log("CAMERA_START")
    return _acquire_response(await orch.start_camera())


@app.post("/camera/capture", response_model=AcquireResponse)
async def camera_capture():
    status.log("CAMERA_CAPTURE")
    return _acquire_response(await orch.capture())


@app.post("/camera/cancel", response_model=AcquireResponse)
async def camera_cancel():
    status.log("CAMERA_CANCEL")
    return _acquire_response(await orch.cancel_camera())


@app.post("/identify", response_model=IdentifyResponse)
async def identify():
    status.log("IDENTIFY")
    res = await orch.identify()
    return IdentifyResponse(
        ok=res.ok,
        status=orch.view.status.value,
        duration_ms=res.duration_ms,
        plant=PlantOut.from_record(res.record),
        stale=res.stale,
        error_code=res.error_code,
        error=res.error,
    )


@app.post("/reset")
async def reset():
    status.log("RESET")
    await orch.reset()
    return {"ok": True, "status": orch.view.status.value}


@app.get("/health")
def health():
    """Report which adapters are wired in and whether a credential is present."""
    vision = orch.vision
    camera = orch.acquisition.camera
    checks = {
        "api": True,
        "vision_adapter": type(vision).__name__,
        "vision_ready": vision.ready,
        "camera_adapter": type(camera).__name__,
        "camera_active": orch.acquisition.camera_active,
        "camera_tracks_open": camera.tracks_open,
    }
    checks["all_ok"] = checks["api"] and checks["vision_ready"]
    return checks
