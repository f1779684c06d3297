import time
from typing import Optional

from plant_identifier.orchestrator import errors
from plant_identifier.orchestrator.acquisition import AcquisitionController
from plant_identifier.orchestrator.contracts import (
    AcquireResult, IdentifyResult, ImageArtifact, PlantRecord, RequestState, RequestStatus,
)


class ViewState:
    """
    idle → image_ready → pending → (succeeded | failed), restartable from anywhere.

    generation is bumped whenever the current image changes; an identify
    request remembers the generation it started under, and its answer is
    only applied if nothing newer has arrived since.
    """

    def __init__(self):
        self.state = RequestState()
        self.artifact: Optional[ImageArtifact] = None
        self.generation = 0

    @property
    def status(self) -> RequestStatus:
        return self.state.status

    def image_acquired(self, artifact: ImageArtifact):
        self.artifact = artifact
        self.generation += 1
        self.state = RequestState(status=RequestStatus.IMAGE_READY)

    def can_identify(self) -> bool:
        return self.artifact is not None and self.state.status != RequestStatus.PENDING

    def begin_identify(self) -> int:
        if not self.can_identify():
            raise RuntimeError(f"cannot identify from state {self.state.status.value}")
        self.state = RequestState(status=RequestStatus.PENDING)
        return self.generation

    def succeed(self, token: int, record: PlantRecord) -> bool:
        if token != self.generation:
            return False
        self.state = RequestState(status=RequestStatus.SUCCEEDED, record=record)
        return True

    def fail(self, token: int, code: str, reason: str) -> bool:
        if token != self.generation:
            return False
        self.state = RequestState(status=RequestStatus.FAILED, error_code=code, error=reason)
        return True

    def reset(self):
        self.artifact = None
        self.generation += 1
        self.state = RequestState()


class Orchestrator:
    def __init__(self, acquisition: AcquisitionController, vision, status_store):
        self.acquisition = acquisition
        self.vision = vision
        self.status = status_store
        self.view = ViewState()

    # ── acquisition ──────────────────────────────────────────────────────────

    async def select_file(self, data: bytes, mime_type: str) -> AcquireResult:
        try:
            artifact = await self.acquisition.select_from_file(data, mime_type)
        except Exception as e:
            self.status.log(f"select_file: error {type(e).__name__}: {e}")
            return self._acquire_failed(errors.ERR_UNKNOWN, str(e))
        return self._acquired(artifact)

    async def select_path(self, path) -> AcquireResult:
        try:
            artifact = await self.acquisition.select_from_path(path)
        except OSError as e:
            self.status.log(f"select_path: cannot read {path}: {e}")
            return self._acquire_failed(errors.ERR_BAD_REQUEST, str(e))
        return self._acquired(artifact)

    async def start_camera(self) -> AcquireResult:
        try:
            await self.acquisition.start_camera_session()
        except errors.AcquisitionError as e:
            self.status.log(f"start_camera: {e.code} {e}")
            return self._acquire_failed(e.code, str(e))
        return AcquireResult(ok=True, camera_active=self.acquisition.camera_active)

    async def capture(self) -> AcquireResult:
        try:
            artifact = await self.acquisition.capture_frame()
        except errors.AcquisitionError as e:
            self.status.log(f"capture: {e.code} {e}")
            return self._acquire_failed(e.code, str(e))
        return self._acquired(artifact)

    async def cancel_camera(self) -> AcquireResult:
        await self.acquisition.cancel_camera_session()
        return AcquireResult(ok=True, camera_active=False)

    def _acquired(self, artifact: ImageArtifact) -> AcquireResult:
        if self.view.status == RequestStatus.PENDING:
            self.status.log("view: new image while a request is in flight, its answer will be dropped")
        self.view.image_acquired(artifact)
        self.status.log(f"view: image_ready ({artifact.mime_type}, {artifact.size} bytes)")
        return AcquireResult(ok=True, artifact=artifact, camera_active=self.acquisition.camera_active)

    def _acquire_failed(self, code: str, error: str) -> AcquireResult:
        # the previous image (if any) and state are left alone
        return AcquireResult(ok=False, error_code=code, error=error, camera_active=self.acquisition.camera_active)

    # ── inference ────────────────────────────────────────────────────────────

    async def identify(self) -> IdentifyResult:
        if self.view.artifact is None:
            self.status.log("identify: rejected, no image")
            return IdentifyResult(ok=False, duration_ms=0, error_code=errors.ERR_NO_IMAGE, error="no image selected")
        if self.view.status == RequestStatus.PENDING:
            self.status.log("identify: rejected, request already pending")
            return IdentifyResult(ok=False, duration_ms=0, error_code=errors.ERR_BUSY, error="identification in progress")

        artifact = self.view.artifact
        token = self.view.begin_identify()
        self.status.log(f"identify: pending (generation={token})")
        t0 = time.time()
        try:
            record = await self.vision.identify(artifact)
        except errors.InferenceError as e:
            return self._identify_failed(token, t0, e.code, str(e))
        except Exception as e:
            return self._identify_failed(token, t0, errors.ERR_UNKNOWN, f"{type(e).__name__}: {e}")

        dt = int((time.time() - t0) * 1000)
        applied = self.view.succeed(token, record)
        if applied:
            self.status.log(f"identify: succeeded {record.name} dt={dt}ms")
        else:
            self.status.log(f"identify: stale answer for generation={token} dropped dt={dt}ms")
        return IdentifyResult(ok=True, duration_ms=dt, record=record, stale=not applied)

    def _identify_failed(self, token: int, t0: float, code: str, reason: str) -> IdentifyResult:
        dt = int((time.time() - t0) * 1000)
        applied = self.view.fail(token, code, reason)
        if applied:
            self.status.log(f"identify: failed {code}: {reason} dt={dt}ms")
        else:
            self.status.log(f"identify: stale failure for generation={token} dropped ({code})")
        return IdentifyResult(ok=False, duration_ms=dt, error_code=code, error=reason, stale=not applied)

    # ── lifecycle ────────────────────────────────────────────────────────────

    async def reset(self):
        await self.acquisition.cancel_camera_session()
        self.view.reset()
        self.status.log("view: reset to idle")

    async def close(self):
        await self.acquisition.close()
