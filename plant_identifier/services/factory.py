"""Builds adapters and the orchestrator from Settings."""
from plant_identifier.config import Settings
from plant_identifier.orchestrator.acquisition import AcquisitionController
from plant_identifier.orchestrator.state_machine import Orchestrator
from plant_identifier.services.status_store import StatusStore


def build_vision(settings: Settings, status: StatusStore):
    # Values: gemini | claude | mock  (default: gemini)
    if settings.vision_adapter == "claude":
        from plant_identifier.adapters.vision.claude_vision import ClaudeVision
        return ClaudeVision(
            status, settings.anthropic_api_key,
            model=settings.claude_model, timeout=settings.inference_timeout,
        )
    if settings.vision_adapter == "mock":
        from plant_identifier.adapters.vision.mock_vision import MockVision
        return MockVision(status)
    if settings.vision_adapter != "gemini":
        status.log(f"vision: unknown adapter {settings.vision_adapter!r}, using gemini")
    from plant_identifier.adapters.vision.gemini_vision import GeminiVision
    return GeminiVision(
        status, settings.gemini_api_key,
        model=settings.gemini_model, api_base=settings.gemini_api_base,
        timeout=settings.inference_timeout,
    )


def build_camera(settings: Settings, status: StatusStore):
    # Values: cv2 | mock  (default: cv2)
    if settings.camera_adapter == "mock":
        from plant_identifier.adapters.camera.mock_camera import MockCamera
        return MockCamera(status, settings.mock_camera_dir)
    from plant_identifier.adapters.camera.cv2_camera import CV2Camera
    return CV2Camera(status, index=settings.camera_index, jpeg_quality=settings.jpeg_quality)


def build_orchestrator(settings: Settings, status: StatusStore) -> Orchestrator:
    vision = build_vision(settings, status)
    camera = build_camera(settings, status)
    status.log(f"vision adapter: {type(vision).__name__} ready={vision.ready}")
    status.log(f"camera adapter: {type(camera).__name__}")
    return Orchestrator(AcquisitionController(camera, status), vision, status)
