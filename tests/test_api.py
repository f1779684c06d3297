import base64

import pytest
from fastapi.testclient import TestClient

from plant_identifier.orchestrator.acquisition import AcquisitionController
from plant_identifier.orchestrator.errors import DeviceUnavailable
from plant_identifier.orchestrator.state_machine import Orchestrator
from plant_identifier.services import api
from plant_identifier.web.app import app as web_app

from conftest import FakeCamera, ScriptedVision

PNG = b"\x89PNG\r\n\x1a\nleaf"
PNG_B64 = base64.b64encode(PNG).decode("ascii")


@pytest.fixture
def client(monkeypatch, orch, status):
    monkeypatch.setattr(api, "orch", orch)
    monkeypatch.setattr(api, "status", status)
    return TestClient(api.app)


def test_status_starts_idle(client):
    body = client.get("/status").json()
    assert body["status"] == "idle"
    assert body["has_image"] is False
    assert body["plant"] is None


def test_identify_without_image(client, vision):
    body = client.post("/identify").json()
    assert body["ok"] is False
    assert body["error_code"] == "NO_IMAGE"
    assert body["status"] == "idle"
    assert vision.calls == 0


def test_upload_then_identify(client, vision):
    body = client.post("/select_file", json={"image": PNG_B64, "mime_type": "image/png"}).json()
    assert body["ok"] is True
    assert body["status"] == "image_ready"
    assert body["preview"] == f"data:image/png;base64,{PNG_B64}"

    body = client.post("/identify").json()
    assert body["ok"] is True
    assert body["status"] == "succeeded"
    assert body["plant"] == {
        "name": "Rose",
        "scientificName": "Rosa",
        "family": "Rosaceae",
        "origin": "Asia",
        "characteristics": "Thorny shrub",
        "uses": "Ornamental",
    }
    assert vision.artifacts[0].binary_data == PNG

    status = client.get("/status").json()
    assert status["status"] == "succeeded"
    assert status["plant"]["name"] == "Rose"


def test_data_url_upload_takes_mime_from_prefix(client, orch):
    body = client.post("/select_file", json={"image": f"data:image/webp;base64,{PNG_B64}"}).json()
    assert body["ok"] is True
    assert orch.view.artifact.mime_type == "image/webp"
    assert orch.view.artifact.binary_data == PNG


def test_bad_base64_is_rejected(client, orch):
    body = client.post("/select_file", json={"image": "not base64!!", "mime_type": "image/png"}).json()
    assert body["ok"] is False
    assert body["error_code"] == "BAD_REQUEST"
    assert orch.view.artifact is None


def test_parse_failure_reports_failed(client, vision):
    vision.reply = "Sorry, I cannot identify this."
    client.post("/select_file", json={"image": PNG_B64, "mime_type": "image/png"})
    body = client.post("/identify").json()
    assert body["ok"] is False
    assert body["status"] == "failed"
    assert body["error_code"] == "PARSE_ERROR"
    assert body["plant"] is None
    assert client.get("/status").json()["error_code"] == "PARSE_ERROR"


def test_camera_flow(client, camera):
    assert client.post("/camera/capture").json()["error_code"] == "NO_ACTIVE_SESSION"

    body = client.post("/camera/start").json()
    assert body["ok"] is True and body["camera_active"] is True
    assert client.post("/camera/start").json()["camera_active"] is True
    assert camera.opens == 1

    body = client.post("/camera/capture").json()
    assert body["ok"] is True
    assert body["camera_active"] is False
    assert body["status"] == "image_ready"
    assert body["preview"].startswith("data:image/jpeg;base64,")
    assert client.get("/health").json()["camera_tracks_open"] == 0


def test_camera_cancel(client, camera):
    client.post("/camera/start")
    body = client.post("/camera/cancel").json()
    assert body["ok"] is True and body["camera_active"] is False
    assert camera.tracks_open == 0
    assert client.get("/status").json()["has_image"] is False


def test_camera_unavailable(monkeypatch, status):
    cam = FakeCamera(fail_with=DeviceUnavailable("no camera at index 0"))
    monkeypatch.setattr(api, "orch", Orchestrator(AcquisitionController(cam, status), ScriptedVision(status), status))
    monkeypatch.setattr(api, "status", status)
    body = TestClient(api.app).post("/camera/start").json()
    assert body["ok"] is False
    assert body["error_code"] == "DEVICE_UNAVAILABLE"
    assert body["camera_active"] is False


def test_reset(client):
    client.post("/select_file", json={"image": PNG_B64, "mime_type": "image/png"})
    assert client.post("/reset").json() == {"ok": True, "status": "idle"}
    assert client.get("/status").json()["has_image"] is False


def test_health_reports_adapters(client):
    body = client.get("/health").json()
    assert body["vision_adapter"] == "ScriptedVision"
    assert body["vision_ready"] is True
    assert body["camera_adapter"] == "FakeCamera"
    assert body["all_ok"] is True


def test_logs_are_exposed(client):
    client.post("/identify")
    logs = client.get("/status").json()["logs"]
    assert "IDENTIFY" in logs
    assert any("rejected" in line for line in logs)


def test_web_app_serves_page_and_api(monkeypatch, orch, status):
    monkeypatch.setattr(api, "orch", orch)
    monkeypatch.setattr(api, "status", status)
    client = TestClient(web_app)
    page = client.get("/")
    assert page.status_code == 200
    assert "Plant Identifier" in page.text
    assert client.get("/static/app.js").status_code == 200
    assert client.get("/status").json()["status"] == "idle"
