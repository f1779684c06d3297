"""
Runtime settings, read once from the environment (and .env if present).

Adapters receive their credentials from Settings at construction time;
nothing below the service layer calls os.getenv.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-1.5-flash"
CLAUDE_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class Settings:
    vision_adapter: str = "gemini"            # gemini | claude | mock
    gemini_api_key: Optional[str] = None
    gemini_model: str = GEMINI_MODEL
    gemini_api_base: str = GEMINI_API_BASE
    anthropic_api_key: Optional[str] = None
    claude_model: str = CLAUDE_MODEL
    inference_timeout: float = 60.0
    camera_adapter: str = "cv2"               # cv2 | mock
    camera_index: int = 0
    mock_camera_dir: Optional[str] = None
    jpeg_quality: int = 90


def _env(name: str) -> Optional[str]:
    # treat "" the same as unset so an empty line in .env does not count as a key
    value = os.getenv(name)
    return value.strip() if value and value.strip() else None


def load_settings(dotenv_path: str = ".env") -> Settings:
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return Settings(
        vision_adapter=(_env("VISION_ADAPTER") or "gemini").lower(),
        gemini_api_key=_env("GEMINI_API_KEY"),
        gemini_model=_env("GEMINI_MODEL") or GEMINI_MODEL,
        gemini_api_base=(_env("GEMINI_API_BASE") or GEMINI_API_BASE).rstrip("/"),
        anthropic_api_key=_env("ANTHROPIC_API_KEY"),
        claude_model=_env("CLAUDE_MODEL") or CLAUDE_MODEL,
        inference_timeout=float(_env("INFERENCE_TIMEOUT") or "60"),
        camera_adapter=(_env("CAMERA_ADAPTER") or "cv2").lower(),
        camera_index=int(_env("CAMERA_INDEX") or "0"),
        mock_camera_dir=_env("MOCK_CAMERA_DIR"),
        jpeg_quality=int(_env("JPEG_QUALITY") or "90"),
    )
