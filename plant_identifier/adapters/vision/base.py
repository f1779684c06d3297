"""
Shared inference plumbing: the prompt, fence stripping, and record parsing.

Adapters only implement _generate(); identify() owns the credential check,
error mapping and parsing so every backend fails the same way.
"""
import json
import re

from plant_identifier.orchestrator.contracts import ImageArtifact, PlantRecord, RECORD_KEYS
from plant_identifier.orchestrator.errors import (
    InferenceError, MissingCredential, NetworkOrModelError, ParseError,
)

PROMPT = """
Identify this plant and provide the following information:
1. Common name
2. Scientific name
3. Family
4. Origin
5. Key characteristics (in brief)
6. Common uses

Provide the information as a single JSON object with exactly these keys and string values:
{
  "name": "",
  "scientificName": "",
  "family": "",
  "origin": "",
  "characteristics": "",
  "uses": ""
}
""".strip()

# ```json ... ``` or ``` ... ``` around the whole reply
_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def strip_fences(text: str) -> str:
    text = _LEADING_FENCE.sub("", text or "")
    text = _TRAILING_FENCE.sub("", text)
    return text.strip()


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(_as_text(v) for v in value)
    return str(value).strip()


def parse_plant_record(raw: str) -> PlantRecord:
    cleaned = strip_fences(raw)
    try:
        data = json.loads(cleaned)
    except (ValueError, RecursionError) as e:
        raise ParseError(f"reply is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}")
    missing = [k for k in RECORD_KEYS if k not in data]
    if missing:
        raise ParseError(f"reply is missing keys: {', '.join(missing)}")
    return PlantRecord(
        name=_as_text(data["name"]),
        scientific_name=_as_text(data["scientificName"]),
        family=_as_text(data["family"]),
        origin=_as_text(data["origin"]),
        characteristics=_as_text(data["characteristics"]),
        uses=_as_text(data["uses"]),
    )


class VisionAdapter:
    name = "vision"
    requires_credential = True

    def __init__(self, status_store, api_key: str | None = None):
        self.status = status_store
        self._api_key = api_key

    @property
    def ready(self) -> bool:
        return bool(self._api_key) or not self.requires_credential

    async def identify(self, artifact: ImageArtifact) -> PlantRecord:
        """Send one request for this artifact and return the parsed record."""
        if artifact is None:
            raise ValueError("identify() needs an image artifact")
        if not self.ready:
            self.status.log(f"{self.name}: no API key configured")
            raise MissingCredential(f"{self.name}: API key not configured")

        try:
            raw = await self._generate(PROMPT, artifact)
        except InferenceError:
            raise
        except Exception as e:
            self.status.log(f"{self.name}: API error: {type(e).__name__}: {e}")
            raise NetworkOrModelError(f"{type(e).__name__}: {e}") from e

        self.status.log(f"{self.name}: raw response = {raw[:300]!r}")
        try:
            record = parse_plant_record(raw)
        except ParseError as e:
            self.status.log(f"{self.name}: {e}")
            raise
        self.status.log(f"{self.name}: → {record.name} ({record.scientific_name})")
        return record

    async def _generate(self, prompt: str, artifact: ImageArtifact) -> str:
        """Return the model's raw text reply."""
        raise NotImplementedError
