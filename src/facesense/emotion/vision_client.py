"""Google Cloud Vision REST client for face detection."""

import base64
import logging
from typing import Protocol

import httpx

from facesense.config import HTTP_TIMEOUT, VISION_API_BASE, VISION_API_KEY, VISION_MAX_RESULTS
from facesense.errors import ProviderError
from facesense.models import Annotation, Likelihood

logger = logging.getLogger(__name__)


class FaceDetectionProvider(Protocol):
    def detect(self, image: bytes) -> list[Annotation]: ...


class VisionClient:
    """Client for the Vision ``images:annotate`` endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: int = HTTP_TIMEOUT,
        max_results: int = VISION_MAX_RESULTS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or VISION_API_KEY
        if not self.api_key:
            raise ValueError(
                "Vision API key is required. Set GOOGLE_VISION_API_KEY in .env file."
            )
        self.timeout = timeout
        self.max_results = max_results
        self.transport = transport

    def _call(self, body: dict) -> dict:
        """POST an annotate request and return the first per-image response."""
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(
                    f"{VISION_API_BASE}/images:annotate",
                    params={"key": self.api_key},
                    json=body,
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                "detect",
                f"Vision API returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError("detect", f"Vision API unreachable: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise ProviderError("detect", "Vision API returned malformed JSON") from e
        if not isinstance(payload, dict):
            raise ProviderError("detect", f"unexpected Vision API response: {payload!r:.80}")
        responses = payload.get("responses") or [{}]
        data = responses[0] if isinstance(responses, list) else None
        if not isinstance(data, dict):
            raise ProviderError("detect", f"unexpected Vision API response: {payload!r:.80}")
        if "error" in data:
            raise ProviderError("detect", f"Vision API error: {data['error']}")
        return data

    def detect(self, image: bytes) -> list[Annotation]:
        """Detect faces and return them in the provider's prominence order."""
        data = self._call(
            {
                "requests": [
                    {
                        "image": {"content": base64.b64encode(image).decode("ascii")},
                        "features": [{"type": "FACE_DETECTION", "maxResults": self.max_results}],
                    }
                ]
            }
        )
        faces = [_parse_face(face) for face in data.get("faceAnnotations", [])]
        logger.info("Vision API detected %d face(s)", len(faces))
        return faces


def _parse_face(face: dict) -> Annotation:
    return Annotation(
        joy_likelihood=_likelihood(face.get("joyLikelihood")),
        anger_likelihood=_likelihood(face.get("angerLikelihood")),
        sorrow_likelihood=_likelihood(face.get("sorrowLikelihood")),
        confidence=float(face.get("detectionConfidence", 0.0)),
    )


def _likelihood(value: str | int | None) -> int:
    """Map a Vision likelihood name (or its enum number) to 0..5."""
    if value is None:
        return Likelihood.UNKNOWN
    try:
        if isinstance(value, int):
            return Likelihood(value)
        return Likelihood[value]
    except (KeyError, ValueError, TypeError):
        raise ProviderError("detect", f"unknown likelihood {value!r}") from None
