"""Shared test fixtures."""

import json
from io import BytesIO

import pytest
from PIL import Image

from facesense.errors import ProviderError
from facesense.models import Annotation


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A tiny valid JPEG image."""
    buf = BytesIO()
    Image.new("RGB", (8, 8), color=(200, 150, 100)).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def sleeps() -> list[float]:
    """Records every delay requested by the code under test instead of sleeping."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    def _sleep(seconds: float) -> None:
        sleeps.append(float(seconds))

    return _sleep


def make_annotation(
    joy: int = 0, anger: int = 0, sorrow: int = 0, confidence: float = 0.5
) -> Annotation:
    """Helper to create an Annotation with defaults for unused fields."""
    return Annotation(
        joy_likelihood=joy,
        anger_likelihood=anger,
        sorrow_likelihood=sorrow,
        confidence=confidence,
    )


def recognition_body(name: str = "Ada Lovelace", fbid: str = "1815", guard: bool = True) -> str:
    """Recognition endpoint response with one recognized facebox."""
    payload = {
        "__ar": 1,
        "payload": [
            {
                "faceboxes": [
                    {"recognitions": [{"certainty": 0.97, "user": {"name": name, "fbid": fbid}}]}
                ]
            }
        ],
    }
    body = json.dumps(payload)
    return f"for (;;);{body}" if guard else body


PENDING_BODY = 'for (;;);{"__ar": 1, "payload": [{"faceboxes": []}]}'


class FakeDetector:
    """FaceDetectionProvider returning canned annotations."""

    def __init__(self, annotations: list[Annotation] | None = None, error: Exception | None = None):
        self.annotations = annotations or []
        self.error = error
        self.calls = 0

    def detect(self, image: bytes) -> list[Annotation]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.annotations)


class FakeGraph:
    """IdentityGraphProvider scripted with one response per query attempt.

    Each item of ``responses`` is either a body string or an exception to
    raise. Once the script runs out, ``PENDING_BODY`` is returned.
    """

    def __init__(
        self,
        responses: list[str | BaseException] | None = None,
        photo_id: str = "photo-1",
        delete_result: bool | BaseException = True,
        upload_error: Exception | None = None,
    ):
        self.responses = list(responses or [])
        self.photo_id = photo_id
        self.delete_result = delete_result
        self.upload_error = upload_error
        self.uploads = 0
        self.queries: list[str] = []
        self.deletes: list[str] = []

    def upload(self, image: bytes) -> str:
        self.uploads += 1
        if self.upload_error is not None:
            raise self.upload_error
        return self.photo_id

    def query(self, photo_id: str) -> str:
        self.queries.append(photo_id)
        index = len(self.queries) - 1
        item = self.responses[index] if index < len(self.responses) else PENDING_BODY
        if isinstance(item, BaseException):
            raise item
        return item

    def delete(self, photo_id: str) -> bool:
        self.deletes.append(photo_id)
        if isinstance(self.delete_result, BaseException):
            raise self.delete_result
        return self.delete_result


def transient_error() -> ProviderError:
    return ProviderError("query", "HTTP 503", retryable=True, status_code=503)
