"""Identity graph client: photo upload, face recognition lookup and deletion."""

import json
import logging
from typing import Protocol

import httpx

from facesense.config import (
    GRAPH_ACCESS_TOKEN,
    GRAPH_API_BASE,
    HTTP_TIMEOUT,
    RECOGNITION_COOKIE,
    RECOGNITION_DTSG,
    RECOGNITION_URL,
)
from facesense.errors import ProviderError
from facesense.models import PersonRecord

logger = logging.getLogger(__name__)

GUARD_PREFIX = "for (;;);"

# Status codes worth spending another poll attempt on
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class IdentityGraphProvider(Protocol):
    def upload(self, image: bytes) -> str: ...

    def query(self, photo_id: str) -> str: ...

    def delete(self, photo_id: str) -> bool: ...


class GraphClient:
    """Client for the Graph API photo endpoints and the recognition endpoint."""

    def __init__(
        self,
        access_token: str | None = None,
        cookie: str | None = None,
        dtsg: str | None = None,
        timeout: int = HTTP_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.access_token = access_token or GRAPH_ACCESS_TOKEN
        if not self.access_token:
            raise ValueError("Graph access token is required. Set FB_ACCESS_TOKEN in .env file.")
        self.cookie = cookie if cookie is not None else RECOGNITION_COOKIE
        self.dtsg = dtsg if dtsg is not None else RECOGNITION_DTSG
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def upload(self, image: bytes) -> str:
        """Upload an unpublished photo and return its photo ID."""
        try:
            with self._client() as client:
                resp = client.post(
                    f"{GRAPH_API_BASE}/me/photos",
                    data={
                        "access_token": self.access_token,
                        "published": "false",
                        "no_story": "true",
                    },
                    files={"source": ("image.jpg", image, "image/jpeg")},
                )
                resp.raise_for_status()
            photo_id = resp.json()["id"]
        except httpx.HTTPStatusError as e:
            raise _status_error("upload", e) from e
        except httpx.HTTPError as e:
            raise ProviderError("upload", f"Graph API unreachable: {e}") from e
        except (ValueError, KeyError) as e:
            raise ProviderError("upload", "Graph API response has no photo id") from e
        logger.info("Uploaded photo %s", photo_id)
        return str(photo_id)

    def query(self, photo_id: str) -> str:
        """Ask the recognition endpoint about a photo and return the raw body."""
        params = {
            "recognition_project": "composer_facerec",
            "photos[0]": photo_id,
            "target": "",
            "is_page": "false",
            "include_unrecognized_faceboxes": "false",
            "include_face_crop_src": "false",
            "include_recognized_user_profile_picture": "false",
            "include_low_confidence_recognitions": "true",
            "__a": "1",
            "fb_dtsg": self.dtsg,
        }
        headers = {"Cookie": self.cookie} if self.cookie else {}
        try:
            with self._client() as client:
                resp = client.get(RECOGNITION_URL, params=params, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _status_error("query", e) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                "query", f"recognition endpoint unreachable: {e}", retryable=True
            ) from e
        return resp.text

    def delete(self, photo_id: str) -> bool:
        """Delete an uploaded photo; returns the provider's success flag."""
        try:
            with self._client() as client:
                resp = client.delete(
                    f"{GRAPH_API_BASE}/{photo_id}",
                    params={"access_token": self.access_token},
                )
                resp.raise_for_status()
            data = resp.json()
            if not isinstance(data, dict):
                raise ProviderError("delete", f"unexpected Graph API response: {data!r:.80}")
            success = bool(data.get("success", False))
        except httpx.HTTPStatusError as e:
            raise _status_error("delete", e) from e
        except httpx.HTTPError as e:
            raise ProviderError("delete", f"Graph API unreachable: {e}") from e
        except ValueError as e:
            raise ProviderError("delete", "Graph API returned malformed JSON") from e
        logger.info("Deleted photo %s (success=%s)", photo_id, success)
        return success


def _status_error(phase: str, error: httpx.HTTPStatusError) -> ProviderError:
    status = error.response.status_code
    return ProviderError(
        phase,
        f"HTTP {status}",
        retryable=status in RETRYABLE_STATUS,
        status_code=status,
    )


def strip_guard_prefix(body: str) -> str:
    """Remove the anti-hijacking ``for (;;);`` token if present."""
    body = body.lstrip()
    if body.startswith(GUARD_PREFIX):
        return body[len(GUARD_PREFIX) :]
    return body


def extract_person(body: str) -> PersonRecord | None:
    """Extract the first recognized person from a recognition response.

    Returns ``None`` while the provider has no faceboxes for the photo yet.
    A facebox without a recognized user yields an empty ``PersonRecord``.
    """
    try:
        data = json.loads(strip_guard_prefix(body))
    except ValueError:
        logger.debug("Recognition response is not JSON yet: %.80r", body)
        return None

    payload = data.get("payload") if isinstance(data, dict) else None
    if not payload or not isinstance(payload, list):
        return None
    faceboxes = payload[0].get("faceboxes") if isinstance(payload[0], dict) else None
    if not faceboxes:
        return None

    facebox = faceboxes[0] if isinstance(faceboxes, list) else None
    if not isinstance(facebox, dict):
        return PersonRecord(name="", external_id="")
    recognitions = facebox.get("recognitions") or [{}]
    recognition = recognitions[0] if isinstance(recognitions, list) else None
    user = recognition.get("user") if isinstance(recognition, dict) else None
    if not isinstance(user, dict):
        user = {}
    return PersonRecord(
        name=str(user.get("name") or ""),
        external_id=str(user.get("fbid") or ""),
    )
