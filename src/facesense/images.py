"""Load and validate images held in memory for a single request."""

import logging
from io import BytesIO
from pathlib import Path

import httpx
from PIL import Image, UnidentifiedImageError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from facesense.config import HTTP_TIMEOUT
from facesense.errors import InvalidInputError, ProviderError

logger = logging.getLogger(__name__)


def load_image(source: str) -> bytes:
    """Read image bytes from a local path or an http(s) URL."""
    if source.startswith(("http://", "https://")):
        return fetch_image(source)
    path = Path(source)
    if not path.is_file():
        raise InvalidInputError(f"image file not found: {source}")
    return path.read_bytes()


def fetch_image(url: str, transport: httpx.BaseTransport | None = None) -> bytes:
    """Download an image, retrying on timeouts."""
    try:
        content = _download(url, transport)
    except httpx.HTTPStatusError as e:
        raise ProviderError(
            "download",
            f"{url} returned {e.response.status_code}",
            status_code=e.response.status_code,
        ) from e
    except httpx.HTTPError as e:
        raise ProviderError("download", f"{url}: {e}") from e
    logger.info("Downloaded %s (%d bytes)", url, len(content))
    return content


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, max=10),
    retry=retry_if_exception_type(httpx.TimeoutException),
    reraise=True,
)
def _download(url: str, transport: httpx.BaseTransport | None) -> bytes:
    with httpx.Client(timeout=HTTP_TIMEOUT, transport=transport, follow_redirects=True) as client:
        resp = client.get(url)
        resp.raise_for_status()
    return resp.content


def validate_image(data: bytes) -> str:
    """Return the image format (e.g. ``JPEG``), rejecting unreadable data."""
    if not data:
        raise InvalidInputError("image is empty")
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise InvalidInputError(f"not a readable image: {e}") from e
    return image_format or "UNKNOWN"
