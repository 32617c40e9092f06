"""Image-to-person flow: upload, poll for recognition, delete."""

import logging
import time
from collections.abc import Callable

from facesense.images import validate_image
from facesense.models import RecognitionOutcome, Resolved
from facesense.recognition.graph_client import IdentityGraphProvider
from facesense.recognition.poller import PollerConfig, RecognitionPoller

logger = logging.getLogger(__name__)


def recognize(
    image: bytes,
    provider: IdentityGraphProvider,
    config: PollerConfig | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RecognitionOutcome:
    """Identify the person in ``image``.

    Args:
        image: Raw image bytes; validated before anything is uploaded.
        provider: Identity graph used for upload, query and delete.
        config: Poll budget and delays (default: 10 attempts, no delay).
        sleep: Replacement for ``time.sleep``, mainly for tests.

    Returns:
        A RecognitionOutcome carrying either ``Resolved`` or ``PollExhausted``
        and the cleanup status of the uploaded photo.
    """
    image_format = validate_image(image)
    photo_id = provider.upload(image)
    logger.info("Uploaded %s image as photo %s", image_format, photo_id)

    return RecognitionPoller(provider, config, sleep=sleep).run(photo_id)


def format_announcement(outcome: RecognitionOutcome) -> str:
    """Render ``"<name>%<sentence>"`` for a spoken client, or ``""`` if nobody was found."""
    result = outcome.result
    if not isinstance(result, Resolved) or result.person.is_empty:
        return ""
    name = result.person.name
    return f"{name}%This looks like {name}."
