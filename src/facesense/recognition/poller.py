"""Bounded-retry poller that waits for the identity graph to recognize a photo."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from facesense.config import POLL_INTERVAL, POLL_MAX_ATTEMPTS, POLL_SETTLE_DELAY
from facesense.errors import ProviderError
from facesense.models import (
    PersonRecord,
    PollExhausted,
    RecognitionJob,
    RecognitionOutcome,
    RecognitionResult,
    RecognitionState,
    Resolved,
)
from facesense.recognition.graph_client import IdentityGraphProvider, extract_person

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollerConfig:
    """Attempt budget and fixed delays (seconds) for one recognition job."""

    max_attempts: int = 10
    inter_attempt_delay: float = 0.0
    settle_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.inter_attempt_delay < 0 or self.settle_delay < 0:
            raise ValueError("delays must not be negative")

    @classmethod
    def from_env(cls) -> "PollerConfig":
        return cls(
            max_attempts=POLL_MAX_ATTEMPTS,
            inter_attempt_delay=POLL_INTERVAL,
            settle_delay=POLL_SETTLE_DELAY,
        )


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ProviderError) and error.retryable


class RecognitionPoller:
    """Poll the identity graph for one photo at a time, then delete it."""

    def __init__(
        self,
        provider: IdentityGraphProvider,
        config: PollerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.config = config or PollerConfig()
        self.sleep = sleep

    def resolve(self, photo_id: str) -> RecognitionResult:
        """Query until a facebox shows up or the attempt budget is spent.

        Transient query errors use up an attempt; any other ``ProviderError``
        propagates immediately.
        """
        job = RecognitionJob(
            photo_id=photo_id,
            max_attempts=self.config.max_attempts,
            inter_attempt_delay=self.config.inter_attempt_delay,
        )
        job.advance(RecognitionState.POLLING)
        if self.config.settle_delay:
            self.sleep(self.config.settle_delay)

        retrying = Retrying(
            stop=stop_after_attempt(job.max_attempts),
            wait=wait_fixed(job.inter_attempt_delay),
            retry=(
                retry_if_result(lambda person: person is None)
                | retry_if_exception(_is_transient)
            ),
            retry_error_callback=lambda retry_state: None,
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            sleep=self.sleep,
        )
        person = retrying(self._attempt, job)

        if person is None:
            job.advance(RecognitionState.EXHAUSTED)
            logger.warning(
                "Photo %s not recognized after %d attempts", photo_id, job.attempts_made
            )
            return PollExhausted(attempts=job.attempts_made, last_error=job.last_error)

        job.advance(RecognitionState.RESOLVED)
        logger.info(
            "Photo %s resolved to %r after %d attempt(s)",
            photo_id,
            person.name,
            job.attempts_made,
        )
        return Resolved(person=person, attempts=job.attempts_made)

    def _attempt(self, job: RecognitionJob) -> PersonRecord | None:
        attempt = job.record_attempt()
        try:
            body = self.provider.query(job.photo_id)
        except ProviderError as e:
            if e.retryable:
                job.last_error = str(e)
                logger.warning(
                    "Attempt %d/%d for photo %s failed: %s",
                    attempt,
                    job.max_attempts,
                    job.photo_id,
                    e,
                )
            raise
        person = extract_person(body)
        logger.debug(
            "Attempt %d/%d for photo %s: %s",
            attempt,
            job.max_attempts,
            job.photo_id,
            "match" if person is not None else "no facebox yet",
        )
        return person

    def cleanup(self, photo_id: str) -> bool:
        """Delete the uploaded photo. Failures are logged, never raised."""
        ok, _ = self._delete(photo_id)
        return ok

    def _delete(self, photo_id: str) -> tuple[bool, str | None]:
        try:
            deleted = self.provider.delete(photo_id)
        except Exception as e:
            logger.warning("Could not delete photo %s, remote copy leaked: %s", photo_id, e)
            return False, str(e)
        if not deleted:
            logger.warning("Provider refused to delete photo %s, remote copy leaked", photo_id)
            return False, "delete not acknowledged by provider"
        return True, None

    def run(self, photo_id: str) -> RecognitionOutcome:
        """Resolve ``photo_id`` and always delete it afterwards.

        The delete is attempted on every exit path, including fatal provider
        errors and cancellation; those still propagate once it has run, and a
        ``ProviderError`` carries the cleanup status in ``cleanup_ok`` and
        ``cleanup_error``.
        """
        try:
            result = self.resolve(photo_id)
        except ProviderError as e:
            e.cleanup_ok, e.cleanup_error = self._delete(photo_id)
            raise
        except BaseException:
            self._delete(photo_id)
            raise
        cleanup_ok, cleanup_error = self._delete(photo_id)
        return RecognitionOutcome(
            photo_id=photo_id,
            result=result,
            cleanup_ok=cleanup_ok,
            cleanup_error=cleanup_error,
        )
