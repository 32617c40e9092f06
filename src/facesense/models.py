"""Data models for face annotations and recognition jobs."""

from dataclasses import dataclass
from enum import Enum, IntEnum

from facesense.errors import InvalidInputError, InvalidTransitionError


class Likelihood(IntEnum):
    """Six-level ordinal likelihood used by the face detection provider."""

    UNKNOWN = 0
    VERY_UNLIKELY = 1
    UNLIKELY = 2
    POSSIBLE = 3
    LIKELY = 4
    VERY_LIKELY = 5


class EmotionLabel(str, Enum):
    HAPPY = "happy"
    ANGRY = "angry"
    SAD = "sad"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Annotation:
    """Expression likelihoods and detection confidence for one face."""

    joy_likelihood: int
    anger_likelihood: int
    sorrow_likelihood: int
    confidence: float  # 0..1

    def __post_init__(self) -> None:
        for name in ("joy_likelihood", "anger_likelihood", "sorrow_likelihood"):
            value = getattr(self, name)
            if not Likelihood.UNKNOWN <= value <= Likelihood.VERY_LIKELY:
                raise InvalidInputError(f"{name} must be within 0..5, got {value!r}")
        if not 0.0 <= self.confidence <= 1.0:
            raise InvalidInputError(f"confidence must be within 0..1, got {self.confidence!r}")

    @property
    def confidence_pct(self) -> float:
        return self.confidence * 100


@dataclass(frozen=True)
class NoFaceDetected:
    """Returned instead of a label when the provider found no face."""


@dataclass(frozen=True)
class PersonRecord:
    """Identity returned by the recognition provider."""

    name: str
    external_id: str

    @property
    def is_empty(self) -> bool:
        """True when the provider answered but matched nobody."""
        return not self.name and not self.external_id


class RecognitionState(Enum):
    UPLOADED = "uploaded"
    POLLING = "polling"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


_TRANSITIONS: dict[RecognitionState, frozenset[RecognitionState]] = {
    RecognitionState.UPLOADED: frozenset({RecognitionState.POLLING}),
    RecognitionState.POLLING: frozenset({RecognitionState.RESOLVED, RecognitionState.EXHAUSTED}),
    RecognitionState.RESOLVED: frozenset(),
    RecognitionState.EXHAUSTED: frozenset(),
}


@dataclass
class RecognitionJob:
    """Mutable state of one upload-poll-delete workflow."""

    photo_id: str
    max_attempts: int = 10
    inter_attempt_delay: float = 0.0
    attempts_made: int = 0
    state: RecognitionState = RecognitionState.UPLOADED
    last_error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]

    def advance(self, new_state: RecognitionState) -> None:
        """Move to ``new_state``, rejecting anything outside the transition table."""
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"job {self.photo_id}: cannot go from {self.state.value} to {new_state.value}"
            )
        if new_state is RecognitionState.EXHAUSTED and self.attempts_made != self.max_attempts:
            raise InvalidTransitionError(
                f"job {self.photo_id}: exhausted after {self.attempts_made}"
                f" of {self.max_attempts} attempts"
            )
        self.state = new_state

    def record_attempt(self) -> int:
        """Count one query against the budget and return the new total."""
        if self.state is not RecognitionState.POLLING:
            raise InvalidTransitionError(
                f"job {self.photo_id}: attempts are only counted while polling"
            )
        if self.attempts_made >= self.max_attempts:
            raise InvalidTransitionError(
                f"job {self.photo_id}: attempt budget of {self.max_attempts} already spent"
            )
        self.attempts_made += 1
        return self.attempts_made


@dataclass(frozen=True)
class Resolved:
    """The provider answered with a facebox; ``person`` may be an empty match."""

    person: PersonRecord
    attempts: int


@dataclass(frozen=True)
class PollExhausted:
    """No answer within the attempt budget."""

    attempts: int
    last_error: str | None = None


RecognitionResult = Resolved | PollExhausted


@dataclass(frozen=True)
class RecognitionOutcome:
    """Result of a recognition workflow plus the independent cleanup status."""

    photo_id: str
    result: RecognitionResult
    cleanup_ok: bool
    cleanup_error: str | None = None
