"""Exception hierarchy shared by the emotion and recognition flows."""


class FaceSenseError(Exception):
    """Base class for all facesense errors."""


class InvalidInputError(FaceSenseError, ValueError):
    """Caller passed data outside the documented ranges."""


class ProviderError(FaceSenseError):
    """An external provider call failed.

    ``phase`` names the call that failed (``detect``, ``upload``, ``query``,
    ``delete`` or ``download``). ``retryable`` is only meaningful for
    ``query``: transient failures count against the poll budget, the rest
    abort the job.
    """

    def __init__(
        self,
        phase: str,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{phase} failed: {message}")
        self.phase = phase
        self.retryable = retryable
        self.status_code = status_code
        # Set by RecognitionPoller.run when the error aborts a job after upload
        self.cleanup_ok: bool | None = None
        self.cleanup_error: str | None = None


class InvalidTransitionError(FaceSenseError, RuntimeError):
    """A recognition job was asked to make a state change it does not allow."""
