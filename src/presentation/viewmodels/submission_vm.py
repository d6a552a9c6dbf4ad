import dataclasses
from typing import Callable, Optional

import structlog

from src.faasr_client.application.error_mapping import describe_error
from src.faasr_client.application.event_emitter import EventEmitter
from src.faasr_client.domain.interfaces import IScheduledCall, IScheduler, IUploader
from src.faasr_client.domain.models import UploadResponse
from src.presentation.interfaces.protocols import IFileSource
from src.presentation.resources.strings import UIStrings
from src.presentation.services.workflow_validator import ValidationOutcome, WorkflowValidator
from src.presentation.state.app_state import SubmissionState

logger = structlog.get_logger()

DEFAULT_RESET_DELAY_MS = 2000


@dataclasses.dataclass(frozen=True)
class UploadCandidate:
    """A validated workflow file waiting to be submitted."""
    file_name: str
    raw_bytes: bytes = dataclasses.field(repr=False)
    size_bytes: int


class SubmissionController:
    """
    Drives one workflow file through validation and upload.

    At most one upload is in flight per controller. A successful upload
    clears itself after `reset_delay_ms`; a rejected or failed one stays
    until the next selection or a retry.
    """

    def __init__(
        self,
        uploader: IUploader,
        scheduler: IScheduler,
        validator: Optional[WorkflowValidator] = None,
        reset_delay_ms: int = DEFAULT_RESET_DELAY_MS,
        on_file_selected: Optional[Callable[[UploadCandidate], None]] = None,
        on_upload_success: Optional[Callable[[UploadResponse], None]] = None,
        on_upload_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._uploader = uploader
        self._scheduler = scheduler
        self._validator = validator or WorkflowValidator()
        self._reset_delay_ms = reset_delay_ms

        self._on_file_selected = on_file_selected
        self._on_upload_success = on_upload_success
        self._on_upload_error = on_upload_error

        self.state_changed: EventEmitter[SubmissionState] = EventEmitter("submission_state")

        self._state = SubmissionState.IDLE
        self._candidate: Optional[UploadCandidate] = None
        self._last_error: Optional[str] = None
        self._progress_message: Optional[str] = None
        self._disabled = False
        self._closed = False

        # Bumped on every selection so a slow read cannot overwrite a newer pick
        self._selection_id = 0
        self._pending_reset: Optional[IScheduledCall] = None

    # Read-only view for the presentation layer

    @property
    def state(self) -> SubmissionState:
        return self._state

    @state.setter
    def state(self, new_state: SubmissionState):
        if self._state != new_state:
            logger.debug("submission_state_changed", old=self._state.name, new=new_state.name)
            self._state = new_state
            self.state_changed.emit(new_state)

    @property
    def candidate(self) -> Optional[UploadCandidate]:
        return self._candidate

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def progress_message(self) -> Optional[str]:
        return self._progress_message

    @property
    def is_submitting(self) -> bool:
        return self._state is SubmissionState.SUBMITTING

    @property
    def disabled(self) -> bool:
        return self._disabled

    @disabled.setter
    def disabled(self, value: bool):
        self._disabled = value

    @property
    def can_submit(self) -> bool:
        return (
            not self._closed
            and not self._disabled
            and self._candidate is not None
            and self._state in (SubmissionState.ACCEPTED, SubmissionState.FAILED)
        )

    # Selection

    async def select_file(self, source: Optional[IFileSource]) -> Optional[ValidationOutcome]:
        """
        Validates a newly chosen file and keeps it as the candidate if valid.

        Args:
            source: The chosen file, or None when the picker was dismissed.

        Returns:
            Optional[ValidationOutcome]: The result of the validation pipeline,
            or None if the selection was ignored (no file, upload in flight,
            controller closed).
        """
        if source is None:
            return None

        if self._closed or self.is_submitting:
            logger.warning("selection_ignored", closed=self._closed, state=self._state.name)
            return None

        self._selection_id += 1
        selection_id = self._selection_id

        self._cancel_pending_reset()
        self._candidate = None
        self._last_error = None
        self._progress_message = None
        self.state = SubmissionState.SELECTED

        file_name = source.name

        outcome = self._validator.validate_name(file_name)
        if not outcome.is_valid:
            return self._reject(file_name, outcome)

        try:
            size_bytes = source.size
        except OSError as e:
            logger.warning("file_stat_failed", file_name=file_name, error=str(e))
            return self._reject(file_name, ValidationOutcome.invalid_content(UIStrings.ERR_READ_FAILED))

        outcome = self._validator.validate_size(size_bytes)
        if not outcome.is_valid:
            return self._reject(file_name, outcome)

        try:
            raw_bytes = await source.read_bytes()
        except OSError as e:
            if selection_id != self._selection_id or self._closed:
                return ValidationOutcome.invalid_content(UIStrings.ERR_READ_FAILED)
            logger.warning("file_read_failed", file_name=file_name, error=str(e))
            return self._reject(file_name, ValidationOutcome.invalid_content(UIStrings.ERR_READ_FAILED))

        # The stat size can under-report (pipes, growing files); check what was read
        outcome = self._validator.validate_size(len(raw_bytes))
        if outcome.is_valid:
            outcome = self._validator.validate_content(raw_bytes)

        if selection_id != self._selection_id or self._closed:
            logger.info("stale_selection_dropped", file_name=file_name)
            return outcome

        if not outcome.is_valid:
            return self._reject(file_name, outcome)

        self._candidate = UploadCandidate(file_name=file_name, raw_bytes=raw_bytes, size_bytes=len(raw_bytes))
        self.state = SubmissionState.ACCEPTED
        logger.info("file_accepted", file_name=file_name, size_bytes=len(raw_bytes))

        self._notify(self._on_file_selected, self._candidate)
        return outcome

    def _reject(self, file_name: str, outcome: ValidationOutcome) -> ValidationOutcome:
        logger.info("file_rejected", file_name=file_name, kind=outcome.kind.name, reason=outcome.reason)
        self._candidate = None
        self._last_error = outcome.reason
        self.state = SubmissionState.REJECTED
        return outcome

    # Submission

    async def submit(self) -> Optional[UploadResponse]:
        """
        Uploads the current candidate.

        Calling this while an upload is in flight, while disabled, or without
        an accepted candidate does nothing and returns None. Failures do not
        raise; they are reported through `last_error`, FAILED and the
        `on_upload_error` callback. Exceptions from the callbacks are logged
        and do not change the outcome.
        """
        if not self.can_submit:
            logger.debug("submit_ignored", state=self._state.name, disabled=self._disabled)
            return None

        candidate = self._candidate
        self._last_error = None
        self._progress_message = UIStrings.PROGRESS_UPLOADING
        self.state = SubmissionState.SUBMITTING

        try:
            response = await self._uploader.upload(candidate.file_name, candidate.raw_bytes)
        except Exception as e:
            message = describe_error(e, UIStrings.ERR_UPLOAD_FAILED)
            logger.warning("upload_failed", file_name=candidate.file_name, error=message)
            if self._closed:
                return None
            self._progress_message = None
            self._last_error = message
            self.state = SubmissionState.FAILED
            self._notify(self._on_upload_error, e)
            return None

        logger.info("upload_succeeded", file_name=candidate.file_name, commit_sha=response.commit_sha)
        if self._closed:
            return response

        self._progress_message = UIStrings.PROGRESS_SUCCESS
        self.state = SubmissionState.SUCCEEDED
        self._pending_reset = self._scheduler.schedule_after(self._reset_delay_ms, self._reset)
        self._notify(self._on_upload_success, response)
        return response

    @staticmethod
    def _notify(callback: Optional[Callable], payload) -> None:
        """Runs an observer callback; its exceptions are logged, not raised."""
        if callback is None:
            return
        try:
            callback(payload)
        except Exception as e:
            logger.error("submission_callback_failed", callback=getattr(callback, "__name__", repr(callback)),
                         error=str(e), exc_info=True)

    def _reset(self) -> None:
        self._pending_reset = None
        if self._closed:
            return
        self._candidate = None
        self._progress_message = None
        self.state = SubmissionState.IDLE

    def _cancel_pending_reset(self) -> None:
        if self._pending_reset is not None:
            self._pending_reset.cancel()
            self._pending_reset = None

    def close(self) -> None:
        """Cancels the pending reset. Late upload completions are dropped."""
        if self._closed:
            return
        self._closed = True
        self._cancel_pending_reset()
        logger.debug("submission_controller_closed")
