"""
workflow.py - Summary workflow orchestration

Glues a presentation layer, the validation helpers and a summarization
strategy together. One run at a time; each run goes

    IDLE -> VALIDATING -> SUBMITTING -> (POLLING) -> GENERATING -> DONE | FAILED

and every failure ends up as a message on the presentation layer.
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional, Protocol

from .errors import SummarizerError, ValidationError, WorkflowBusyError
from .file_handler import (
    DEFAULT_MAX_BYTES,
    is_supported_document,
    is_within_size_limit,
)
from .gemini_client import GeminiClient
from .models import DocumentHandle, SummaryResult
from .strategies import DEFAULT_STRATEGY, get_strategy

_LOG = logging.getLogger("workflow")

MISSING_INPUT_MESSAGE = "Please select a PDF file and enter your API key"
INVALID_TYPE_MESSAGE = "Please select a valid PDF file"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class WorkflowState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    POLLING = "polling"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


BUSY_STATES = (WorkflowState.SUBMITTING, WorkflowState.POLLING, WorkflowState.GENERATING)


class PresentationLayer(Protocol):
    """What the workflow needs from whatever shows the result to the user."""

    def get_selected_file(self) -> Optional[DocumentHandle]: ...

    def get_api_key(self) -> Optional[str]: ...

    def show_loading(self) -> None: ...

    def hide_loading(self) -> None: ...

    def show_summary(self, text: str) -> None: ...

    def show_error(self, text: str) -> None: ...


def size_limit_message(max_bytes: int) -> str:
    return f"File size exceeds {max_bytes / (1024 * 1024):g}MB limit"


class SummaryWorkflow:
    """Runs the validate -> submit -> summarize sequence for one presentation layer."""

    def __init__(
        self,
        presentation: PresentationLayer,
        client_factory: Callable[[str], GeminiClient] = GeminiClient,
        strategy_name: str = DEFAULT_STRATEGY,
        max_bytes: int = DEFAULT_MAX_BYTES,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.presentation = presentation
        self.client_factory = client_factory
        self.strategy_name = strategy_name
        self.max_bytes = max_bytes
        self.cancel_event = cancel_event
        self.state = WorkflowState.IDLE
        self.state_history: List[WorkflowState] = [WorkflowState.IDLE]
        self._lock = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self.state in BUSY_STATES

    def _transition(self, state: WorkflowState) -> None:
        if state != self.state:
            _LOG.debug("Workflow state %s -> %s", self.state.value, state.value)
            self.state = state
            self.state_history.append(state)

    def _validate(self, handle: Optional[DocumentHandle], api_key: Optional[str]) -> None:
        """Fail fast before any network call."""
        if handle is None or not api_key or not api_key.strip():
            raise ValidationError(MISSING_INPUT_MESSAGE)
        if not is_supported_document(handle):
            raise ValidationError(INVALID_TYPE_MESSAGE)
        if not is_within_size_limit(handle, self.max_bytes):
            raise ValidationError(size_limit_message(self.max_bytes))

    def _build_strategy(self, api_key: str):
        try:
            return get_strategy(self.strategy_name, self.client_factory(api_key))
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    def _on_status_update(self, state: str) -> None:
        self._transition(WorkflowState.POLLING)
        _LOG.info("File state: %s", state)

    def _on_generating(self) -> None:
        self._transition(WorkflowState.GENERATING)

    def run(self) -> SummaryResult:
        """Run the workflow once and report the outcome to the presentation layer.

        Any failure after the run has started leaves the workflow in FAILED,
        so the next call may retry.

        Raises:
            WorkflowBusyError: a previous run has not finished yet.
        """
        with self._lock:
            if self.is_busy or self.state == WorkflowState.VALIDATING:
                raise WorkflowBusyError("A summary is already being generated")
            self.state_history = [self.state]
            self._transition(WorkflowState.VALIDATING)

        try:
            handle = self.presentation.get_selected_file()
            api_key = self.presentation.get_api_key()
            self._validate(handle, api_key)
            strategy = self._build_strategy(api_key.strip())
        except ValidationError as exc:
            message = exc.message
            _LOG.info("Validation failed: %s", message)
            self._transition(WorkflowState.FAILED)
            self.presentation.show_error(message)
            return SummaryResult.failure(message, self.strategy_name, type(exc).__name__)
        except Exception as exc:
            _LOG.exception("Unexpected error while preparing the summary")
            return self._fail(f"Error: {str(exc) or UNEXPECTED_ERROR_MESSAGE}", self.strategy_name, exc)

        try:
            self._transition(WorkflowState.SUBMITTING)
            self.presentation.show_loading()
            summary = strategy.produce_summary(
                handle,
                on_status_update=self._on_status_update,
                on_generating=self._on_generating,
                cancel_event=self.cancel_event,
            )
        except SummarizerError as exc:
            _LOG.error("Summarization failed: %s", exc.message)
            return self._fail(f"Error: {exc.message}", strategy.name, exc)
        except Exception as exc:
            _LOG.exception("Unexpected error while summarizing %s", handle.name)
            return self._fail(f"Error: {str(exc) or UNEXPECTED_ERROR_MESSAGE}", strategy.name, exc)

        self._transition(WorkflowState.DONE)
        self.presentation.hide_loading()
        self.presentation.show_summary(summary)
        _LOG.info("Summary ready for %s (%d chars)", handle.name, len(summary))
        return SummaryResult.success(summary, strategy.name)

    def _fail(self, message: str, strategy_name: str, exc: Exception) -> SummaryResult:
        self._transition(WorkflowState.FAILED)
        self.presentation.hide_loading()
        self.presentation.show_error(message)
        return SummaryResult.failure(message, strategy_name, type(exc).__name__)
