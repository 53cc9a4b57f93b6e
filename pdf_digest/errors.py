"""
errors.py - Error taxonomy for the summarization workflow

Every failure is terminal for the current run and is surfaced to the user
as a message. Nothing here is retried automatically.
"""

from typing import Optional


class SummarizerError(Exception):
    """Base class for all summarization workflow errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SummarizerError):
    """Missing inputs, unsupported file type or oversized file."""


class TransportError(SummarizerError):
    """Non-success HTTP response (or no response at all) from the service."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code


class UploadFailedError(TransportError):
    """The file ingestion endpoint rejected the upload."""


class StatusCheckFailedError(TransportError):
    """The file status endpoint returned an error while polling."""


class GenerationFailedError(TransportError):
    """The content generation endpoint returned an error."""


class MalformedResponseError(SummarizerError):
    """HTTP success, but the body is empty or cannot be used."""


class UploadResponseMalformedError(MalformedResponseError):
    """The upload acknowledgement was empty or unparsable.

    Callers may recover from this one by switching to the inline strategy.
    """


class ProcessingFailedError(SummarizerError):
    """The service reported a terminal FAILED state for the uploaded file."""


class ProcessingTimeoutError(ProcessingFailedError):
    """The file never left PROCESSING within the allowed number of polls."""


class NoContentError(SummarizerError):
    """Well-formed generation response without any text part."""


class SummaryCancelledError(SummarizerError):
    """The run was cancelled at a suspension point."""


class WorkflowBusyError(SummarizerError):
    """A run was triggered while another one is still in flight."""
