# PDF digest package: summarize PDF documents with the Gemini API

from .models import (
    PDF_MIME_TYPE,
    DocumentHandle,
    FileState,
    UploadRecord,
    SummaryResult,
)
from .errors import (
    SummarizerError,
    ValidationError,
    TransportError,
    UploadFailedError,
    StatusCheckFailedError,
    GenerationFailedError,
    MalformedResponseError,
    UploadResponseMalformedError,
    ProcessingFailedError,
    ProcessingTimeoutError,
    NoContentError,
    SummaryCancelledError,
    WorkflowBusyError,
)
from .file_handler import (
    DEFAULT_MAX_BYTES,
    is_supported_document,
    is_within_size_limit,
    max_bytes_from_mb,
    format_file_size,
    encode_base64,
)
from .gemini_client import GeminiClient, build_session, extract_summary_text
from .strategies import (
    SummaryStrategy,
    ReferenceStrategy,
    InlineStrategy,
    AutoStrategy,
    get_strategy,
)
from .workflow import SummaryWorkflow, WorkflowState, PresentationLayer
from .credential_store import (
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
    CredentialStore,
)
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "PDF_MIME_TYPE",
    "DocumentHandle",
    "FileState",
    "UploadRecord",
    "SummaryResult",
    "SummarizerError",
    "ValidationError",
    "TransportError",
    "UploadFailedError",
    "StatusCheckFailedError",
    "GenerationFailedError",
    "MalformedResponseError",
    "UploadResponseMalformedError",
    "ProcessingFailedError",
    "ProcessingTimeoutError",
    "NoContentError",
    "SummaryCancelledError",
    "WorkflowBusyError",
    "DEFAULT_MAX_BYTES",
    "is_supported_document",
    "is_within_size_limit",
    "max_bytes_from_mb",
    "format_file_size",
    "encode_base64",
    "GeminiClient",
    "build_session",
    "extract_summary_text",
    "SummaryStrategy",
    "ReferenceStrategy",
    "InlineStrategy",
    "AutoStrategy",
    "get_strategy",
    "SummaryWorkflow",
    "WorkflowState",
    "PresentationLayer",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "CredentialStore",
    "setup_logging",
    "stop_logging",
    "get_logger",
    "ThreadSafeLoggingConfig",
]
