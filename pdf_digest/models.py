"""
Data models for the summarization workflow.

Plain dataclasses describe what the workflow holds in memory; Pydantic
models describe what the generative-language API sends back.
"""

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class DocumentHandle:
    """Selected document: raw bytes plus declared type and display name."""
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path, mime_type: Optional[str] = None) -> "DocumentHandle":
        """Load a document from disk, guessing the MIME type from the extension."""
        path = Path(path)
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            mime_type=mime_type or "application/octet-stream",
            data=path.read_bytes(),
        )

    @classmethod
    def from_upload(cls, storage) -> "DocumentHandle":
        """Build a handle from a werkzeug ``FileStorage``."""
        return cls(
            name=storage.filename or "document",
            mime_type=storage.mimetype or "application/octet-stream",
            data=storage.read(),
        )


class FileState(str, Enum):
    """Processing state of an uploaded file."""
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"

    @classmethod
    def parse(cls, value: Optional[str]) -> "FileState":
        try:
            return cls(value)
        except ValueError:
            return cls.STATE_UNSPECIFIED


def unwrap_file(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return the file record whether or not it is wrapped in ``{"file": ...}``."""
    wrapped = payload.get("file")
    if isinstance(wrapped, dict):
        return wrapped
    return payload


def get_state(payload: Dict[str, Any]) -> Optional[str]:
    """Read the processing state from either response envelope."""
    return payload.get("state") or unwrap_file(payload).get("state")


@dataclass
class UploadRecord:
    """Server-side bookkeeping entry for an uploaded file."""
    name: str
    state: FileState = FileState.STATE_UNSPECIFIED
    uri: Optional[str] = None
    mime_type: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def is_processing(self) -> bool:
        return self.state == FileState.PROCESSING

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "UploadRecord":
        record = unwrap_file(payload)
        return cls(
            name=record.get("name", ""),
            state=FileState.parse(get_state(payload)),
            uri=record.get("uri"),
            mime_type=record.get("mimeType"),
            display_name=record.get("displayName"),
        )


class Part(BaseModel):
    """One part of a generated content block."""
    text: Optional[str] = Field(default=None, description="Text payload, absent for non-text parts")


class Content(BaseModel):
    """Generated content block."""
    parts: Optional[List[Part]] = Field(default=None, description="Ordered content parts")
    role: Optional[str] = Field(default=None, description="Producer role")


class Candidate(BaseModel):
    """A single generation candidate."""
    content: Optional[Content] = Field(default=None, description="Candidate content")
    finishReason: Optional[str] = Field(default=None, description="Why generation stopped")


class GenerateContentResponse(BaseModel):
    """Response body of the generateContent endpoint."""
    candidates: Optional[List[Candidate]] = Field(default=None, description="Generation candidates")


class SummaryResult(BaseModel):
    """Outcome of one summarization run."""
    text: Optional[str] = Field(default=None, description="Summary text on success")
    error: Optional[str] = Field(default=None, description="Failure reason on failure")
    strategy: Optional[str] = Field(default=None, description="Strategy that produced the result")
    error_type: Optional[str] = Field(default=None, description="Exception class name on failure")

    @classmethod
    def success(cls, text: str, strategy: Optional[str] = None) -> "SummaryResult":
        """Create a successful result."""
        return cls(text=text, strategy=strategy)

    @classmethod
    def failure(
        cls, error: str, strategy: Optional[str] = None, error_type: Optional[str] = None
    ) -> "SummaryResult":
        """Create a failure result."""
        return cls(error=error, strategy=strategy, error_type=error_type)

    @property
    def is_success(self) -> bool:
        """Check if summarization was successful."""
        return self.text is not None
