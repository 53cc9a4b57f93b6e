"""
file_handler.py - Document validation helpers

Pure functions: no I/O, no logging, and no failure mode beyond returning False.
"""

import base64
from typing import Optional

from .models import PDF_MIME_TYPE, DocumentHandle

DEFAULT_MAX_SIZE_MB = 20
DEFAULT_MAX_BYTES = DEFAULT_MAX_SIZE_MB * 1024 * 1024

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def is_supported_document(handle: Optional[DocumentHandle]) -> bool:
    """Return True iff the declared MIME type is PDF."""
    return handle is not None and handle.mime_type == PDF_MIME_TYPE


def is_within_size_limit(handle: Optional[DocumentHandle], max_bytes: int = DEFAULT_MAX_BYTES) -> bool:
    """Return True iff the document is no larger than *max_bytes* (inclusive)."""
    return handle is not None and handle.size <= max_bytes


def max_bytes_from_mb(max_size_mb: float) -> int:
    """Convert a limit expressed in MiB to bytes."""
    return int(max_size_mb * 1024 * 1024)


def format_file_size(num_bytes: int) -> str:
    """Human-readable size, e.g. ``"1.5 KB"`` or ``"20 MB"``."""
    if num_bytes <= 0:
        return "0 Bytes"
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def encode_base64(handle: DocumentHandle) -> str:
    """Encode the document bytes for an inline request payload."""
    return base64.b64encode(handle.data).decode("ascii")
