"""
gemini_client.py - Client for the Gemini generative-language API

This module wraps the three endpoints the summarization workflow needs:

- file ingestion (multipart upload of the PDF plus its metadata)
- file status (polled until the uploaded file leaves PROCESSING)
- content generation (summary from a file URI or from inline base64 data)

The API key is sent as the ``key`` query parameter only and is redacted
from every message this module produces.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from .errors import (
    GenerationFailedError,
    MalformedResponseError,
    NoContentError,
    ProcessingFailedError,
    ProcessingTimeoutError,
    StatusCheckFailedError,
    SummaryCancelledError,
    UploadFailedError,
    UploadResponseMalformedError,
)
from .file_handler import format_file_size
from .models import DocumentHandle, FileState, GenerateContentResponse, UploadRecord

_LOG = logging.getLogger("gemini_client")

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 120
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_MAX_POLL_ATTEMPTS = 60
SUMMARY_PROMPT = "Summarize this document"
NO_SUMMARY_MESSAGE = "No summary generated"


def build_session(proxy_url: Optional[str] = None) -> requests.Session:
    """Build a requests session with optional proxy configuration."""
    session = requests.Session()
    if proxy_url:
        _LOG.warning("Using proxy: %s", proxy_url)
        session.proxies.update({"http": proxy_url, "https": proxy_url})
    return session


def raise_if_cancelled(cancel_event) -> None:
    """Raise SummaryCancelledError if *cancel_event* has been set."""
    if cancel_event is not None and cancel_event.is_set():
        raise SummaryCancelledError("Summarization cancelled")


def extract_error_message(response: requests.Response, action: str) -> str:
    """Pull ``error.message`` out of an error body, or describe the status."""
    try:
        body = response.json()
    except ValueError:
        return f"{action}: {response.status_code} {response.reason or ''}".rstrip()

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return f"{action}: {response.status_code}"


def extract_summary_text(payload: Any) -> str:
    """Join every text part of the first candidate with newlines.

    Raises:
        NoContentError: no candidate, no content, or no text-bearing part.
        MalformedResponseError: the payload does not look like a generation response.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("Generation response was not a JSON object")

    try:
        parsed = GenerateContentResponse.model_validate(payload)
    except PydanticValidationError as exc:
        raise MalformedResponseError(f"Unexpected generation response: {exc}") from exc

    if not parsed.candidates or parsed.candidates[0].content is None:
        raise NoContentError(NO_SUMMARY_MESSAGE)

    texts = [part.text for part in parsed.candidates[0].content.parts or [] if part.text]
    if not texts:
        raise NoContentError(NO_SUMMARY_MESSAGE)
    return "\n".join(texts)


class GeminiClient:
    """Holds the credential and endpoint; stateless between calls."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_poll_attempts: Optional[int] = DEFAULT_MAX_POLL_ATTEMPTS,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.model = model or DEFAULT_MODEL
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.session = session or build_session()
        self.sleep = sleep

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _redact(self, text: str) -> str:
        if self.api_key:
            return text.replace(self.api_key, "***")
        return text

    def _send(self, method: str, url: str, error_cls, action: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(
                method,
                url,
                params={"key": self.api_key},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise error_cls(None, self._redact(f"{action}: {exc}")) from exc

    def _raise_for_status(self, response: requests.Response, error_cls, action: str) -> None:
        if not response.ok:
            message = self._redact(extract_error_message(response, action))
            _LOG.warning("%s (HTTP %s)", message, response.status_code)
            raise error_cls(response.status_code, message)

    # ------------------------------------------------------------------
    # Files API
    # ------------------------------------------------------------------
    def upload_file(self, handle: DocumentHandle) -> UploadRecord:
        """Upload *handle* to the file ingestion endpoint.

        Raises:
            UploadFailedError: non-success HTTP status.
            UploadResponseMalformedError: success status with an empty or
                unparsable acknowledgement.
        """
        action = "Failed to upload file"
        metadata = {"displayName": handle.name}
        files = [
            ("file", (handle.name, handle.data, handle.mime_type)),
            ("metadata", (None, json.dumps(metadata), "application/json")),
        ]
        _LOG.info("Uploading file: %s (%s)", handle.name, format_file_size(handle.size))

        response = self._send("POST", f"{self.base_url}/files", UploadFailedError, action, files=files)
        _LOG.debug("Upload response status: %s", response.status_code)
        self._raise_for_status(response, UploadFailedError, action)

        text = (response.text or "").strip()
        if not text or text == "{}":
            _LOG.warning("Empty upload response received for %s", handle.name)
            raise UploadResponseMalformedError("File upload returned empty response")

        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise UploadResponseMalformedError(f"Invalid JSON response: {text[:200]}") from exc
        if not isinstance(payload, dict):
            raise UploadResponseMalformedError(f"Invalid JSON response: {text[:200]}")

        record = UploadRecord.from_response(payload)
        if not isinstance(record.name, str) or not record.name:
            raise UploadResponseMalformedError("File upload response did not include a file name")

        _LOG.info("Uploaded %s as %s (state %s)", handle.name, record.name, record.state.value)
        return record

    def get_file_status(self, file_name: str) -> UploadRecord:
        """Fetch the current processing state of an uploaded file."""
        action = "Failed to get file status"
        file_path = file_name if file_name.startswith("files/") else f"files/{file_name}"

        response = self._send("GET", f"{self.base_url}/{file_path}", StatusCheckFailedError, action)
        self._raise_for_status(response, StatusCheckFailedError, action)

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("File status response was not valid JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError("File status response was not a JSON object")

        record = UploadRecord.from_response(payload)
        if not record.name:
            record.name = file_path
        return record

    def wait_for_file_processing(
        self,
        file_name: str,
        on_status_update: Optional[Callable[[str], None]] = None,
        cancel_event=None,
    ) -> UploadRecord:
        """Poll until the file leaves PROCESSING.

        Args:
            file_name: identifier returned by the upload
            on_status_update: called with the current state before every re-poll
            cancel_event: optional ``threading.Event`` checked around each sleep

        Returns:
            The terminal record, carrying the resolved file URI.
        """
        record = self.get_file_status(file_name)
        polls = 0

        while record.is_processing:
            if self.max_poll_attempts is not None and polls >= self.max_poll_attempts:
                raise ProcessingTimeoutError(
                    f"File processing did not finish after {polls} status checks"
                )
            if on_status_update:
                on_status_update(record.state.value)

            raise_if_cancelled(cancel_event)
            self.sleep(self.poll_interval)
            raise_if_cancelled(cancel_event)

            polls += 1
            _LOG.debug("Polling %s (attempt %d)", file_name, polls)
            record = self.get_file_status(file_name)

        if record.state == FileState.FAILED:
            raise ProcessingFailedError("File processing failed")
        if not record.uri:
            raise MalformedResponseError("Processed file has no URI")

        _LOG.info("File %s is %s", record.name, record.state.value)
        return record

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def _generate(self, document_part: Dict[str, Any]) -> str:
        action = "Failed to generate summary"
        body = {"contents": [{"parts": [{"text": SUMMARY_PROMPT}, document_part]}]}
        url = f"{self.base_url}/models/{self.model}:generateContent"

        response = self._send("POST", url, GenerationFailedError, action, json=body)
        self._raise_for_status(response, GenerationFailedError, action)

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Generation response was not valid JSON") from exc
        return extract_summary_text(payload)

    def generate_summary(self, file_uri: str, mime_type: str) -> str:
        """Summarize a previously uploaded file."""
        _LOG.info("Requesting summary for %s with %s", file_uri, self.model)
        return self._generate({"fileData": {"fileUri": file_uri, "mimeType": mime_type}})

    def generate_summary_from_base64(self, base64_data: str, mime_type: str) -> str:
        """Summarize a document sent inline as base64."""
        _LOG.info("Requesting inline summary (%d base64 chars) with %s", len(base64_data), self.model)
        return self._generate({"inlineData": {"mimeType": mime_type, "data": base64_data}})

