"""
strategies.py - Interchangeable ways of getting a summary out of the API

Every strategy takes a validated document and returns the summary text.
Callers pick one by name; the workflow never branches on the strategy.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from .errors import UploadResponseMalformedError
from .file_handler import encode_base64
from .gemini_client import GeminiClient, raise_if_cancelled
from .models import DocumentHandle

_LOG = logging.getLogger("strategies")

StatusCallback = Optional[Callable[[str], None]]


class SummaryStrategy(ABC):
    """Base class for summarization strategies."""

    name = "base"

    def __init__(self, client: GeminiClient):
        self.client = client

    @abstractmethod
    def produce_summary(
        self,
        handle: DocumentHandle,
        on_status_update: StatusCallback = None,
        on_generating: Optional[Callable[[], None]] = None,
        cancel_event=None,
    ) -> str:
        """Return the summary text for *handle* or raise a SummarizerError."""


class ReferenceStrategy(SummaryStrategy):
    """Upload the file, wait for it to become ACTIVE, summarize by URI."""

    name = "reference"

    def produce_summary(self, handle, on_status_update=None, on_generating=None, cancel_event=None):
        raise_if_cancelled(cancel_event)
        record = self.client.upload_file(handle)

        raise_if_cancelled(cancel_event)
        record = self.client.wait_for_file_processing(
            record.name, on_status_update=on_status_update, cancel_event=cancel_event
        )

        raise_if_cancelled(cancel_event)
        if on_generating:
            on_generating()
        return self.client.generate_summary(record.uri, record.mime_type or handle.mime_type)


class InlineStrategy(SummaryStrategy):
    """Send the document as base64 inside a single generation request."""

    name = "inline"

    def produce_summary(self, handle, on_status_update=None, on_generating=None, cancel_event=None):
        data = encode_base64(handle)
        raise_if_cancelled(cancel_event)
        if on_generating:
            on_generating()
        return self.client.generate_summary_from_base64(data, handle.mime_type)


class AutoStrategy(SummaryStrategy):
    """Try the reference strategy; fall back to inline on an empty upload ack."""

    name = "auto"

    def __init__(self, client: GeminiClient):
        super().__init__(client)
        self.reference = ReferenceStrategy(client)
        self.inline = InlineStrategy(client)

    def produce_summary(self, handle, on_status_update=None, on_generating=None, cancel_event=None):
        try:
            return self.reference.produce_summary(
                handle, on_status_update, on_generating, cancel_event
            )
        except UploadResponseMalformedError as exc:
            _LOG.warning("Upload acknowledgement unusable (%s), retrying inline", exc.message)
            return self.inline.produce_summary(
                handle, on_status_update, on_generating, cancel_event
            )


STRATEGIES: Dict[str, type] = {
    ReferenceStrategy.name: ReferenceStrategy,
    InlineStrategy.name: InlineStrategy,
    AutoStrategy.name: AutoStrategy,
}

DEFAULT_STRATEGY = InlineStrategy.name


def get_strategy(name: Optional[str], client: GeminiClient) -> SummaryStrategy:
    """Instantiate the strategy registered under *name*."""
    key = (name or DEFAULT_STRATEGY).strip().lower()
    try:
        strategy_cls = STRATEGIES[key]
    except KeyError:
        raise ValueError(
            f"Unknown summary strategy '{name}'. Choose one of: {', '.join(sorted(STRATEGIES))}"
        ) from None
    return strategy_cls(client)
