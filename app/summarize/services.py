"""
Services behind the summarize routes.
"""
import html
import logging
import re
from typing import Callable, List, Optional, Tuple

import markdown
import requests
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from pdf_digest import (
    CredentialStore,
    DocumentHandle,
    GeminiClient,
    SummaryResult,
    SummaryWorkflow,
    max_bytes_from_mb,
)
from pdf_digest.strategies import STRATEGIES

logger = logging.getLogger(__name__)


class RequestPresentation:
    """Presentation layer for a single HTTP request.

    Collects what the workflow wants to show so the route can turn it into
    a JSON response.
    """

    def __init__(self, handle: Optional[DocumentHandle], api_key: Optional[str]):
        self.handle = handle
        self.api_key = api_key
        self.loading = False
        self.summary: Optional[str] = None
        self.error: Optional[str] = None
        self.events: List[str] = []

    def get_selected_file(self) -> Optional[DocumentHandle]:
        return self.handle

    def get_api_key(self) -> Optional[str]:
        return self.api_key

    def show_loading(self) -> None:
        self.loading = True
        self.events.append("loading")

    def hide_loading(self) -> None:
        self.loading = False
        self.events.append("loaded")

    def show_summary(self, text: str) -> None:
        self.summary = text
        self.error = None
        self.events.append("summary")

    def show_error(self, text: str) -> None:
        self.error = text
        self.summary = None
        self.events.append("error")


UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:")
_IGNORED_URL_CHARS = re.compile(r"[\x00-\x20]")


class UnsafeLinkTreeprocessor(Treeprocessor):
    """Drop link and image targets that would run script."""

    def run(self, root):
        for element in root.iter():
            for attribute in ("href", "src"):
                value = element.get(attribute)
                if not value:
                    continue
                # scheme as a browser reads it: entities decoded, control characters dropped
                normalized = _IGNORED_URL_CHARS.sub("", html.unescape(value)).lower()
                if normalized.startswith(UNSAFE_URL_SCHEMES):
                    del element.attrib[attribute]


class SafeSummaryExtension(Extension):
    """Treat raw HTML in model output as text."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(UnsafeLinkTreeprocessor(md), "unsafe_links", -1)


class SummaryRenderer:
    """Service for rendering summary content."""

    def render_markdown(self, md_text: str) -> str:
        """Convert the model's Markdown summary to HTML, escaping any raw HTML."""
        return markdown.markdown(
            md_text,
            extensions=[
                "fenced_code",
                "tables",
                "sane_lists",
                SafeSummaryExtension(),
            ],
        )


def make_client_factory(gemini_config, session: Optional[requests.Session] = None) -> Callable[[str], GeminiClient]:
    """Build GeminiClient instances from the Gemini configuration section."""
    def factory(api_key: str) -> GeminiClient:
        return GeminiClient(
            api_key=api_key,
            base_url=gemini_config.base_url,
            model=gemini_config.model,
            timeout=gemini_config.timeout,
            poll_interval=gemini_config.poll_interval,
            max_poll_attempts=gemini_config.max_poll_attempts,
            session=session,
        )
    return factory


class SummarizeService:
    """Runs summary workflows for web requests and owns the stored API key."""

    def __init__(
        self,
        credential_store: CredentialStore,
        gemini_config,
        upload_config,
        client_factory: Optional[Callable[[str], GeminiClient]] = None,
    ):
        self.credential_store = credential_store
        self.gemini_config = gemini_config
        self.upload_config = upload_config
        self.client_factory = client_factory or make_client_factory(gemini_config)
        self.max_bytes = max_bytes_from_mb(upload_config.max_pdf_size_mb)
        self.renderer = SummaryRenderer()

    @property
    def strategies(self) -> List[str]:
        return sorted(STRATEGIES)

    @property
    def default_strategy(self) -> str:
        return self.gemini_config.strategy

    def has_api_key(self) -> bool:
        return self.credential_store.has_credential or bool(self.gemini_config.api_key)

    def save_api_key(self, api_key: Optional[str]) -> bool:
        """Persist (or forget, when blank) the API key. Returns whether one is stored."""
        self.credential_store.save(api_key)
        return self.credential_store.has_credential

    def clear_api_key(self) -> None:
        self.credential_store.clear()

    def resolve_api_key(self, api_key: Optional[str]) -> Optional[str]:
        """Request key first, then the remembered one, then the configured one."""
        if api_key and api_key.strip():
            return api_key.strip()
        return self.credential_store.current or self.gemini_config.api_key or None

    def summarize(self, storage, api_key: Optional[str] = None, strategy: Optional[str] = None) -> Tuple[SummaryResult, int]:
        """Summarize an uploaded file.

        Args:
            storage: werkzeug FileStorage from the request, or None
            api_key: key typed by the user; remembered when given
            strategy: strategy name, defaults to the configured one

        Returns:
            The workflow result and the HTTP status code to answer with.
        """
        if api_key and api_key.strip():
            self.credential_store.save(api_key)

        handle = None
        if storage is not None and storage.filename:
            handle = DocumentHandle.from_upload(storage)

        presentation = RequestPresentation(handle, self.resolve_api_key(api_key))
        workflow = SummaryWorkflow(
            presentation,
            client_factory=self.client_factory,
            strategy_name=strategy or self.default_strategy,
            max_bytes=self.max_bytes,
        )
        result = workflow.run()

        if result.is_success:
            return result, 200
        if result.error_type == "ValidationError":
            return result, 400
        logger.warning(f"Summary request failed: {result.error}")
        return result, 502
