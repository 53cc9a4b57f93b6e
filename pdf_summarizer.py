"""
pdf_summarizer.py – Command line front end for PDF summarization

Summarizes a local PDF with the Gemini API and prints the result.

FEATURES:
- Inline (base64) or reference (upload + poll) submission, or auto fallback
- Same validation as the web app: PDF type and size limit
- API key from --api-key, GEMINI_API_KEY/config, or the remembered key
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from config_manager import ConfigManager
from pdf_digest import (
    CredentialStore,
    DocumentHandle,
    GeminiClient,
    JsonFileStore,
    SummaryWorkflow,
    build_session,
    format_file_size,
    max_bytes_from_mb,
    setup_logging,
    stop_logging,
)
from pdf_digest.strategies import STRATEGIES

_LOG = logging.getLogger("pdf_summarizer")

__version__ = "0.1.0"
BASE_DIR = Path(__file__).parent


class ConsolePresentation:
    """Presentation layer writing to the terminal."""

    def __init__(self, handle: Optional[DocumentHandle], api_key: Optional[str], stream=None):
        self.handle = handle
        self.api_key = api_key
        self.stream = stream or sys.stdout
        self.summary: Optional[str] = None
        self.error: Optional[str] = None

    def get_selected_file(self) -> Optional[DocumentHandle]:
        return self.handle

    def get_api_key(self) -> Optional[str]:
        return self.api_key

    def show_loading(self) -> None:
        if self.handle is not None:
            _LOG.info("Summarizing %s (%s)...", self.handle.name, format_file_size(self.handle.size))

    def hide_loading(self) -> None:
        pass

    def show_summary(self, text: str) -> None:
        self.summary = text
        print("\n" + "=" * 80 + "\nSUMMARY\n" + "=" * 80, file=self.stream)
        print(text, file=self.stream)

    def show_error(self, text: str) -> None:
        self.error = text
        print(text, file=sys.stderr)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Summarize a PDF document via the Gemini API"
    )
    parser.add_argument("path", help="Path to the PDF file")
    parser.add_argument("--api-key", help="Gemini API key (remembered for later runs)")
    parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        help="How to submit the document (default: from config, normally inline)",
    )
    parser.add_argument("--model", help="Gemini model name")
    parser.add_argument("--max-size-mb", type=int, help="Maximum accepted PDF size in MB")
    parser.add_argument("--config", default="web_app_config.json", help="Configuration file")
    parser.add_argument("--proxy", help="Proxy URL to use")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    try:
        config = ConfigManager(args.config)
        gemini_config = config.get_gemini_config()
        upload_config = config.get_upload_config()
        paths_config = config.get_paths_config()

        credential_store = CredentialStore(
            JsonFileStore(BASE_DIR / paths_config.data_dir / paths_config.credential_file)
        )
        credential_store.load()
        if args.api_key:
            credential_store.save(args.api_key)
        api_key = args.api_key or gemini_config.api_key or credential_store.current

        path = Path(args.path)
        handle = DocumentHandle.from_path(path) if path.is_file() else None
        if handle is None:
            _LOG.error("File not found: %s", path)

        session = build_session(args.proxy)

        def client_factory(key: str) -> GeminiClient:
            return GeminiClient(
                api_key=key,
                base_url=gemini_config.base_url,
                model=args.model or gemini_config.model,
                timeout=gemini_config.timeout,
                poll_interval=gemini_config.poll_interval,
                max_poll_attempts=gemini_config.max_poll_attempts,
                session=session,
            )

        workflow = SummaryWorkflow(
            ConsolePresentation(handle, api_key),
            client_factory=client_factory,
            strategy_name=args.strategy or gemini_config.strategy,
            max_bytes=max_bytes_from_mb(args.max_size_mb or upload_config.max_pdf_size_mb),
        )
        result = workflow.run()
        return 0 if result.is_success else 1
    finally:
        stop_logging()


if __name__ == "__main__":
    sys.exit(main())
