"""
Factory for creating the summarize module.
"""
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pdf_digest import CredentialStore, GeminiClient, JsonFileStore, KeyValueStore

from .routes import create_summarize_routes
from .services import SummarizeService


def create_summarize_module(
    data_dir: Path,
    gemini_config,
    upload_config,
    index_template: str,
    credential_file: str = "credentials.json",
    client_factory: Optional[Callable[[str], GeminiClient]] = None,
    store: Optional[KeyValueStore] = None,
) -> Dict[str, Any]:
    """Create summarize services and routes.

    Args:
        data_dir: Directory for the credential file
        gemini_config: Gemini API configuration section
        upload_config: Upload limits configuration section
        index_template: Template string for the upload page
        credential_file: File name of the key-value store inside data_dir
        client_factory: Optional factory replacing the default GeminiClient builder
        store: Optional key-value store replacing the JSON file store

    Returns:
        Dictionary containing the services and blueprint
    """
    if store is None:
        data_dir.mkdir(parents=True, exist_ok=True)
        store = JsonFileStore(data_dir / credential_file)

    credential_store = CredentialStore(store)
    credential_store.load()

    summarize_service = SummarizeService(
        credential_store=credential_store,
        gemini_config=gemini_config,
        upload_config=upload_config,
        client_factory=client_factory,
    )

    blueprint = create_summarize_routes(summarize_service, index_template)

    return {
        "blueprint": blueprint,
        "service": summarize_service,
        "credential_store": credential_store
    }
