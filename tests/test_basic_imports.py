"""
Basic import tests to verify the core functionality.
"""


def test_pdf_digest_imports():
    """Test that the public pdf_digest API can be imported."""
    from pdf_digest import (
        GeminiClient,
        SummaryWorkflow,
        get_strategy,
        is_supported_document,
        is_within_size_limit,
        setup_logging,
    )

    assert callable(get_strategy)
    assert callable(is_supported_document)
    assert callable(is_within_size_limit)
    assert callable(setup_logging)
    assert GeminiClient("k").base_url == "https://generativelanguage.googleapis.com/v1beta"
    assert SummaryWorkflow is not None


def test_app_imports():
    """Test that the Flask app and module factory can be imported."""
    from app.main import app, create_app
    from app.summarize import create_summarize_module

    assert callable(create_app)
    assert callable(create_summarize_module)
    assert "summarize" in app.blueprints


def test_cli_imports():
    from pdf_summarizer import main, ConsolePresentation

    assert callable(main)
    presentation = ConsolePresentation(None, None)
    assert presentation.get_selected_file() is None
