"""
Tests for the reference, inline and auto summarization strategies.
"""

import base64
from unittest.mock import Mock, call

import pytest

from conftest import make_response, generation_body, file_body
from pdf_digest import (
    AutoStrategy,
    FileState,
    GeminiClient,
    InlineStrategy,
    ProcessingFailedError,
    ReferenceStrategy,
    UploadFailedError,
    UploadRecord,
    UploadResponseMalformedError,
    get_strategy,
)


@pytest.fixture()
def mock_client():
    client = Mock(spec=GeminiClient)
    client.upload_file.return_value = UploadRecord(name="files/abc123", state=FileState.PROCESSING)
    client.wait_for_file_processing.return_value = UploadRecord(
        name="files/abc123",
        state=FileState.ACTIVE,
        uri="https://example.com/files/abc123",
        mime_type="application/pdf",
    )
    client.generate_summary.return_value = "Reference summary"
    client.generate_summary_from_base64.return_value = "Inline summary"
    return client


class TestReferenceStrategy:

    def test_upload_poll_generate_in_order(self, mock_client, pdf_handle):
        strategy = ReferenceStrategy(mock_client)
        on_status = Mock()
        on_generating = Mock()

        summary = strategy.produce_summary(pdf_handle, on_status_update=on_status, on_generating=on_generating)

        assert summary == "Reference summary"
        assert [c[0] for c in mock_client.mock_calls] == [
            "upload_file",
            "wait_for_file_processing",
            "generate_summary",
        ]
        mock_client.wait_for_file_processing.assert_called_once_with(
            "files/abc123", on_status_update=on_status, cancel_event=None
        )
        mock_client.generate_summary.assert_called_once_with(
            "https://example.com/files/abc123", "application/pdf"
        )
        on_generating.assert_called_once_with()

    def test_processing_failure_skips_generation(self, mock_client, pdf_handle):
        mock_client.wait_for_file_processing.side_effect = ProcessingFailedError("File processing failed")

        with pytest.raises(ProcessingFailedError):
            ReferenceStrategy(mock_client).produce_summary(pdf_handle)

        mock_client.generate_summary.assert_not_called()

    def test_failed_state_never_reaches_generation_endpoint(self, session, sleep, pdf_handle):
        client = GeminiClient("test-key", session=session, sleep=sleep)
        session.request.side_effect = [
            make_response(200, file_body("PROCESSING", wrapped=True)),
            make_response(200, file_body("PROCESSING")),
            make_response(200, file_body("FAILED")),
        ]

        with pytest.raises(ProcessingFailedError):
            ReferenceStrategy(client).produce_summary(pdf_handle)

        urls = [c.args[1] for c in session.request.call_args_list]
        assert not any(url.endswith(":generateContent") for url in urls)

    def test_empty_upload_ack_does_not_poll(self, session, sleep, pdf_handle):
        client = GeminiClient("test-key", session=session, sleep=sleep)
        session.request.return_value = make_response(200, text="")

        with pytest.raises(UploadResponseMalformedError):
            ReferenceStrategy(client).produce_summary(pdf_handle)

        assert session.request.call_count == 1
        sleep.assert_not_called()

    def test_full_round_trip_with_real_client(self, session, sleep, pdf_handle):
        client = GeminiClient("test-key", session=session, sleep=sleep)
        uri = "https://example.com/files/abc123"
        session.request.side_effect = [
            make_response(200, file_body("PROCESSING", wrapped=True)),
            make_response(200, file_body("PROCESSING")),
            make_response(200, file_body("ACTIVE", uri=uri)),
            make_response(200, generation_body("Part one", "Part two")),
        ]

        summary = ReferenceStrategy(client).produce_summary(pdf_handle)

        assert summary == "Part one\nPart two"
        file_part = session.request.call_args.kwargs["json"]["contents"][0]["parts"][1]
        assert file_part == {"fileData": {"fileUri": uri, "mimeType": "application/pdf"}}


class TestInlineStrategy:

    def test_sends_base64_payload(self, mock_client, pdf_handle):
        summary = InlineStrategy(mock_client).produce_summary(pdf_handle)

        assert summary == "Inline summary"
        expected = base64.b64encode(pdf_handle.data).decode("ascii")
        mock_client.generate_summary_from_base64.assert_called_once_with(expected, "application/pdf")
        mock_client.upload_file.assert_not_called()
        mock_client.wait_for_file_processing.assert_not_called()

    def test_never_reports_polling(self, mock_client, pdf_handle):
        on_status = Mock()

        InlineStrategy(mock_client).produce_summary(pdf_handle, on_status_update=on_status)

        on_status.assert_not_called()


class TestAutoStrategy:

    def test_uses_reference_when_upload_works(self, mock_client, pdf_handle):
        assert AutoStrategy(mock_client).produce_summary(pdf_handle) == "Reference summary"
        mock_client.generate_summary_from_base64.assert_not_called()

    def test_falls_back_to_inline_on_empty_ack(self, mock_client, pdf_handle):
        mock_client.upload_file.side_effect = UploadResponseMalformedError("File upload returned empty response")

        assert AutoStrategy(mock_client).produce_summary(pdf_handle) == "Inline summary"
        mock_client.wait_for_file_processing.assert_not_called()

    def test_falls_back_when_upload_name_is_not_a_string(self, session, sleep, pdf_handle):
        client = GeminiClient("test-key", session=session, sleep=sleep)
        session.request.side_effect = [
            make_response(200, {"file": {"name": 123, "state": "PROCESSING"}}),
            make_response(200, generation_body("Inline after bad ack")),
        ]

        assert AutoStrategy(client).produce_summary(pdf_handle) == "Inline after bad ack"
        sleep.assert_not_called()

    def test_other_errors_propagate(self, mock_client, pdf_handle):
        mock_client.upload_file.side_effect = UploadFailedError(403, "Permission denied")

        with pytest.raises(UploadFailedError):
            AutoStrategy(mock_client).produce_summary(pdf_handle)

        mock_client.generate_summary_from_base64.assert_not_called()


class TestGetStrategy:

    def test_default_is_inline(self, mock_client):
        assert isinstance(get_strategy(None, mock_client), InlineStrategy)

    @pytest.mark.parametrize("name, cls", [
        ("reference", ReferenceStrategy),
        ("INLINE", InlineStrategy),
        (" auto ", AutoStrategy),
    ])
    def test_lookup_by_name(self, mock_client, name, cls):
        strategy = get_strategy(name, mock_client)
        assert isinstance(strategy, cls)
        assert strategy.client is mock_client

    def test_unknown_name(self, mock_client):
        with pytest.raises(ValueError, match="Unknown summary strategy"):
            get_strategy("carrier-pigeon", mock_client)
