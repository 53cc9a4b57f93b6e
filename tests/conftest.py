"""
Shared fixtures for the PDF digest tests.
"""

import json
from unittest.mock import Mock

import pytest
import requests

from pdf_digest import DocumentHandle, GeminiClient


def make_response(status_code=200, body=None, text=None, reason=None):
    """Build a real requests.Response carrying *body* (as JSON) or raw *text*."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason or ("OK" if status_code < 400 else "Bad Request")
    if text is None:
        text = "" if body is None else json.dumps(body)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


def generation_body(*texts):
    """Generation response whose first candidate holds one part per text."""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": t} for t in texts]}}]}


def file_body(state, name="files/abc123", uri=None, wrapped=False):
    record = {"name": name, "state": state, "mimeType": "application/pdf"}
    if uri:
        record["uri"] = uri
    return {"file": record} if wrapped else record


@pytest.fixture()
def pdf_handle():
    return DocumentHandle(name="report.pdf", mime_type="application/pdf", data=b"%PDF-1.4\n%test document\n")


@pytest.fixture()
def session():
    return Mock()


@pytest.fixture()
def sleep():
    return Mock()


@pytest.fixture()
def gemini_client(session, sleep):
    return GeminiClient("test-key", session=session, sleep=sleep, poll_interval=5.0)
