from io import BytesIO

import pytest
from docx import Document
from fastapi import HTTPException

from src.app.models import Submission
from src.app.utils import file as file_utils
from src.app.utils.file import extract_text_from_url, file_name_from_url, resolve_submission_text


class FakeFileResponse:
    def __init__(self, status_code=200, text="", content=b""):
        self.status_code = status_code
        self.text = text
        self.content = content

    @property
    def ok(self):
        return self.status_code == 200


class FakeHttp:
    def __init__(self, response):
        self.response = response
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        return self.response


def _docx_bytes(*paragraphs):
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_file_name_ignores_query_string():
    assert file_name_from_url("https://cdn.test/a/b/Essay.DOCX?token=1") == "essay.docx"


def test_txt_file_text_is_returned():
    http = FakeHttp(FakeFileResponse(text="plain answer"))
    assert extract_text_from_url("https://cdn.test/answer.txt", http=http) == "plain answer"


def test_docx_paragraphs_are_joined():
    http = FakeHttp(FakeFileResponse(content=_docx_bytes("First paragraph.", "Second paragraph.")))
    assert extract_text_from_url("https://cdn.test/answer.docx", http=http) == "First paragraph.\nSecond paragraph."


def test_unsupported_types_are_not_downloaded():
    http = FakeHttp(FakeFileResponse())
    assert extract_text_from_url("https://cdn.test/answer.pdf", http=http) is None
    assert extract_text_from_url("https://cdn.test/answer.doc", http=http) is None
    assert http.urls == []


def test_failed_download_returns_none():
    http = FakeHttp(FakeFileResponse(status_code=404))
    assert extract_text_from_url("https://cdn.test/answer.txt", http=http) is None


def test_typed_content_takes_priority_over_file():
    http = FakeHttp(FakeFileResponse(text="from file"))
    submission = Submission(typed_content="typed", file_url="https://cdn.test/a.txt")
    assert resolve_submission_text(submission, http=http) == "typed"
    assert http.urls == []


def test_file_text_used_when_nothing_typed():
    http = FakeHttp(FakeFileResponse(content=_docx_bytes("From docx.")))
    submission = Submission(typed_content="", file_url="https://cdn.test/a.docx")
    assert resolve_submission_text(submission, http=http) == "From docx."


def test_unreadable_file_is_400_listing_supported_formats():
    http = FakeHttp(FakeFileResponse(status_code=500))
    submission = Submission(file_url="https://cdn.test/a.txt")
    with pytest.raises(HTTPException) as excinfo:
        resolve_submission_text(submission, http=http)
    assert excinfo.value.status_code == 400
    assert "Supported formats: .txt, .docx" in excinfo.value.detail


class ClosingHttp(FakeHttp):
    closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


def test_default_http_session_is_closed(monkeypatch):
    http = ClosingHttp(FakeFileResponse(text="plain answer"))
    monkeypatch.setattr(file_utils.requests, "Session", lambda: http)

    assert extract_text_from_url("https://cdn.test/answer.txt") == "plain answer"
    assert http.closed is True
