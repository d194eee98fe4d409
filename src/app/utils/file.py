# File: src/app/utils/file.py
import logging
from io import BytesIO
from typing import Optional
from urllib.parse import urlparse

import requests
from docx import Document
from fastapi import HTTPException, status

from ..models.assignment import Submission

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".docx")
FILE_FETCH_TIMEOUT = 30


def file_name_from_url(file_url: str) -> str:
    path = urlparse(file_url).path
    return path.rsplit("/", 1)[-1].lower()


def extract_text_from_url(file_url: str, http: Optional[requests.Session] = None) -> Optional[str]:
    """
    Download an uploaded submission file and return its text.

    Returns None when the type is unsupported or the file can't be read.
    """
    name = file_name_from_url(file_url)
    if not name.endswith(SUPPORTED_EXTENSIONS):
        logger.info(f"No text extractor for '{name}'")
        return None

    try:
        if http is None:
            with requests.Session() as http:
                response = http.get(file_url, timeout=FILE_FETCH_TIMEOUT)
        else:
            response = http.get(file_url, timeout=FILE_FETCH_TIMEOUT)
    except requests.RequestException as e:
        logger.error(f"Failed to fetch file {file_url}: {e}")
        return None
    if not response.ok:
        logger.error(f"Failed to fetch file {file_url}: HTTP {response.status_code}")
        return None

    if name.endswith(".txt"):
        return response.text

    try:
        document = Document(BytesIO(response.content))
    except Exception as e:
        logger.error(f"Could not read .docx file {file_url}: {e}", exc_info=True)
        return None
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def resolve_submission_text(submission: Submission, http: Optional[requests.Session] = None) -> str:
    """Typed content first, then the uploaded file; 400 when neither yields text."""
    content = submission.typed_content or ""

    if not content.strip() and submission.file_url:
        logger.info(f"Extracting text from file: {submission.file_url}")
        extracted = extract_text_from_url(submission.file_url, http=http)
        if extracted is None:
            if file_name_from_url(submission.file_url).endswith(".pdf"):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="PDF text extraction is not supported. Please ask the student to submit as .docx or typed text.",
                )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Could not extract text from the uploaded file. Supported formats: .txt, .docx",
            )
        content = extracted

    if not content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No content to evaluate in this submission",
        )
    return content
