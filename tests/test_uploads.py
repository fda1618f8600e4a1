import io
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from starlette.datastructures import Headers, UploadFile

from uploads import directory_usage, resume_filename, store_resume

LIMIT = 5 * 1024 * 1024


def make_upload(data: bytes, content_type: str = "application/pdf", filename: str = "cv.pdf") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def pdf_bytes(size: int) -> bytes:
    return b"%PDF-" + b"0" * (size - 5)


def test_accepts_pdf_and_writes_it(tmp_path):
    url = store_resume(make_upload(pdf_bytes(1024)), str(tmp_path), LIMIT)

    name = url.rsplit("/", 1)[1]
    assert url.startswith("/uploads/resume-")
    assert name.endswith(".pdf")
    assert name[len("resume-"):-len(".pdf")].isdigit()
    assert (tmp_path / name).read_bytes() == pdf_bytes(1024)


def test_accepts_file_exactly_at_limit(tmp_path):
    store_resume(make_upload(pdf_bytes(LIMIT)), str(tmp_path), LIMIT)
    assert directory_usage(str(tmp_path)) == (1, LIMIT)


def test_rejects_oversized_file(tmp_path):
    with pytest.raises(HTTPException) as excinfo:
        store_resume(make_upload(pdf_bytes(6 * 1024 * 1024)), str(tmp_path), LIMIT)
    assert excinfo.value.status_code == 413
    assert list(tmp_path.iterdir()) == []


def test_rejects_other_content_types(tmp_path):
    with pytest.raises(HTTPException) as excinfo:
        store_resume(make_upload(pdf_bytes(1024), content_type="image/png"), str(tmp_path), LIMIT)
    assert excinfo.value.status_code == 400
    assert list(tmp_path.iterdir()) == []


def test_rejects_pdf_type_without_pdf_content(tmp_path):
    with pytest.raises(HTTPException) as excinfo:
        store_resume(make_upload(b"MZ\x90\x00 not a pdf"), str(tmp_path), LIMIT)
    assert excinfo.value.status_code == 400
    assert list(tmp_path.iterdir()) == []


def test_creates_missing_directory(tmp_path):
    target = tmp_path / "nested" / "uploads"
    store_resume(make_upload(pdf_bytes(100)), str(target), LIMIT)
    assert directory_usage(str(target)) == (1, 100)


def test_resume_filename_keeps_extension():
    assert resume_filename("My CV.PDF").endswith(".PDF")
    assert resume_filename("noext").startswith("resume-")
    assert "." not in resume_filename("noext")


def test_directory_usage_missing_dir(tmp_path):
    assert directory_usage(str(tmp_path / "missing")) == (0, 0)


def test_same_millisecond_uploads_do_not_overwrite(tmp_path):
    with patch("uploads.time.time", return_value=1700000000.0):
        first = store_resume(make_upload(pdf_bytes(100)), str(tmp_path), LIMIT)
        second = store_resume(make_upload(pdf_bytes(200)), str(tmp_path), LIMIT)

    assert first == "/uploads/resume-1700000000000.pdf"
    assert second == "/uploads/resume-1700000000001.pdf"
    assert directory_usage(str(tmp_path)) == (2, 300)
