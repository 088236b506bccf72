import pytest
from fastapi.testclient import TestClient

from pdf_to_text import __version__, server
from pdf_to_text.config import ServerSettings
from pdf_to_text.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app(ServerSettings(max_upload_mb=1)))


def _upload(data, name="report.pdf", content_type="application/pdf"):
    return {"pdfFile": (name, data, content_type)}


def test_index_describes_service(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["version"] == __version__
    assert body["endpoint"].startswith("/convert")


def test_convert_returns_json_result(client, footer_pdf):
    response = client.post("/convert", files=_upload(footer_pdf))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "verification" in body["text"]
    assert "Acme Report 2024" not in body["text"]
    assert body["characters"] == len(body["text"])
    assert body["filename"].startswith("report-")
    assert body["filename"].endswith("Z.txt")


def test_convert_download_format(client, footer_pdf):
    response = client.post(
        "/convert", params={"format": "download"}, files=_upload(footer_pdf)
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="report-')
    assert response.text.startswith("Chapter one starts here.")


def test_missing_upload_is_rejected(client):
    response = client.post("/convert")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No PDF file uploaded"}


def test_non_pdf_upload_is_rejected(client):
    response = client.post(
        "/convert", files=_upload(b"plain", name="notes.txt", content_type="text/plain")
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Uploaded file is not a PDF"


def test_oversized_upload_is_rejected(client):
    data = b"%PDF-1.7\n" + b"0" * (1024 * 1024)
    response = client.post("/convert", files=_upload(data))
    assert response.status_code == 413
    assert response.json()["success"] is False


def test_unreadable_pdf_maps_to_422(client):
    response = client.post("/convert", files=_upload(b"definitely not a pdf"))
    assert response.status_code == 422
    assert response.json() == {
        "success": False,
        "error": "Failed to extract text from PDF",
    }


def test_unexpected_failure_maps_to_500(client, monkeypatch, footer_pdf):
    def boom(*_args, **_kwargs):
        raise ValueError("unexpected")

    monkeypatch.setattr(server, "convert_pdf", boom)
    response = client.post("/convert", files=_upload(footer_pdf))
    assert response.status_code == 500
    assert response.json()["error"] == "An error occurred while processing the PDF"


def test_unknown_format_falls_back_to_json(client, footer_pdf):
    response = client.post(
        "/convert", params={"format": "txt"}, files=_upload(footer_pdf)
    )
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_download_with_non_ascii_filename(client, footer_pdf):
    response = client.post(
        "/convert",
        params={"format": "download"},
        files=_upload(footer_pdf, name="informe_\u6587\u6863.pdf"),
    )
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="informe_-')
    assert "filename*=UTF-8''informe_%E6%96%87%E6%A1%A3-" in disposition
    assert response.text.startswith("Chapter one starts here.")


def test_content_disposition_strips_unsafe_characters():
    header = server._content_disposition('a"b\\c\u00e9.txt')
    assert header == (
        "attachment; filename=\"abc.txt\"; filename*=UTF-8''a%22b%5Cc%C3%A9.txt"
    )


def test_content_disposition_falls_back_to_generic_name():
    header = server._content_disposition("\u6587\u6863")
    assert header.startswith('attachment; filename="document.txt"; ')
