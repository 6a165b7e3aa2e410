import pytest
from fastapi.testclient import TestClient

import app as app_module
from enrichment_client import EnrichmentSettings
from extraction_agent import ExtractionAgent


@pytest.fixture
def client(monkeypatch):
    agent = ExtractionAgent(settings=EnrichmentSettings(enabled=False))
    monkeypatch.setattr(app_module, "get_agent", lambda: agent)
    return TestClient(app_module.app)


def test_health(monkeypatch, client):
    monkeypatch.setattr(app_module, "check_tesseract_installation", lambda: (False, "not installed"))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["tesseract_available"] is False


def test_ai_connection_endpoint(monkeypatch, client):
    class FakeClient:
        def __init__(self, settings):
            self.settings = settings

        def test_connection(self):
            return True, "Connected"

    monkeypatch.setattr(app_module, "EnrichmentClient", FakeClient)

    response = client.get("/api/ai/test-connection")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["message"] == "Connected"


def test_extract_text(client, contract_text):
    response = client.post("/extract/text", json={"text": contract_text, "company_hint": "Globex"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["fields"]["contractNumber"] == "PO1234567"
    assert body["fields"]["clientName"] == "Globex"
    assert body["pages"] == []


def test_extract_text_with_pages(client, contract_text):
    response = client.post("/extract/text", json={"text": contract_text, "pages": [contract_text]})

    assert response.status_code == 200
    assert response.json()["pages"][0]["pageNumber"] == 1


def test_extract_text_rejects_empty(client):
    assert client.post("/extract/text", json={"text": "   "}).status_code == 400


def test_extract_file(client, contract_text):
    response = client.post(
        "/extract/file",
        files={"file": ("contract.txt", contract_text.encode("utf-8"), "text/plain")},
        data={"company": "Globex"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["fields"]["contractNumber"] == "PO1234567"
    assert body["fields"]["clientName"] == "Globex"
    assert body["metadata"]["file_name"] == "contract.txt"


def test_extract_file_rejects_unsupported_type(client):
    response = client.post("/extract/file", files={"file": ("tool.exe", b"MZ", "application/octet-stream")})
    assert response.status_code == 400


def test_extract_file_without_text(client):
    response = client.post("/extract/file", files={"file": ("blank.txt", b"   ", "text/plain")})
    assert response.status_code == 422
