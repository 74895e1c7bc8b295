"""
Tests for the one-pager generation endpoint.

Tests POST /api/onepager/generate

Run with: pytest tests/test_onepager_api.py -v
"""

import io
from unittest.mock import Mock
import zipfile

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from backend.src.api.dependencies import get_onepager_service, get_profile_repository
from backend.src.api.onepager_routes import content_disposition
from backend.src.config.settings import get_settings
from backend.src.main import app
from backend.src.services.onepager_service import OnePagerService
from backend.src.services.profile_repository import InMemoryProfileRepository, ProfileRepositoryError
from backend.src.templating.container import TemplateStore
from backend.src.templating.models import EmployeeProfile

client = TestClient(app)

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


@pytest.fixture
def api_client(repository, settings):
    """Test client whose one-pager service uses in-memory profiles and a temp template."""
    service = OnePagerService(repository, TemplateStore(settings.template_path), settings=settings)
    app.dependency_overrides[get_onepager_service] = lambda: service
    yield client
    app.dependency_overrides.clear()


class TestOnePagerAPI:
    """Test suite for one-pager generation."""

    def test_root_health(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_generate_single_internal(self, api_client):
        response = api_client.post("/api/onepager/generate", json={"employee_ids": ["E1"], "mode": "internal"})

        assert response.status_code == 200
        assert response.headers["content-type"] == PPTX_MIME
        assert response.headers["content-disposition"] == 'attachment; filename="OP_E1.pptx"'
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            assert b"Jane Doe" in zf.read("ppt/slides/slide1.xml")

    def test_generate_bundle(self, api_client):
        response = api_client.post("/api/onepager/generate", json={"employeeIds": ["E1", "E2"]})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="OnePagers.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            assert zf.namelist() == ["OP_E1.pptx", "OP_E2.pptx"]

    def test_generate_accepts_legacy_field_names(self, api_client):
        response = api_client.post(
            "/api/onepager/generate", json={"aEmployeeIDs": ["E1"], "sType": "external"}
        )

        assert response.status_code == 200
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            slide = zf.read("ppt/slides/slide1.xml")
        assert b"Capgemini Employee" in slide
        assert b"Jane Doe" not in slide

    def test_unknown_employee_returns_404(self, api_client):
        response = api_client.post("/api/onepager/generate", json={"employee_ids": ["E1", "NOPE"]})

        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["code"] == "employee_not_found"
        assert detail["message"] == "There is no employee with ID: NOPE"

    def test_empty_ids_return_400(self, api_client):
        response = api_client.post("/api/onepager/generate", json={"employee_ids": []})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "invalid_request"

    def test_unknown_mode_is_rejected_by_schema(self, api_client):
        response = api_client.post("/api/onepager/generate", json={"employee_ids": ["E1"], "mode": "partner"})
        assert response.status_code == 422

    def test_profile_source_failure_returns_502(self):
        service = Mock()
        service.generate.side_effect = ProfileRepositoryError("timeout")
        app.dependency_overrides[get_onepager_service] = lambda: service
        try:
            response = client.post("/api/onepager/generate", json={"employee_ids": ["E1"]})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "profile_source_error"

    def test_missing_template_returns_500(self, repository, settings, tmp_path):
        service = OnePagerService(repository, TemplateStore(tmp_path / "gone.pptx"), settings=settings)
        app.dependency_overrides[get_onepager_service] = lambda: service
        try:
            response = client.post("/api/onepager/generate", json={"employee_ids": ["E1"]})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "template_error"


def test_unconfigured_profile_source_returns_503(monkeypatch):
    monkeypatch.setenv("ONEPAGER_PROFILE_SOURCE", "memory")
    monkeypatch.delenv("ONEPAGER_PROFILES_FILE", raising=False)
    get_settings.cache_clear()

    with pytest.raises(HTTPException) as excinfo:
        get_profile_repository(get_settings())
    assert excinfo.value.status_code == 503
    assert excinfo.value.detail["code"] == "service_unavailable"


def test_memory_profile_source_serves_json_profiles(monkeypatch, tmp_path, template_file):
    profiles = tmp_path / "profiles.json"
    profiles.write_text('{"employees": [{"ID": "X1", "fullName": "Ada Lovelace"}]}', encoding="utf-8")
    monkeypatch.setenv("ONEPAGER_PROFILE_SOURCE", "memory")
    monkeypatch.setenv("ONEPAGER_PROFILES_FILE", str(profiles))
    monkeypatch.setenv("ONEPAGER_TEMPLATE_PATH", str(template_file))
    get_settings.cache_clear()

    response = client.post("/api/onepager/generate", json={"employee_ids": ["X1"]})

    assert response.status_code == 200
    with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
        assert b"Ada Lovelace" in zf.read("ppt/slides/slide1.xml")


def test_non_ascii_employee_id_downloads(settings):
    repo = InMemoryProfileRepository([EmployeeProfile(employee_id="李雷", full_name="Li Lei")])
    service = OnePagerService(repo, TemplateStore(settings.template_path), settings=settings)
    app.dependency_overrides[get_onepager_service] = lambda: service
    try:
        response = client.post("/api/onepager/generate", json={"employee_ids": ["李雷"]})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="OP_')
    assert "filename*=UTF-8''OP_%E6%9D%8E%E9%9B%B7.pptx" in disposition


def test_content_disposition_escapes_quotes():
    assert content_disposition("OP_E1.pptx") == 'attachment; filename="OP_E1.pptx"'

    header = content_disposition('OP_a"b.pptx')
    assert 'filename="OP_a_b.pptx"' in header
    assert "filename*=UTF-8''OP_a%22b.pptx" in header
    header.encode("latin-1")


def test_path_like_employee_id_returns_400(api_client):
    response = api_client.post("/api/onepager/generate", json={"employee_ids": ["../../evil"]})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_request"
