import uuid
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from fastapi import HTTPException

from nauricare import models
from nauricare.core.config import settings
from nauricare.services.storage_service import StorageService
from tests.conftest import auth_headers

@pytest.fixture
def storage_root(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_ROOT", str(tmp_path))
    monkeypatch.setattr(settings, "STORAGE_PUBLIC_URL", "http://testserver/storage")
    return tmp_path

class TestOnboarding:
    def test_create_profile_grants_patient_role(self, client, patient_headers, patient_user):
        response = client.post(
            "/api/v1/profiles/patients",
            json={
                "full_name": "Amina Uwase",
                "date_of_birth": "1995-04-12",
                "country": "Rwanda",
                "menstrual_status": "irregular",
                "diagnosed_fibroids": True
            },
            headers=patient_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == patient_user["id"]
        assert data["full_name"] == "Amina Uwase"
        assert data["diagnosed_fibroids"] is True
        assert data["language"] == "en"

        roles = client.get("/api/v1/profiles/me/roles", headers=patient_headers).json()
        assert roles["roles"] == ["patient"]

    def test_duplicate_profile_conflict(self, client, patient_headers, patient_profile):
        response = client.post(
            "/api/v1/profiles/patients",
            json={"full_name": "Amina Again"},
            headers=patient_headers
        )
        assert response.status_code == 409

    def test_blank_name_rejected(self, client, patient_headers):
        response = client.post("/api/v1/profiles/patients", json={"full_name": ""}, headers=patient_headers)
        assert response.status_code == 422

    def test_missing_profile_sends_to_onboarding(self, client, patient_headers):
        response = client.get("/api/v1/profiles/patients/me", headers=patient_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Please complete your profile first."

    def test_update_profile(self, client, patient_headers, patient_profile):
        response = client.patch(
            "/api/v1/profiles/patients/me",
            json={"language": "rw", "diagnosed_pcos": False},
            headers=patient_headers
        )

        assert response.status_code == 200
        assert response.json()["language"] == "rw"
        assert response.json()["diagnosed_pcos"] is False
        assert response.json()["country"] == "Rwanda"

class TestAvatarUpload:
    def test_upload_sets_avatar_url(self, client, patient_headers, patient_user, patient_profile, storage_root):
        response = client.post(
            "/api/v1/profiles/patients/me/avatar",
            files={"file": ("me.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=patient_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["path"].startswith(f"{patient_user['id']}/")
        assert data["path"].endswith(".png")
        assert data["avatar_url"] == f"http://testserver/storage/avatars/{data['path']}"
        assert Path(storage_root, "avatars", data["path"]).read_bytes() == b"\x89PNG\r\n\x1a\nfake"

        profile = client.get("/api/v1/profiles/patients/me", headers=patient_headers).json()
        assert profile["avatar_url"] == data["avatar_url"]

    def test_avatar_url_is_served(self, client, patient_headers, patient_profile, storage_root):
        avatar_url = client.post(
            "/api/v1/profiles/patients/me/avatar",
            files={"file": ("me.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=patient_headers
        ).json()["avatar_url"]

        response = client.get(avatar_url)

        assert response.status_code == 200
        assert response.content == b"\x89PNG\r\n\x1a\nfake"
        assert response.headers["content-type"] == "image/png"

    def test_extension_follows_content_type(self, client, patient_headers, patient_profile, storage_root):
        response = client.post(
            "/api/v1/profiles/patients/me/avatar",
            files={"file": ("x.html", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=patient_headers
        )

        assert response.status_code == 200
        assert response.json()["path"].endswith(".png")
        assert client.get(response.json()["avatar_url"]).headers["content-type"] == "image/png"

    def test_missing_object_not_found(self, client, storage_root):
        assert client.get("/storage/avatars/nobody/123.png").status_code == 404
        assert client.get("/storage/documents/nobody/123.png").status_code == 404

    def test_paths_outside_bucket_rejected(self, storage_root):
        (storage_root / "secret.txt").write_text("private")
        with pytest.raises(HTTPException) as exc_info:
            StorageService().object_path("avatars", "../secret.txt")
        assert exc_info.value.status_code == 404

    def test_rejects_non_image(self, client, patient_headers, patient_profile, storage_root):
        response = client.post(
            "/api/v1/profiles/patients/me/avatar",
            files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
            headers=patient_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid file type. Please upload a JPEG, PNG, WebP, or GIF image."

    def test_rejects_large_file(self, client, patient_headers, patient_profile, storage_root, monkeypatch):
        monkeypatch.setattr(settings, "AVATAR_MAX_BYTES", 10)
        response = client.post(
            "/api/v1/profiles/patients/me/avatar",
            files={"file": ("me.jpg", b"x" * 11, "image/jpeg")},
            headers=patient_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "File too large. Please upload an image smaller than 5MB."

class TestSpecialists:
    def test_list_newest_first(self, client, db_session):
        now = datetime.utcnow()
        for offset, name in [(2, "Dr. Older"), (1, "Dr. Newer")]:
            db_session.add(models.ClinicianProfile(
                user_id=str(uuid.uuid4()),
                full_name=name,
                specialty="Endocrinology",
                created_at=now - timedelta(days=offset)
            ))
        db_session.commit()

        response = client.get("/api/v1/specialists")

        assert response.status_code == 200
        assert [c["full_name"] for c in response.json()] == ["Dr. Newer", "Dr. Older"]

    def test_get_specialist(self, client, clinician):
        response = client.get(f"/api/v1/specialists/{clinician.id}")
        assert response.status_code == 200
        assert response.json()["languages"] == ["English", "Kinyarwanda"]
        assert "contact_email" not in response.json()

    def test_unknown_specialist(self, client):
        response = client.get(f"/api/v1/specialists/{uuid.uuid4()}")
        assert response.status_code == 404

class TestAppInfo:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "x-process-time" in response.headers

    def test_unknown_route(self, client):
        response = client.get("/api/v1/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"
