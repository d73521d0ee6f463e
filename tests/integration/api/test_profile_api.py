"""Integration tests for the Profile API."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def signed_in_client(
    app_client: AsyncClient, auth_headers: dict[str, str]
) -> AsyncClient:
    response = await app_client.post("/api/v1/session", headers=auth_headers)
    assert response.status_code == 200
    app_client.headers.update(auth_headers)
    return app_client


class TestProfileAPI:
    @pytest.mark.asyncio
    async def test_get_profile_before_setup_is_404(self, signed_in_client: AsyncClient) -> None:
        response = await signed_in_client.get("/api/v1/profile")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PROFILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_submit_profile_opens_dashboard(self, signed_in_client: AsyncClient) -> None:
        response = await signed_in_client.post(
            "/api/v1/profile",
            json={"display_name": "jane", "birthdate": "1990-04-12"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "dashboard"
        assert data["sections"]["dashboard"] is True
        assert data["user"] == {"display_name": "jane", "email": "test@example.com", "avatar": "J"}
        assert data["placeholder"] == "No activities logged today. Start by adding your first activity!"
        assert data["stats"] == {"activities_today": 0, "total_activities": 0, "active_days": 0}

    @pytest.mark.asyncio
    async def test_get_profile_after_setup(self, signed_in_client: AsyncClient) -> None:
        await signed_in_client.post(
            "/api/v1/profile",
            json={"display_name": "Jane", "birthdate": "1990-04-12"},
        )

        response = await signed_in_client.get("/api/v1/profile")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["display_name"] == "Jane"
        assert data["birthdate"] == "1990-04-12"
        assert data["email"] == "test@example.com"
        assert data["profile_complete"] is True
        assert isinstance(data["joined_date"], int)

    @pytest.mark.asyncio
    async def test_missing_field_shows_setup_error(self, signed_in_client: AsyncClient) -> None:
        response = await signed_in_client.post(
            "/api/v1/profile",
            json={"display_name": "Jane"},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["state"] == "profile_incomplete"
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["banners"]["setup-error"]["message"] == "Please fill in all fields."

        profile = await signed_in_client.get("/api/v1/profile")
        assert profile.status_code == 404

    @pytest.mark.asyncio
    async def test_non_text_field_shows_setup_error(self, signed_in_client: AsyncClient) -> None:
        response = await signed_in_client.post(
            "/api/v1/profile",
            json={"display_name": ["Jane"], "birthdate": "1990-04-12"},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["state"] == "profile_incomplete"
        assert data["banners"]["setup-error"]["message"] == "Please fill in all fields."

    @pytest.mark.asyncio
    async def test_second_submission_conflicts(self, signed_in_client: AsyncClient) -> None:
        await signed_in_client.post(
            "/api/v1/profile",
            json={"display_name": "Jane", "birthdate": "1990-04-12"},
        )

        response = await signed_in_client.post(
            "/api/v1/profile",
            json={"display_name": "Someone Else", "birthdate": "2000-01-01"},
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "PROFILE_ALREADY_COMPLETE"
        profile = (await signed_in_client.get("/api/v1/profile")).json()["data"]
        assert profile["display_name"] == "Jane"

    @pytest.mark.asyncio
    async def test_profile_requires_sign_in(
        self, app_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await app_client.post(
            "/api/v1/profile",
            json={"display_name": "Jane", "birthdate": "1990-04-12"},
            headers=auth_headers,
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "NOT_SIGNED_IN"
