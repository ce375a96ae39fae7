"""
Test the user profile and per-user settings.
"""
from fastapi import status

from job_tracker_app.backend import schemas
from job_tracker_app.backend.models.db import crud
from job_tracker_app.backend.models.db.preferences import UserSettings


class TestProfileApi:
    """Fetch and partially update the signed-in user's profile."""

    def test_empty_profile_on_first_access(self, test_client, auth_headers, test_user_data):
        response = test_client.get("/api/profile/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["email"] == test_user_data["email"]
        assert data["full_name"] is None
        assert data["university"] is None
        assert data["major"] is None

    def test_partial_update(self, test_client, auth_headers):
        test_client.put(
            "/api/profile/",
            json={"full_name": "Kim Minji", "university": "Seoul National University"},
            headers=auth_headers,
        )

        response = test_client.put("/api/profile/", json={"major": "Computer Science"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["full_name"] == "Kim Minji"
        assert data["university"] == "Seoul National University"
        assert data["major"] == "Computer Science"
        assert test_client.get("/api/profile/", headers=auth_headers).json() == data

    def test_blank_value_clears_field(self, test_client, auth_headers):
        test_client.put("/api/profile/", json={"major": "Physics"}, headers=auth_headers)
        response = test_client.put("/api/profile/", json={"major": ""}, headers=auth_headers)
        assert response.json()["major"] is None

    def test_rejects_markup_and_long_values(self, test_client, auth_headers):
        response = test_client.put(
            "/api/profile/", json={"full_name": "<script>alert(1)</script>Kim"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Full name" in response.json()["detail"]

        response = test_client.put("/api/profile/", json={"university": "u" * 101}, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        assert test_client.get("/api/profile/", headers=auth_headers).json()["full_name"] is None

    def test_profiles_are_per_user(self, test_client, auth_headers, other_auth_headers):
        test_client.put("/api/profile/", json={"full_name": "Kim Minji"}, headers=auth_headers)
        assert test_client.get("/api/profile/", headers=other_auth_headers).json()["full_name"] is None

    def test_requires_authentication(self, test_client):
        response = test_client.get("/api/profile/")
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


class TestSettingsApi:
    """Notification switches and display preferences."""

    def test_defaults(self, test_client, auth_headers):
        response = test_client.get("/api/settings/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "notifications": {
                "emailNotifications": True,
                "interviewReminders": True,
                "applicationDeadlines": True,
                "soundEnabled": True,
            },
            "preferences": {
                "language": "ko",
                "theme": "system",
                "autoSave": True,
                "compactView": False,
            },
        }

    def test_update_notifications_keeps_preferences(self, test_client, auth_headers):
        test_client.put(
            "/api/settings/preferences",
            json={"language": "en", "theme": "dark", "autoSave": False, "compactView": True},
            headers=auth_headers,
        )

        response = test_client.put(
            "/api/settings/notifications",
            json={
                "emailNotifications": False,
                "interviewReminders": True,
                "applicationDeadlines": False,
                "soundEnabled": False,
            },
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = test_client.get("/api/settings/", headers=auth_headers).json()
        assert data["notifications"]["emailNotifications"] is False
        assert data["notifications"]["interviewReminders"] is True
        assert data["preferences"] == {"language": "en", "theme": "dark", "autoSave": False, "compactView": True}

    def test_update_preferences_keeps_notifications(self, test_client, auth_headers):
        test_client.put(
            "/api/settings/notifications",
            json={
                "emailNotifications": False,
                "interviewReminders": False,
                "applicationDeadlines": False,
                "soundEnabled": False,
            },
            headers=auth_headers,
        )
        test_client.put("/api/settings/preferences", json={"theme": "light"}, headers=auth_headers)

        data = test_client.get("/api/settings/", headers=auth_headers).json()
        assert data["preferences"]["theme"] == "light"
        assert not any(data["notifications"].values())

    def test_unknown_theme_is_rejected(self, test_client, auth_headers):
        response = test_client.put("/api/settings/preferences", json={"theme": "neon"}, headers=auth_headers)
        assert response.status_code == 422

    def test_settings_are_per_user(self, test_client, auth_headers, other_auth_headers):
        test_client.put("/api/settings/preferences", json={"compactView": True}, headers=auth_headers)
        data = test_client.get("/api/settings/", headers=other_auth_headers).json()
        assert data["preferences"]["compactView"] is False


class TestSettingsStorage:

    def test_first_load_creates_row(self, test_db_session, test_user):
        assert test_db_session.get(UserSettings, test_user.id) is None

        loaded = crud.get_user_settings(test_db_session, test_user.id)

        assert loaded == schemas.UserSettings()
        row = test_db_session.get(UserSettings, test_user.id)
        assert row.notifications["soundEnabled"] is True
        assert row.preferences["theme"] == "system"

    def test_partial_stored_settings_are_filled_with_defaults(self, test_db_session, test_user):
        test_db_session.add(UserSettings(
            user_id=test_user.id,
            notifications={"soundEnabled": False, "interviewReminders": None},
            preferences={"language": "en", "obsoleteKey": 1},
        ))
        test_db_session.commit()

        loaded = crud.get_user_settings(test_db_session, test_user.id)

        assert loaded.notifications.sound_enabled is False
        assert loaded.notifications.interview_reminders is True
        assert loaded.notifications.email_notifications is True
        assert loaded.preferences.language == "en"
        assert loaded.preferences.theme == schemas.Theme.SYSTEM
