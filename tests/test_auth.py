"""
Unit tests for authentication and profile endpoints
"""
import pytest
from datetime import timedelta
from fastapi import status

from salonhub.api.v1.endpoints import auth
from salonhub.core.config import settings
from salonhub.core.security import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenService
from salonhub.models.models import User


@pytest.mark.unit
class TestAuthRegister:
    """Tests for the registration endpoint"""

    def test_register_success(self, client, db):
        """Test registering a new account returns tokens and the user"""
        response = client.post(
            "/api/v1/auth/register-email",
            json={
                "email": "new@test.com",
                "password": "secret123",
                "username": "newbie",
                "name": "New Person"
            }
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "newbie"
        assert "hashed_password" not in data["user"]

        user = db.query(User).filter(User.email == "new@test.com").first()
        assert user is not None
        assert user.hashed_password != "secret123"

    def test_register_duplicate_email(self, client, test_user):
        """Test that an email can only be registered once"""
        response = client.post(
            "/api/v1/auth/register-email",
            json={"email": "alice@test.com", "password": "secret123", "username": "alice2"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email already registered"

    def test_register_duplicate_username(self, client, test_user):
        """Test that usernames are unique"""
        response = client.post(
            "/api/v1/auth/register-email",
            json={"email": "other@test.com", "password": "secret123", "username": "alice"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Username already taken"

    def test_register_concurrent_duplicate(self, client, db, test_user, monkeypatch):
        """Test that losing a uniqueness race to another registration is a bad request"""
        real_check = auth.registration_conflict
        calls = []

        def check_after_other_request_committed(session, user_data):
            calls.append(user_data.email)
            if len(calls) == 1:
                return None
            return real_check(session, user_data)

        monkeypatch.setattr(auth, "registration_conflict", check_after_other_request_committed)

        response = client.post(
            "/api/v1/auth/register-email",
            json={"email": "alice@test.com", "password": "secret123", "username": "alice2"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email already registered"
        assert len(calls) == 2
        assert db.query(User).filter(User.email == "alice@test.com").count() == 1

    def test_register_invalid_body(self, client):
        """Test that schema violations are reported as bad requests"""
        response = client.post(
            "/api/v1/auth/register-email",
            json={"email": "not-an-email", "password": "x", "username": "a"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "bad_request"


@pytest.mark.unit
class TestAuthLogin:
    """Tests for the login endpoint"""

    def test_login_success(self, client, test_user):
        """Test successful login with valid credentials"""
        response = client.post(
            "/api/v1/auth/login-email",
            json={"email": "alice@test.com", "password": "alicepass123"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["user"]["email"] == "alice@test.com"

    def test_login_invalid_password(self, client, test_user):
        """Test login with incorrect password"""
        response = client.post(
            "/api/v1/auth/login-email",
            json={"email": "alice@test.com", "password": "wrongpassword"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Incorrect email or password" in response.json()["detail"]

    def test_login_unknown_email(self, client, test_user):
        """Test login with non-existent email"""
        response = client.post(
            "/api/v1/auth/login-email",
            json={"email": "nobody@test.com", "password": "alicepass123"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_user_without_password(self, client, other_users):
        """Test that accounts without a password cannot log in by email"""
        response = client.post(
            "/api/v1/auth/login-email",
            json={"email": "bob@test.com", "password": "anything"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_missing_email(self, client):
        """Test login with missing email field"""
        response = client.post("/api/v1/auth/login-email", json={"password": "alicepass123"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.unit
class TestRefreshToken:
    """Tests for the refresh endpoint"""

    def test_refresh_success(self, client, test_user):
        """Test exchanging a refresh token for a new pair"""
        login = client.post(
            "/api/v1/auth/login-email",
            json={"email": "alice@test.com", "password": "alicepass123"}
        ).json()

        response = client.post("/api/v1/auth/refresh-token", json={"refresh_token": login["refresh_token"]})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["id"] == test_user.id

    def test_access_token_is_not_a_refresh_token(self, client, user_token):
        """Test that an access token is rejected by the refresh endpoint"""
        response = client.post("/api/v1/auth/refresh-token", json={"refresh_token": user_token})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token_is_not_an_access_token(self, client, test_user):
        """Test that a refresh token cannot authorize API calls"""
        refresh = TokenService(settings).create_refresh_token(test_user.id)
        response = client.get("/api/v1/users/profile", headers={"Authorization": f"Bearer {refresh}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self, test_user):
        """Test that expired tokens do not decode"""
        service = TokenService(settings)
        token = service.create_access_token(test_user.id, expires_delta=timedelta(minutes=-1))
        assert service.decode(token, ACCESS_TOKEN_TYPE) is None

    def test_decode_round_trip(self, test_user):
        """Test that each token type decodes to the user id with its own key"""
        service = TokenService(settings)
        assert service.decode(service.create_access_token(test_user.id), ACCESS_TOKEN_TYPE) == test_user.id
        assert service.decode(service.create_refresh_token(test_user.id), REFRESH_TOKEN_TYPE) == test_user.id


@pytest.mark.unit
class TestCheckUsername:
    """Tests for username availability"""

    def test_taken(self, client, test_user):
        response = client.post("/api/v1/auth/check-username", json={"username": "alice"})
        assert response.json() == {"username": "alice", "available": False}

    def test_available(self, client, test_user):
        response = client.post("/api/v1/auth/check-username", json={"username": "zed"})
        assert response.json() == {"username": "zed", "available": True}


@pytest.mark.unit
class TestProfile:
    """Tests for the caller's own profile and public profiles"""

    def test_profile_counts(self, client, test_user, other_users, make_follow, auth_headers):
        """Test that the profile reports follower and following counts"""
        make_follow(test_user, other_users["bob"])
        make_follow(other_users["bob"], test_user)
        make_follow(other_users["carol"], test_user)

        response = client.get("/api/v1/users/profile", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] == "alice"
        assert data["followers_count"] == 2
        assert data["following_count"] == 1

    def test_profile_requires_auth(self, client):
        response = client.get("/api/v1/users/profile")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_profile(self, client, test_user, auth_headers):
        """Test updating profile fields"""
        response = client.patch(
            "/api/v1/users/profile",
            json={"bio": "Loves fades", "address_type": "Home"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["bio"] == "Loves fades"
        assert response.json()["address_type"] == "Home"

    def test_update_profile_empty(self, client, test_user, auth_headers):
        """Test that an empty update is rejected"""
        response = client.patch("/api/v1/users/profile", json={}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "No update fields provided"

    def test_update_profile_email_taken(self, client, test_user, other_users, auth_headers):
        """Test that another user's email cannot be claimed"""
        response = client.patch("/api/v1/users/profile", json={"email": "bob@test.com"}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email already exists"

    def test_view_by_handle(self, client, test_user, other_users, make_follow, auth_headers):
        """Test the public profile includes whether the caller follows the user"""
        make_follow(test_user, other_users["carol"])

        response = client.get("/api/v1/users/handle/carol", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "Carol Bobbins"
        assert data["followers_count"] == 1
        assert data["is_following"] is True
        assert "email" not in data

    def test_view_unknown_handle(self, client, test_user, auth_headers):
        response = client.get("/api/v1/users/handle/nobody", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
