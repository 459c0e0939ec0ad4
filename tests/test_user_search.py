"""
Unit tests for user search and lenient paging parameters
"""
import pytest
from fastapi import status

from salonhub.services.user_search_service import search_users
from salonhub.utils.pagination import MAX_OFFSET, parse_float, parse_int, parse_page


@pytest.mark.unit
class TestSearchUsersService:
    """Tests for user_search_service.search_users"""

    def test_empty_text_returns_everyone_but_caller(self, db, test_user, other_users):
        """Test that an empty search lists all other users, newest first"""
        users = search_users(db, test_user.id, "")

        assert [u.username for u in users] == ["dave", "carol", "bob"]
        assert test_user.id not in [u.id for u in users]

    def test_followed_users_come_first(self, db, test_user, other_users, make_follow):
        """Test that the caller's followees lead, then creation time descending"""
        make_follow(test_user, other_users["bob"])

        users = search_users(db, test_user.id)
        assert [u.username for u in users] == ["bob", "dave", "carol"]

    def test_being_followed_does_not_promote(self, db, test_user, other_users, make_follow):
        """Test that only the caller's outgoing edges affect ranking"""
        make_follow(other_users["bob"], test_user)

        users = search_users(db, test_user.id)
        assert [u.username for u in users] == ["dave", "carol", "bob"]

    def test_matches_name_or_username_case_insensitive(self, db, test_user, other_users):
        """Test substring matching across both name and username"""
        users = search_users(db, test_user.id, "BOB")
        assert [u.username for u in users] == ["carol", "bob"]

        users = search_users(db, test_user.id, "gree")
        assert [u.username for u in users] == ["dave"]

    def test_caller_excluded_even_when_matching(self, db, test_user, other_users):
        """Test that the caller never appears in their own results"""
        users = search_users(db, test_user.id, "alice")
        assert users == []

    def test_limit(self, db, test_user, other_users):
        """Test that at most ``limit`` users are returned"""
        users = search_users(db, test_user.id, None, limit=2)
        assert [u.username for u in users] == ["dave", "carol"]

    def test_wildcards_are_literal(self, db, test_user, other_users, make_user):
        """Test that % and _ do not act as LIKE wildcards"""
        make_user("under_score", name="Under Score", created_offset_minutes=10)

        assert search_users(db, test_user.id, "%") == []
        assert [u.username for u in search_users(db, test_user.id, "_")] == ["under_score"]

    def test_accented_names_fold_case(self, db, test_user, other_users, make_user):
        """Test that case folding applies to non-ASCII letters"""
        make_user("elise", name="Élise Dupont", created_offset_minutes=10)
        make_user("jorg", name="Jörg Öhlin", created_offset_minutes=11)

        assert [u.name for u in search_users(db, test_user.id, "élise")] == ["Élise Dupont"]
        assert [u.name for u in search_users(db, test_user.id, "ÉLISE")] == ["Élise Dupont"]
        assert [u.name for u in search_users(db, test_user.id, "öhlin")] == ["Jörg Öhlin"]


@pytest.mark.unit
class TestSearchUsersEndpoint:
    """Tests for GET /users/search"""

    def test_search_response_shape(self, client, test_user, other_users, auth_headers):
        """Test the wrapped response with public user fields only"""
        response = client.get("/api/v1/users/search", params={"text": "dave"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert list(data.keys()) == ["users"]
        assert len(data["users"]) == 1
        assert data["users"][0]["name"] == "Dave Green"
        assert "email" not in data["users"][0]

    def test_search_without_text(self, client, test_user, other_users, auth_headers):
        """Test that omitting text lists all other users"""
        response = client.get("/api/v1/users/search", headers=auth_headers)
        assert len(response.json()["users"]) == 3

    def test_search_bad_limit_uses_default(self, client, test_user, other_users, auth_headers):
        """Test that a non-numeric limit falls back to the default page size"""
        response = client.get("/api/v1/users/search", params={"limit": "lots"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["users"]) == 3

    def test_search_limit(self, client, test_user, other_users, auth_headers):
        """Test an explicit limit"""
        response = client.get("/api/v1/users/search", params={"limit": "1"}, headers=auth_headers)
        assert [u["username"] for u in response.json()["users"]] == ["dave"]

    def test_search_requires_auth(self, client):
        """Test that anonymous search is rejected"""
        response = client.get("/api/v1/users/search")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.unit
class TestPagingParameters:
    """Tests for the lenient query parameter parsers"""

    @pytest.mark.parametrize("limit,offset,expected", [
        (None, None, (10, 0)),
        ("5", "2", (5, 2)),
        ("abc", "xyz", (10, 0)),
        ("0", "-1", (10, 0)),
        ("-3", "4", (10, 4)),
        ("500", "0", (100, 0)),
        ("3", "99999999999999999999", (3, MAX_OFFSET)),
        (" 7 ", None, (7, 0)),
    ])
    def test_parse_page(self, limit, offset, expected):
        """Test defaults, clamping and fallbacks for limit/offset"""
        assert parse_page(limit, offset, 10, 100) == expected

    def test_parse_int_rejects_partial_numbers(self):
        """Test that trailing garbage is not parsed as a prefix"""
        assert parse_int("12abc", 10) == 10
        assert parse_int("12", 10) == 12

    def test_parse_float(self):
        """Test finite float parsing"""
        assert parse_float("12.5") == 12.5
        assert parse_float(None) is None
        assert parse_float("north") is None
        assert parse_float("nan") is None
        assert parse_float("inf") is None
