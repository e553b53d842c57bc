import pytest
import json

from conftest import bearer, login, patch_json, post_json


@pytest.mark.auth
class TestRegister:
    """Test suite for account registration."""

    def test_register_success(self, client, user_data):
        response = post_json(client, "/api/register", user_data)

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data["username"] == "newcustomer"
        assert data["role"] == "customer"
        assert data["loyaltyPoints"] == 0
        assert data["membershipType"] == "Bronze"
        assert "password" not in data
        assert "passwordHash" not in data

    def test_register_logs_user_in(self, client, user_data):
        post_json(client, "/api/register", user_data)

        response = client.get("/api/user")
        assert response.status_code == 200
        assert json.loads(response.data)["username"] == "newcustomer"

    def test_register_duplicate_username(self, client, user_data):
        user_data["username"] = "customer"
        response = post_json(client, "/api/register", user_data)

        assert response.status_code == 400
        assert json.loads(response.data)["message"] == "اسم المستخدم موجود بالفعل"

    def test_register_duplicate_email(self, client, user_data):
        user_data["email"] = "customer@example.com"
        response = post_json(client, "/api/register", user_data)

        assert response.status_code == 400

    def test_register_missing_password(self, client, user_data):
        user_data.pop("password")
        response = post_json(client, "/api/register", user_data)

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data["message"] == "بيانات التسجيل غير صالحة"
        assert "error" in data

    def test_register_cannot_claim_admin(self, client, user_data):
        user_data["role"] = "admin"
        response = post_json(client, "/api/register", user_data)

        assert response.status_code == 400

    def test_register_salon_owner(self, client, user_data):
        user_data["role"] = "salon_owner"
        response = post_json(client, "/api/register", user_data)

        assert response.status_code == 201
        assert json.loads(response.data)["role"] == "salon_owner"


@pytest.mark.auth
class TestLogin:
    def test_login_success(self, client):
        data = login(client, "customer")

        assert data["user"]["username"] == "customer"
        assert data["user"]["lastLoginAt"] is not None
        assert data["token"]

    def test_login_wrong_password(self, client):
        response = post_json(
            client, "/api/login", {"username": "customer", "password": "wrong"}
        )

        assert response.status_code == 401
        assert json.loads(response.data)["message"] == "اسم المستخدم أو كلمة المرور غير صحيحة"

    def test_login_unknown_user(self, client):
        response = post_json(client, "/api/login", {"username": "ghost", "password": "x"})

        assert response.status_code == 401

    def test_login_english_message(self, client):
        response = post_json(
            client,
            "/api/login",
            {"username": "customer", "password": "wrong"},
            headers={"Accept-Language": "en-US,en;q=0.9"},
        )

        assert response.status_code == 401
        assert json.loads(response.data)["message"] == "Invalid username or password"

    def test_logout_clears_session(self, customer_client):
        assert customer_client.get("/api/user").status_code == 200

        response = customer_client.post("/api/logout")
        assert response.status_code == 200
        assert customer_client.get("/api/user").status_code == 401


@pytest.mark.auth
class TestCurrentUser:
    def test_requires_login(self, client):
        response = client.get("/api/user")

        assert response.status_code == 401
        assert json.loads(response.data)["message"] == "يجب تسجيل الدخول"

    def test_bearer_token(self, client):
        headers = bearer(client, "malecustomer")

        response = client.get("/api/user", headers=headers)
        assert response.status_code == 200
        assert json.loads(response.data)["username"] == "malecustomer"

    def test_invalid_bearer_token(self, client):
        response = client.get("/api/user", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_update_profile(self, customer_client):
        response = patch_json(
            customer_client,
            "/api/user",
            {"name": "سارة أحمد", "language": "en", "privacySettings": {"showPhone": False}},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["name"] == "سارة أحمد"
        assert data["language"] == "en"
        assert data["privacySettings"] == {"showPhone": False}

    def test_clear_optional_field_with_null(self, customer_client):
        patch_json(customer_client, "/api/user", {"gender": "female"})

        response = patch_json(customer_client, "/api/user", {"gender": None})

        assert response.status_code == 200
        assert json.loads(response.data)["gender"] is None
        assert json.loads(customer_client.get("/api/user").data)["gender"] is None

    def test_required_field_cannot_be_cleared(self, customer_client):
        response = patch_json(customer_client, "/api/user", {"email": None})

        assert response.status_code == 400
        assert "email" in json.loads(response.data)["error"]
        assert json.loads(customer_client.get("/api/user").data)["email"]

    def test_update_profile_email_taken(self, customer_client):
        response = patch_json(customer_client, "/api/user", {"email": "admin@saloon.com"})

        assert response.status_code == 400

    def test_update_profile_invalid_language(self, customer_client):
        response = patch_json(customer_client, "/api/user", {"language": "fr"})

        assert response.status_code == 400
