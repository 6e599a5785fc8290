class TestUserRoutes:
    """사용자 라우터 테스트"""

    def test_create_account(self, client, auth_headers):
        # When
        response = client.post(
            "/api/v1/users",
            json={"username": "alice_k", "university": "KAIST"},
            headers=auth_headers("alice"),
        )

        # Then
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "alice"
        assert data["email"] == "alice@example.com"
        assert data["total_coins"] == 0

    def test_create_account_twice(self, client, auth_headers):
        client.post("/api/v1/users", json={}, headers=auth_headers("alice"))

        response = client.post("/api/v1/users", json={}, headers=auth_headers("alice"))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT_001"

    def test_requires_token(self, client):
        response = client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"

    def test_invalid_token(self, client):
        response = client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer invalid"}
        )

        assert response.status_code == 401

    def test_me_without_account(self, client, auth_headers):
        response = client.get("/api/v1/users/me", headers=auth_headers("nobody"))

        assert response.status_code == 404

    def test_get_and_update_me(self, client, auth_headers):
        headers = auth_headers("alice")
        client.post("/api/v1/users", json={}, headers=headers)

        response = client.patch(
            "/api/v1/users/me", json={"major": "Physics"}, headers=headers
        )
        me = client.get("/api/v1/users/me", headers=headers)

        assert response.status_code == 200
        assert me.json()["major"] == "Physics"

    def test_update_rejects_blank_name(self, client, auth_headers):
        headers = auth_headers("alice")
        client.post("/api/v1/users", json={}, headers=headers)

        response = client.patch("/api/v1/users/me", json={"full_name": "  "}, headers=headers)

        assert response.status_code == 422

    def test_public_profile(self, client, auth_headers):
        client.post("/api/v1/users", json={"university": "SNU"}, headers=auth_headers("bob"))
        headers = auth_headers("alice")
        client.post("/api/v1/users", json={}, headers=headers)

        found = client.get("/api/v1/users/bob", headers=headers)
        missing = client.get("/api/v1/users/ghost", headers=headers)

        assert found.status_code == 200
        assert found.json()["university"] == "SNU"
        assert "email" not in found.json()
        assert missing.status_code == 404
