import pytest


@pytest.fixture
def signup(client, auth_headers):
    def _signup(user_id: str) -> dict:
        headers = auth_headers(user_id)
        response = client.post("/api/v1/users", json={}, headers=headers)
        assert response.status_code == 201
        return headers

    return _signup


def _upload(client, headers, **overrides):
    body = {
        "title": "Data Structures Cheatsheet",
        "file_path": "resources/ds.pdf",
        "file_type": "pdf",
        "file_size": 4096,
        "coin_price": 5,
    }
    body.update(overrides)
    return client.post("/api/v1/resources", json=body, headers=headers)


class TestResourceRoutes:
    """자료 업로드/조회/다운로드 라우터 테스트"""

    def test_upload_awards_coins(self, client, signup):
        # Given
        headers = signup("alice")

        # When
        response = _upload(client, headers)

        # Then
        assert response.status_code == 201
        data = response.json()
        assert data["coins_awarded"] == 10
        assert data["balance_after"] == 10
        assert data["new_achievements"] == ["first_upload"]
        assert data["resource"]["owner_id"] == "alice"

    def test_upload_rejects_negative_price(self, client, signup):
        headers = signup("alice")

        response = _upload(client, headers, coin_price=-1)

        assert response.status_code == 422

    def test_upload_rejects_unknown_file_type(self, client, signup):
        headers = signup("alice")

        response = _upload(client, headers, file_type="exe")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"

    def test_list_and_get(self, client, signup):
        headers = signup("alice")
        created = _upload(client, headers, title="Graph Theory").json()["resource"]
        _upload(client, headers, title="Compiler Notes", subject="cs")

        listing = client.get("/api/v1/resources", params={"search": "graph"}, headers=headers)
        detail = client.get(f"/api/v1/resources/{created['id']}", headers=headers)
        missing = client.get("/api/v1/resources/9999", headers=headers)

        assert listing.status_code == 200
        assert listing.json()["total_count"] == 1
        assert listing.json()["data"][0]["title"] == "Graph Theory"
        assert detail.json()["id"] == created["id"]
        assert missing.status_code == 404

    def test_download_flow(self, client, signup):
        # Given - alice 가 자료 두 개를 올려 20 코인 보유, bob 이 5 코인짜리 자료 업로드
        alice = signup("alice")
        bob = signup("bob")
        _upload(client, alice, title="A1")
        _upload(client, alice, title="A2")
        resource_id = _upload(client, bob, coin_price=5).json()["resource"]["id"]

        # When
        response = client.post(f"/api/v1/resources/{resource_id}/download", headers=alice)
        again = client.post(f"/api/v1/resources/{resource_id}/download", headers=alice)
        balance = client.get("/api/v1/coins/balance", headers=alice)
        downloads = client.get("/api/v1/downloads/me", headers=alice)

        # Then
        assert response.status_code == 200
        assert response.json()["balance_after"] == 15
        assert response.json()["file_path"] == "resources/ds.pdf"
        assert again.status_code == 409
        assert balance.json()["total_coins"] == 15
        assert [d["resource_id"] for d in downloads.json()] == [resource_id]

    def test_download_insufficient_balance(self, client, signup):
        bob = signup("bob")
        alice = signup("alice")
        resource_id = _upload(client, bob, coin_price=50).json()["resource"]["id"]

        response = client.post(f"/api/v1/resources/{resource_id}/download", headers=alice)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BALANCE_001"
        assert client.get("/api/v1/coins/balance", headers=alice).json()["total_coins"] == 0

    def test_download_own_resource(self, client, signup):
        alice = signup("alice")
        resource_id = _upload(client, alice).json()["resource"]["id"]

        response = client.post(f"/api/v1/resources/{resource_id}/download", headers=alice)

        assert response.status_code == 422
