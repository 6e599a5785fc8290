from studyapi.models.user import User as UserModel, UserRole


class TestCoinRoutes:
    """코인 라우터 테스트"""

    def _signup(self, client, auth_headers, user_id: str) -> dict:
        headers = auth_headers(user_id)
        client.post("/api/v1/users", json={}, headers=headers)
        return headers

    def test_balance_and_transactions(self, client, auth_headers):
        headers = self._signup(client, auth_headers, "alice")

        balance = client.get("/api/v1/coins/balance", headers=headers)
        ledger = client.get("/api/v1/coins/transactions", headers=headers)

        assert balance.status_code == 200
        assert balance.json() == {
            "user_id": "alice",
            "total_coins": 0,
            "coins_earned": 0,
            "coins_spent": 0,
        }
        assert ledger.json()["entries"] == []
        assert ledger.json()["has_next"] is False

    def test_adjust_with_service_key(self, client, auth_headers, settings):
        headers = self._signup(client, auth_headers, "alice")

        response = client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "alice", "amount": 25, "reason": "event prize"},
            headers={"X-Service-Key": settings.SERVICE_ROLE_KEY},
        )
        ledger = client.get("/api/v1/coins/transactions", params={"kind": "bonus"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["balance_after"] == 25
        assert response.json()["transaction"]["kind"] == "bonus"
        assert ledger.json()["total_count"] == 1

    def test_adjust_with_wrong_service_key(self, client, auth_headers):
        self._signup(client, auth_headers, "alice")

        response = client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "alice", "amount": 25, "reason": "event prize"},
            headers={"X-Service-Key": "guess"},
        )

        assert response.status_code == 403

    def test_regular_user_cannot_adjust(self, client, auth_headers):
        headers = self._signup(client, auth_headers, "alice")

        response = client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "alice", "amount": 1000, "reason": "free money"},
            headers=headers,
        )

        assert response.status_code == 403

    def test_admin_penalty(self, client, auth_headers, db, settings):
        # Given - 관리자 계정과 10 코인을 가진 사용자
        admin_headers = self._signup(client, auth_headers, "root")
        db.get(UserModel, "root").role = UserRole.ADMIN.value
        db.commit()
        self._signup(client, auth_headers, "alice")
        client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "alice", "amount": 10, "reason": "seed"},
            headers={"X-Service-Key": settings.SERVICE_ROLE_KEY},
        )

        # When
        ok = client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "alice", "amount": -4, "reason": "spam"},
            headers=admin_headers,
        )
        overdraw = client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "alice", "amount": -100, "reason": "spam"},
            headers=admin_headers,
        )

        # Then
        assert ok.status_code == 200
        assert ok.json()["balance_after"] == 6
        assert ok.json()["transaction"]["description"] == "spam (by admin:root)"
        assert overdraw.status_code == 400

    def test_adjust_unknown_user(self, client, settings):
        response = client.post(
            "/api/v1/coins/admin/adjust",
            json={"user_id": "ghost", "amount": 5, "reason": "typo"},
            headers={"X-Service-Key": settings.SERVICE_ROLE_KEY},
        )

        assert response.status_code == 404

    def test_integrity(self, client, auth_headers):
        headers = self._signup(client, auth_headers, "alice")

        response = client.get("/api/v1/coins/integrity/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "OK"
