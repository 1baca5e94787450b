"""
HTTP tests: authentication, error rendering and the main flows.
"""
from focusboard.constants import API_KEY, CRON_SECRET


class TestAuthentication:
    """Tests for API key, user id and cron secret checks"""

    def test_missing_api_key(self, client):
        response = client.get("/api/priorities", headers={"X-User-Id": "user-1"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_missing_user_id(self, client):
        response = client.get("/api/priorities", headers={"X-API-Key": API_KEY})

        assert response.status_code == 401

    def test_health_check_is_public(self, client):
        assert client.get("/").json()["status"] == "active"

    def test_cron_requires_bearer_secret(self, client):
        assert client.post("/api/cron/priority-cleanup").status_code == 401

        response = client.post(
            "/api/cron/nightly-maintenance",
            headers={"Authorization": f"Bearer {CRON_SECRET}"},
        )
        assert response.status_code == 200
        assert response.json()["cleanup"]["purged_count"] == 0


class TestGoalRoutes:
    """Tests for goal progress over HTTP"""

    def test_progress_round_trip(self, client, auth_headers):
        created = client.post(
            "/api/goals",
            json={"title": "Read", "target_value": 200, "current_value": 50},
            headers=auth_headers,
        )
        assert created.status_code == 201
        goal_id = created.json()["id"]

        response = client.put(
            f"/api/goals/{goal_id}/progress",
            json={"progress_percentage": 50},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["current_value"] == 100
        assert response.json()["progress_change"] == 50
        assert client.get("/api/points", headers=auth_headers).json()["points"] == 100

    def test_out_of_range_percentage(self, client, auth_headers):
        goal_id = client.post(
            "/api/goals", json={"title": "Read", "target_value": 10}, headers=auth_headers
        ).json()["id"]

        response = client.put(
            f"/api/goals/{goal_id}/progress",
            json={"progress_percentage": 150},
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"][0]["field"] == "progress_percentage"

    def test_unknown_goal(self, client, auth_headers):
        response = client.put(
            "/api/goals/999/progress", json={"progress_percentage": 10}, headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_project_progress(self, client, auth_headers):
        project_id = client.post(
            "/api/projects", json={"title": "Launch", "target_value": 4}, headers=auth_headers
        ).json()["id"]

        response = client.put(
            f"/api/projects/{project_id}/progress",
            json={"progress_percentage": 100},
            headers=auth_headers,
        )

        assert response.json()["status"] == "completed"


class TestPriorityRoutes:
    """Tests for priority lifecycle over HTTP"""

    def _create(self, client, headers, title="Plan week"):
        return client.post(
            "/api/priorities",
            json={"title": title, "priority_type": "manual"},
            headers=headers,
        ).json()

    def test_restore_active_priority_conflicts(self, client, auth_headers):
        priority = self._create(client, auth_headers)

        response = client.post(f"/api/priorities/{priority['id']}/restore", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state"

    def test_soft_delete_and_restore(self, client, auth_headers):
        priority = self._create(client, auth_headers)

        deleted = client.delete(f"/api/priorities/{priority['id']}", headers=auth_headers)
        assert deleted.json()["is_deleted"] is True
        assert client.get("/api/priorities", headers=auth_headers).json() == []

        restored = client.post(f"/api/priorities/{priority['id']}/restore", headers=auth_headers)
        assert restored.json()["deleted_at"] is None

    def test_other_users_priority_is_not_found(self, client, auth_headers):
        priority = self._create(client, auth_headers)
        other = dict(auth_headers, **{"X-User-Id": "user-2"})

        response = client.delete(f"/api/priorities/{priority['id']}", headers=other)

        assert response.status_code == 404

    def test_unknown_priority_type_is_validation_error(self, client, auth_headers):
        response = client.post(
            "/api/priorities",
            json={"title": "Plan week", "priority_type": "bogus"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"][0]["field"] == "priority_type"

    def test_deduplicate(self, client, auth_headers):
        self._create(client, auth_headers, "Same")
        self._create(client, auth_headers, "Same")

        response = client.post("/api/priorities/deduplicate", headers=auth_headers)

        assert response.json()["removed_count"] == 1


class TestLedgerRoutes:
    """Tests for the manual award endpoint"""

    def test_goal_award_rejected(self, client, auth_headers):
        response = client.post(
            "/api/points",
            json={"goal_id": 1, "points": 10, "description": "manual"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"][0]["field"] == "goal_id"


class TestSigninRoutes:
    """Tests for daily sign-in"""

    def test_second_signin_same_day(self, client, auth_headers, seeded_trophies):
        first = client.post("/api/signin", headers=auth_headers)
        second = client.post("/api/signin", headers=auth_headers)

        assert first.json()["already_signed_in"] is False
        assert first.json()["streak"]["current"] == 1
        assert second.json()["already_signed_in"] is True
        assert client.get("/api/signin/streak", headers=auth_headers).json()["total"] == 1


class TestEducationRoutes:
    """Tests for education completion over HTTP"""

    def test_complete_awards_points(self, client, auth_headers):
        item_id = client.post(
            "/api/education", json={"title": "SQL course", "points_value": 150}, headers=auth_headers
        ).json()["id"]

        response = client.post(
            f"/api/education/{item_id}/complete", json={"notes": "done"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["completion"]["points_awarded"] == 150
        assert client.get("/api/points", headers=auth_headers).json()["points"] == 150

        again = client.post(f"/api/education/{item_id}/complete", headers=auth_headers)
        assert again.status_code == 409
        assert again.json()["error"] == "invalid_state"
