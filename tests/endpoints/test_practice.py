from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, assert_error


def _start(client, headers, **payload):
    payload.setdefault("type", "section")
    return api_call(client, "POST", "/practice/start", headers=headers, json=payload).json()["data"]


class TestPracticeEndpoints:
    def test_start_session_smoke(self, client: TestClient, user_factory, test_factory, auth_headers):
        candidate = user_factory()
        mock = test_factory()
        response = client.post(
            "/practice/start", headers={**auth_headers(candidate), "User-Agent": "pytest-agent"},
            json={"type": "full-test", "test": mock.id, "skill": "listening"}
        )
        assert response.status_code == 201

        data = response.json()["data"]
        assert data["userId"] == candidate.id
        assert data["status"] == "started"
        assert data["type"] == "full-test"
        assert data["skill"] == "listening"
        assert data["answers"] == []
        assert data["score"] is None
        assert data["deviceInfo"]["userAgent"] == "pytest-agent"

    def test_start_without_type_is_rejected(self, client: TestClient, user_factory, auth_headers):
        response = client.post("/practice/start", headers=auth_headers(user_factory()), json={})
        assert_error(response, 400)

    def test_start_with_unknown_type_is_rejected(self, client: TestClient, user_factory, auth_headers):
        response = client.post("/practice/start", headers=auth_headers(user_factory()), json={"type": "marathon"})
        assert_error(response, 400, code="VALIDATION_ERROR")

    def test_start_requires_auth(self, client: TestClient):
        assert_error(client.post("/practice/start", json={"type": "section"}), 401)

    def test_active_session(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        assert_error(client.get("/practice/active", headers=headers), 404)

        started = _start(client, headers)
        data = api_call(client, "GET", "/practice/active", headers=headers).json()["data"]
        assert data["id"] == started["id"]
        assert data["timeElapsed"] >= 0

    def test_get_session_and_ownership(self, client: TestClient, user_factory, auth_headers):
        owner_headers = auth_headers(user_factory())
        started = _start(client, owner_headers)

        api_call(client, "GET", f"/practice/sessions/{started['id']}", headers=owner_headers)
        assert_error(client.get(f"/practice/sessions/{started['id']}", headers=auth_headers(user_factory())), 403)
        assert_error(client.get("/practice/sessions/313131", headers=owner_headers), 404)

    def test_submit_answers_smoke(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        started = _start(client, headers)

        response = api_call(
            client, "POST", "/practice/submit-answers", headers=headers,
            json={
                "sessionId": started["id"],
                "answers": [
                    {"questionId": 1, "answer": 2, "isCorrect": True, "timeTaken": 12},
                    {"questionId": 2, "answer": "TRUE"},
                ]
            }
        )
        data = response.json()["data"]
        assert data["totalAnswers"] == 2
        assert data["recentAnswers"][1]["isCorrect"] is False
        assert data["recentAnswers"][1]["timeTaken"] == 0

    def test_submit_answers_to_other_users_session(self, client: TestClient, user_factory, auth_headers):
        started = _start(client, auth_headers(user_factory()))
        response = client.post(
            "/practice/submit-answers", headers=auth_headers(user_factory()),
            json={"sessionId": started["id"], "answers": [{"questionId": 1, "answer": "A"}]}
        )
        assert_error(response, 403)

    def test_update_session_completes(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        started = _start(client, headers)

        data = api_call(
            client, "PUT", f"/practice/sessions/{started['id']}", headers=headers,
            json={"answers": [{"questionId": 1, "answer": "A", "isCorrect": True}], "status": "completed"}
        ).json()["data"]
        assert data["status"] == "completed"
        assert data["endTime"] is not None
        assert data["duration"] >= 0
        assert data["score"]["band"] == 9.0

        response = client.put(
            f"/practice/sessions/{started['id']}", headers=headers,
            json={"answers": [{"questionId": 2, "answer": "B"}]}
        )
        assert_error(response, 400)

    def test_progress_smoke(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        started = _start(client, headers)
        api_call(
            client, "POST", "/practice/submit-answers", headers=headers,
            json={"sessionId": started["id"], "answers": [
                {"questionId": 1, "answer": "A", "isCorrect": True},
                {"questionId": 2, "answer": None},
            ]}
        )

        data = api_call(client, "GET", f"/practice/sessions/{started['id']}/progress", headers=headers).json()["data"]
        assert data["session"]["id"] == started["id"]
        assert data["progress"]["totalQuestions"] == 2
        assert data["progress"]["answeredQuestions"] == 1
        assert data["progress"]["accuracy"] == 50.0
        assert data["progress"]["completionRate"] == 50.0

    def test_delete_session(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        open_session = _start(client, headers)
        api_call(client, "DELETE", f"/practice/sessions/{open_session['id']}", headers=headers)
        assert_error(client.get(f"/practice/sessions/{open_session['id']}", headers=headers), 404)

        finished = _start(client, headers)
        api_call(client, "PUT", f"/practice/sessions/{finished['id']}", headers=headers, json={"status": "completed"})
        body = assert_error(client.delete(f"/practice/sessions/{finished['id']}", headers=headers), 400)
        assert body["message"] == "Cannot delete completed sessions"

    def test_list_sessions_with_filters(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        reading = _start(client, headers, skill="reading")
        _start(client, headers, skill="writing")
        api_call(client, "PUT", f"/practice/sessions/{reading['id']}", headers=headers, json={"status": "completed"})

        data = api_call(client, "GET", "/practice/sessions", headers=headers).json()["data"]
        assert data["pagination"]["totalItems"] == 2
        assert data["statistics"]["totalSessions"] == 2
        assert data["statistics"]["totalCompleted"] == 1

        completed = api_call(client, "GET", "/practice/sessions?status=completed", headers=headers).json()["data"]
        assert [s["id"] for s in completed["sessions"]] == [reading["id"]]

        writing = api_call(client, "GET", "/practice/sessions?skill=writing", headers=headers).json()["data"]
        assert writing["pagination"]["totalItems"] == 1
        assert "answers" not in writing["sessions"][0]

    def test_list_sessions_rejects_unknown_status(self, client: TestClient, user_factory, auth_headers):
        response = client.get("/practice/sessions?status=finished", headers=auth_headers(user_factory()))
        assert_error(response, 400, code="VALIDATION_ERROR")

    def test_rejected_update_keeps_answers_unchanged(self, client: TestClient, user_factory, auth_headers):
        headers = auth_headers(user_factory())
        started = _start(client, headers)

        response = client.put(
            f"/practice/sessions/{started['id']}", headers=headers,
            json={"answers": [{"questionId": 1, "answer": "A"}], "endTime": "2000-01-01T00:00:00Z"}
        )
        assert_error(response, 400)

        data = api_call(client, "GET", f"/practice/sessions/{started['id']}", headers=headers).json()["data"]
        assert data["answers"] == []
        assert data["status"] == "started"

    def test_list_sessions_by_overall_skill(self, client: TestClient, user_factory, test_factory, auth_headers):
        headers = auth_headers(user_factory())
        mock = test_factory()
        api_call(
            client, "POST", "/results/submit", headers=headers,
            json={"test": mock.id, "answers": [{"questionId": 1, "answer": "A", "isCorrect": True}]}
        )
        _start(client, headers, skill="reading")

        data = api_call(client, "GET", "/practice/sessions?skill=overall", headers=headers).json()["data"]
        assert data["pagination"]["totalItems"] == 1
        assert data["sessions"][0]["type"] == "full-test"

        assert_error(client.get("/practice/sessions?skill=grammar", headers=headers), 400, code="VALIDATION_ERROR")
