# tests/test_quiz_api.py

import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeLLMGateway, StaticSecretResolver, multiple_choice_items, quiz_document
from sportsquiz.dependencies import get_document_store, get_generation_service
from sportsquiz.generation.credentials import CredentialCache
from sportsquiz.grading.answer_key import QUIZZES_COLLECTION
from sportsquiz.infrastructure.memory_store import InMemoryDocumentStore
from sportsquiz.main import app
from sportsquiz.services.quiz_service import QuizGenerationService

client = TestClient(app)

USER = {"X-User-Id": "user-1"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Admin": "true"}


@pytest.fixture(autouse=True)
def api_store():
    store = InMemoryDocumentStore()
    gateway = FakeLLMGateway(json.dumps(multiple_choice_items(3)))
    credentials = CredentialCache(StaticSecretResolver({"UPSTAGE_API_KEY": "k"}), "UPSTAGE_API_KEY")

    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_generation_service] = lambda: QuizGenerationService(
        store=store,
        credentials=credentials,
        gateway_factory=lambda api_key: gateway,
    )
    yield store
    app.dependency_overrides.clear()


class TestHealth:

    def test_root(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self):
        assert client.get("/health").json() == {"status": "healthy"}


class TestQuizAPI:
    """Test cases for Quiz API endpoints"""

    def test_generate_quiz(self, api_store):
        response = client.post(
            "/api/quizzes/generate",
            json={"category": "Football", "numberOfQuestions": 3, "quizType": "multiple_choice"},
            headers=USER,
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["questions"]) == 3
        assert data["quizType"] == "multiple_choice"
        assert data["visibility"] == "private"
        assert data["createdBy"] == "user-1"
        assert api_store.get(QUIZZES_COLLECTION, data["id"]) is not None

    def test_generate_requires_auth(self):
        response = client.post(
            "/api/quizzes/generate",
            json={"category": "Football", "numberOfQuestions": 3, "quizType": "multiple_choice"},
        )

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "unauthenticated"

    def test_generate_invalid_argument(self):
        response = client.post(
            "/api/quizzes/generate",
            json={"category": "Football", "numberOfQuestions": 50, "quizType": "multiple_choice"},
            headers=USER,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == {
            "code": "invalid_argument",
            "message": "Number of questions is required and must be an integer between 1 and 20.",
        }

    def test_generate_count_mismatch_is_bad_gateway(self, api_store):
        response = client.post(
            "/api/quizzes/generate",
            json={"category": "Football", "numberOfQuestions": 5, "quizType": "multiple_choice"},
            headers=USER,
        )

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "count_mismatch"
        assert "raw_text" not in json.dumps(response.json())
        assert api_store.query(QUIZZES_COLLECTION) == []

    def test_get_quiz_hides_answers(self, api_store):
        api_store.create(QUIZZES_COLLECTION, "quiz-1", quiz_document())
        response = client.get("/api/quizzes/quiz-1", headers=USER)

        assert response.status_code == 200
        question = response.json()["questions"][0]
        assert "correctAnswer" not in question
        assert question["id"] == "q1"

    def test_get_missing_quiz(self):
        response = client.get("/api/quizzes/nope", headers=USER)
        assert response.status_code == 404

    def test_list_quizzes(self, api_store):
        api_store.create(QUIZZES_COLLECTION, "quiz-1", quiz_document())
        api_store.create(QUIZZES_COLLECTION, "quiz-2", quiz_document("quiz-2", visibility="private"))

        response = client.get("/api/quizzes", params={"category": "Geography"}, headers=USER)

        assert response.status_code == 200
        assert [q["id"] for q in response.json()["quizzes"]] == ["quiz-1"]


class TestSubmitAPI:

    def test_submit_and_list_attempts(self, api_store):
        api_store.create(QUIZZES_COLLECTION, "quiz-1", quiz_document())

        response = client.post(
            "/api/quizzes/submit",
            json={
                "quizId": "quiz-1",
                "userAnswers": [{"questionId": "q1", "selectedOption": "A. Paris"}],
                "quizStartTime": 1,
            },
            headers=USER,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == {"correct": 1, "incorrect": 0, "total": 1}
        assert data["reviewDetails"][0]["isCorrect"] is True

        attempts = client.get("/api/attempts", headers=USER).json()["attempts"]
        assert [a["id"] for a in attempts] == [data["attemptId"]]

    def test_submit_unknown_quiz(self):
        response = client.post(
            "/api/quizzes/submit",
            json={
                "quizId": "missing",
                "userAnswers": [{"questionId": "q1", "selectedOption": "A"}],
                "quizStartTime": 1,
            },
            headers=USER,
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "not_found"

    def test_submit_non_object_body(self):
        response = client.post("/api/quizzes/submit", json=[1, 2], headers=USER)
        assert response.status_code == 400

    def test_submit_overflowing_start_time(self, api_store):
        api_store.create(QUIZZES_COLLECTION, "quiz-1", quiz_document())
        body = (
            '{"quizId": "quiz-1", '
            '"userAnswers": [{"questionId": "q1", "selectedOption": "A"}], '
            '"quizStartTime": 1e400}'
        )

        response = client.post(
            "/api/quizzes/submit",
            content=body,
            headers={**USER, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "invalid_argument"


class TestAdminAPI:

    def test_delete_and_restore(self, api_store):
        api_store.create(QUIZZES_COLLECTION, "quiz-1", quiz_document())

        assert client.post("/api/quizzes/quiz-1/delete", headers=USER).status_code == 403

        response = client.post("/api/quizzes/quiz-1/delete", headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert api_store.get(QUIZZES_COLLECTION, "quiz-1")["status"] == "deleted"

        assert client.post("/api/quizzes/quiz-1/restore", headers=ADMIN).status_code == 200
        assert api_store.get(QUIZZES_COLLECTION, "quiz-1")["status"] == "active"

    def test_update_visibility(self, api_store):
        api_store.create(QUIZZES_COLLECTION, "quiz-1", quiz_document(visibility="private"))

        response = client.patch("/api/quizzes/quiz-1/visibility", json={"visibility": "global"}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["visibility"] == "global"
