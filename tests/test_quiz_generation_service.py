# tests/test_quiz_generation_service.py

import json
import logging

import pytest

from conftest import FakeLLMGateway, StaticSecretResolver, multiple_choice_items, true_false_items
from sportsquiz.core.result import ErrorKind
from sportsquiz.generation.credentials import CredentialCache
from sportsquiz.grading.answer_key import QUIZZES_COLLECTION
from sportsquiz.ports.llm_gateway import LLMAPIError, LLMTimeoutError
from sportsquiz.services.quiz_service import QuizGenerationService


VALID_REQUEST = {"category": "Football", "numberOfQuestions": 3, "quizType": "multiple_choice"}


def _service(store, gateway, secrets=None):
    resolver = StaticSecretResolver({"UPSTAGE_API_KEY": "test-key"} if secrets is None else secrets)
    return QuizGenerationService(
        store=store,
        credentials=CredentialCache(resolver, "UPSTAGE_API_KEY"),
        gateway_factory=lambda api_key: gateway,
    )


class TestGenerateQuiz:

    def test_success_persists_quiz(self, generation_service, store, user, fake_gateway):
        result = generation_service.generate_quiz(VALID_REQUEST, user)

        assert result.ok
        quiz = result.value
        assert len(quiz.questions) == 3
        assert quiz.quiz_type == "multiple_choice"
        assert quiz.created_by == "user-1"
        assert quiz.visibility == "private"
        assert quiz.status == "active"
        assert isinstance(quiz.created_at, int)
        assert len(fake_gateway.prompts) == 1

        stored = store.get(QUIZZES_COLLECTION, quiz.id)
        assert stored["id"] == quiz.id
        assert [q["correctAnswer"] for q in stored["questions"]] == ["A", "B", "C"]

    def test_model_name_is_logged(self, generation_service, user, caplog):
        with caplog.at_level(logging.INFO, logger="sportsquiz.services.quiz_service"):
            generation_service.generate_quiz(VALID_REQUEST, user)

        assert "Requesting quiz generation from fake" in caplog.text

    def test_true_false_round_trip(self, store, user):
        items = [{"question": f"S{i}", "options": ["True", "False"], "answer": "True"} for i in range(3)]
        service = _service(store, FakeLLMGateway(json.dumps(items)))

        result = service.generate_quiz(
            {"category": "Tennis", "numberOfQuestions": 3, "quizType": "true_false"}, user
        )

        assert result.ok
        assert result.value.quiz_type == "true_false"
        assert len(result.value.questions) == 3

    def test_fenced_response_is_accepted(self, store, user):
        raw = "```json\n" + json.dumps(multiple_choice_items(3)) + "\n```"
        result = _service(store, FakeLLMGateway(raw)).generate_quiz(VALID_REQUEST, user)
        assert result.ok

    def test_admin_can_publish_globally(self, store, admin):
        gateway = FakeLLMGateway(json.dumps(multiple_choice_items(3)))
        result = _service(store, gateway).generate_quiz({**VALID_REQUEST, "visibility": "global"}, admin)

        assert result.value.visibility == "global"

    def test_non_admin_global_request_becomes_private(self, generation_service, user):
        result = generation_service.generate_quiz({**VALID_REQUEST, "visibility": "global"}, user)
        assert result.value.visibility == "private"

    def test_unauthenticated(self, generation_service, store, fake_gateway):
        result = generation_service.generate_quiz(VALID_REQUEST, None)

        assert result.kind == ErrorKind.UNAUTHENTICATED
        assert fake_gateway.prompts == []
        assert store.query(QUIZZES_COLLECTION) == []

    @pytest.mark.parametrize("payload, message_part", [
        ({"numberOfQuestions": 3, "quizType": "true_false"}, "Category"),
        ({"category": "  ", "numberOfQuestions": 3, "quizType": "true_false"}, "Category"),
        ({"category": "F", "numberOfQuestions": 0, "quizType": "true_false"}, "Number of questions"),
        ({"category": "F", "numberOfQuestions": 21, "quizType": "true_false"}, "Number of questions"),
        ({"category": "F", "numberOfQuestions": "5", "quizType": "true_false"}, "Number of questions"),
        ({"category": "F", "numberOfQuestions": 2.5, "quizType": "true_false"}, "Number of questions"),
        ({"category": "F", "numberOfQuestions": 3, "quizType": "essay"}, "Quiz type"),
        ({"category": "F", "numberOfQuestions": 3}, "Quiz type"),
    ])
    def test_invalid_arguments_never_reach_the_model(self, generation_service, user, fake_gateway,
                                                     payload, message_part):
        result = generation_service.generate_quiz(payload, user)

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert message_part in result.message
        assert fake_gateway.prompts == []

    def test_non_object_body(self, generation_service, user):
        result = generation_service.generate_quiz(["not", "an", "object"], user)
        assert result.kind == ErrorKind.INVALID_ARGUMENT

    def test_missing_credential(self, store, user):
        gateway = FakeLLMGateway(json.dumps(multiple_choice_items(3)))
        result = _service(store, gateway, secrets={}).generate_quiz(VALID_REQUEST, user)

        assert result.kind == ErrorKind.CREDENTIAL_UNAVAILABLE
        assert result.message == "Server configuration error: generation credential missing."
        assert gateway.prompts == []

    @pytest.mark.parametrize("error", [LLMTimeoutError("slow"), LLMAPIError("boom"), RuntimeError("?")])
    def test_generation_call_failure(self, store, user, error):
        result = _service(store, FakeLLMGateway(error=error)).generate_quiz(VALID_REQUEST, user)

        assert result.kind == ErrorKind.GENERATION_CALL_FAILED
        assert store.query(QUIZZES_COLLECTION) == []

    def test_empty_model_response(self, store, user):
        result = _service(store, FakeLLMGateway("   ")).generate_quiz(VALID_REQUEST, user)
        assert result.kind == ErrorKind.GENERATION_CALL_FAILED

    @pytest.mark.parametrize("response, kind", [
        ("Sorry, I cannot help with that.", ErrorKind.MALFORMED_OUTPUT),
        (json.dumps(multiple_choice_items(2)), ErrorKind.COUNT_MISMATCH),
        (json.dumps({"questions": multiple_choice_items(3)}), ErrorKind.COUNT_MISMATCH),
        (json.dumps(true_false_items(3)), ErrorKind.SCHEMA_VIOLATION),
    ])
    def test_invalid_output_persists_nothing(self, store, user, response, kind):
        result = _service(store, FakeLLMGateway(response)).generate_quiz(VALID_REQUEST, user)

        assert result.kind == kind
        assert store.query(QUIZZES_COLLECTION) == []

    def test_one_bad_question_rejects_the_batch(self, store, user):
        items = multiple_choice_items(3)
        items[2]["options"] = items[2]["options"][:3]
        result = _service(store, FakeLLMGateway(json.dumps(items))).generate_quiz(VALID_REQUEST, user)

        assert result.kind == ErrorKind.SCHEMA_VIOLATION
        assert result.details["index"] == 2
        assert store.query(QUIZZES_COLLECTION) == []
