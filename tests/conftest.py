"""
Test configuration for stable local/CI execution.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import pytest


# Disable external tracing uploads and file logging during tests.
os.environ.setdefault("LANGSMITH_TRACING", "false")
os.environ.setdefault("LANGCHAIN_TRACING_V2", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("USE_REDIS_STORE", "false")

from sportsquiz.generation.credentials import CredentialCache  # noqa: E402
from sportsquiz.infrastructure.memory_store import InMemoryDocumentStore  # noqa: E402
from sportsquiz.ports.llm_gateway import LLMGateway  # noqa: E402
from sportsquiz.ports.secret_resolver import SecretResolver, SecretResolutionError  # noqa: E402
from sportsquiz.schemas.quiz import Requester  # noqa: E402
from sportsquiz.services.grading_service import QuizGradingService  # noqa: E402
from sportsquiz.services.quiz_management_service import QuizManagementService  # noqa: E402
from sportsquiz.services.quiz_service import QuizGenerationService  # noqa: E402


class FakeLLMGateway(LLMGateway):
    """Returns a canned response (or raises) and records every prompt"""

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.prompts: List[str] = []

    def invoke(self, prompt: str, temperature: Optional[float] = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response

    def get_model_name(self) -> str:
        return "fake"


class StaticSecretResolver(SecretResolver):
    """Dict-backed resolver that counts lookups"""

    def __init__(self, secrets: Optional[Dict[str, str]] = None):
        self.secrets = dict(secrets or {})
        self.calls = 0

    def resolve(self, name: str) -> str:
        self.calls += 1
        if name not in self.secrets:
            raise SecretResolutionError(f"Unknown secret: {name}")
        return self.secrets[name]


def multiple_choice_items(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "question": f"Question {i + 1}?",
            "options": ["A. One", "B. Two", "C. Three", "D. Four"],
            "answer": "ABCD"[i % 4],
        }
        for i in range(count)
    ]


def true_false_items(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "question": f"Statement {i + 1}.",
            "options": ["True", "False"],
            "answer": "True" if i % 2 == 0 else "False",
        }
        for i in range(count)
    ]


def quiz_document(
    quiz_id: str = "quiz-1",
    created_by: str = "owner",
    visibility: str = "global",
    status: str = "active",
    **overrides: Any
) -> Dict[str, Any]:
    """Stored quiz document with one multiple_choice question ('q1', answer 'A')"""
    document = {
        "id": quiz_id,
        "title": "Capitals",
        "category": "Geography",
        "difficulty": "medium",
        "quizType": "multiple_choice",
        "team": "",
        "event": "",
        "country": "",
        "questions": [
            {
                "id": "q1",
                "text": "Capital of France?",
                "type": "multiple_choice",
                "options": ["A. Paris", "B. London", "C. Rome", "D. Berlin"],
                "correctAnswer": "A",
            }
        ],
        "createdBy": created_by,
        "visibility": visibility,
        "status": status,
        "createdAt": 1700000000000,
    }
    document.update(overrides)
    return document


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def user():
    return Requester(user_id="user-1")


@pytest.fixture
def admin():
    return Requester(user_id="admin-1", is_admin=True)


@pytest.fixture
def fake_gateway():
    return FakeLLMGateway(response=json.dumps(multiple_choice_items(3)))


@pytest.fixture
def secret_resolver():
    return StaticSecretResolver({"UPSTAGE_API_KEY": "test-key"})


@pytest.fixture
def credentials(secret_resolver):
    return CredentialCache(secret_resolver, "UPSTAGE_API_KEY")


@pytest.fixture
def generation_service(store, credentials, fake_gateway):
    return QuizGenerationService(
        store=store,
        credentials=credentials,
        gateway_factory=lambda api_key: fake_gateway,
    )


@pytest.fixture
def grading_service(store):
    # Fixed clock: 12.4s after the default start time used in tests
    return QuizGradingService(store=store, clock=lambda: 1_000_012_400.0)


@pytest.fixture
def management_service(store):
    return QuizManagementService(store=store, quiz_list_limit=20)
