# sportsquiz/services/quiz_service.py

"""
GenerateQuiz

  requester 확인 → 설정 검증 → 크리덴셜 → 프롬프트 → LLM (1회) → sanitize
  → 스키마 검증 → 정규화 → 조립 → 단일 문서 쓰기

검증은 첫 쓰기 전에 모두 끝나므로 부분 저장된 퀴즈는 존재하지 않는다.
"""
import logging
from typing import Any, Callable, Mapping, Optional, Union

from sportsquiz.core.request_parser import parse_payload
from sportsquiz.core.result import ErrorKind, Failure, Result, Success
from sportsquiz.generation.assembler import assemble_quiz_document
from sportsquiz.generation.credentials import CredentialCache
from sportsquiz.generation.normalizer import normalize_questions
from sportsquiz.generation.prompt_builder import build_quiz_prompt
from sportsquiz.generation.sanitizer import sanitize_model_output
from sportsquiz.generation.schema_validator import validate_generated_questions
from sportsquiz.grading.answer_key import QUIZZES_COLLECTION
from sportsquiz.ports.document_store import DocumentStore
from sportsquiz.ports.llm_gateway import LLMGateway, LLMTimeoutError
from sportsquiz.schemas.quiz import Quiz, QuizConfig, Requester


logger = logging.getLogger(__name__)

GatewayFactory = Callable[[str], LLMGateway]


def unauthenticated() -> Failure:
    return Failure(ErrorKind.UNAUTHENTICATED, "The function must be called while authenticated.")


class QuizGenerationService:
    """
    Generates, validates and persists AI quizzes.

    Args:
        store: document store for the quizzes collection
        credentials: process-wide credential cache
        gateway_factory: api key → LLMGateway
        temperature: generation temperature (None = gateway default)
    """

    def __init__(
        self,
        store: DocumentStore,
        credentials: CredentialCache,
        gateway_factory: GatewayFactory,
        temperature: Optional[float] = None
    ):
        self._store = store
        self._credentials = credentials
        self._gateway_factory = gateway_factory
        self._temperature = temperature

    def _call_model(self, api_key: str, prompt: str) -> Result[str]:
        generation_failed = Failure(
            ErrorKind.GENERATION_CALL_FAILED,
            "Failed to generate quiz content from AI.",
        )
        try:
            gateway = self._gateway_factory(api_key)
            logger.info(f"Requesting quiz generation from {gateway.get_model_name()}")
            text = gateway.invoke(prompt, temperature=self._temperature)
        except LLMTimeoutError as e:
            logger.error(f"Generation call timed out: {e}")
            return Failure(generation_failed.kind, generation_failed.message, {"cause": str(e), "timeout": True})
        except Exception as e:
            logger.error(f"Generation call failed: {e}", exc_info=True)
            return Failure(generation_failed.kind, generation_failed.message, {"cause": str(e)})

        if not isinstance(text, str) or not text.strip():
            logger.error("Generation call returned no text")
            return Failure(generation_failed.kind, generation_failed.message, {"cause": "empty response"})

        return Success(text)

    def generate_quiz(
        self,
        payload: Union[QuizConfig, Mapping[str, Any]],
        requester: Optional[Requester]
    ) -> Result[Quiz]:
        """
        Returns:
            Success(Quiz as stored) or Failure with one of
            UNAUTHENTICATED, INVALID_ARGUMENT, CREDENTIAL_UNAVAILABLE,
            GENERATION_CALL_FAILED, MALFORMED_OUTPUT, COUNT_MISMATCH, SCHEMA_VIOLATION
        """
        # 1. 인증
        if requester is None:
            return unauthenticated()

        # 2. 입력 검증 (외부 호출 전)
        parsed = parse_payload(QuizConfig, payload)
        if not parsed.ok:
            return parsed
        config: QuizConfig = parsed.value

        # 3. 크리덴셜
        api_key = self._credentials.get()
        if not api_key:
            logger.error("Generation credential not available during quiz generation")
            return Failure(
                ErrorKind.CREDENTIAL_UNAVAILABLE,
                "Server configuration error: generation credential missing.",
                {"secret_name": self._credentials.secret_name},
            )

        # 4. LLM 호출 (재시도 없음)
        prompt = build_quiz_prompt(config)
        called = self._call_model(api_key, prompt)
        if not called.ok:
            return called
        raw_text = called.value
        logger.info(f"Raw model response for user {requester.user_id}: {raw_text[:2000]}")

        # 5. 정리 + 검증
        validated = validate_generated_questions(
            sanitize_model_output(raw_text),
            config.quiz_type,
            config.number_of_questions,
        )
        if not validated.ok:
            logger.error(
                f"Invalid AI output ({validated.code}) for user {requester.user_id}: {validated.details}"
            )
            return validated

        # 6. 정규화 + 조립 + 저장
        questions = normalize_questions(validated.value, config.quiz_type, id_factory=self._store.new_id)
        quiz_id = self._store.new_id()
        document = assemble_quiz_document(quiz_id, config, questions, requester)

        stored = self._store.create(QUIZZES_COLLECTION, quiz_id, document)
        logger.info(
            f"Quiz {quiz_id} saved: user={requester.user_id}, type={config.quiz_type}, "
            f"questions={len(questions)}, visibility={stored['visibility']}"
        )
        return Success(Quiz.model_validate(stored))
