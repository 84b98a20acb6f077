# sportsquiz/generation/schema_validator.py

"""
LLM 출력 스키마 검증 (all-or-nothing)

생성형 모델은 구조를 보장하지 않으므로, 저장 전에 배치 전체를 검증한다.
문항 하나라도 어긋나면 배치 전체를 거부한다 (짧아진 "정리본"을 돌려주지 않는다).

단계 (각 단계 실패는 즉시 종료):
  1) JSON 파싱              → MALFORMED_OUTPUT
  2) 배열 + 길이 == 요청 수   → COUNT_MISMATCH
  3) 퀴즈 유형별 문항 형태     → SCHEMA_VIOLATION

문항 형태는 퀴즈 유형마다 별도 pydantic 모델로 정의하고(tagged union),
실패 사유는 필드 단위로 수집한다.
"""
import json
import logging
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sportsquiz.core.result import ErrorKind, Failure, Result, Success
from sportsquiz.generation.prompt_builder import MULTIPLE_CHOICE_LABELS, TRUE_FALSE_OPTIONS
from sportsquiz.schemas.quiz import QuizType


logger = logging.getLogger(__name__)

_RAW_PREVIEW_LIMIT = 2000


class FieldIssue(BaseModel):
    """Single per-field failure reason"""
    field: str
    message: str
    actual: Optional[str] = None


def _require_text(value: str, what: str) -> str:
    if not value.strip():
        raise ValueError(f"{what} must be a non-empty string")
    return value.strip()


class MultipleChoiceQuestion(BaseModel):
    """question + 4 options + answer ∈ {A,B,C,D}"""
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    quiz_type: Literal["multiple_choice"] = Field("multiple_choice", exclude=True)
    question: str
    options: List[str]
    answer: Literal["A", "B", "C", "D"]

    @field_validator("question")
    @classmethod
    def _question_text(cls, value: str) -> str:
        return _require_text(value, "question")

    @field_validator("options")
    @classmethod
    def _four_options(cls, value: List[str]) -> List[str]:
        if len(value) != len(MULTIPLE_CHOICE_LABELS):
            raise ValueError(f"expected exactly 4 options, got {len(value)}")
        return [_require_text(option, "option") for option in value]


class TrueFalseQuestion(BaseModel):
    """question + options {"True","False"} (any order) + answer ∈ {True,False}"""
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    quiz_type: Literal["true_false"] = Field("true_false", exclude=True)
    question: str
    options: List[str]
    answer: Literal["True", "False"]

    @field_validator("question")
    @classmethod
    def _question_text(cls, value: str) -> str:
        return _require_text(value, "question")

    @field_validator("options")
    @classmethod
    def _true_false_pair(cls, value: List[str]) -> List[str]:
        if len(value) != 2 or set(value) != set(TRUE_FALSE_OPTIONS):
            raise ValueError('options must be exactly ["True", "False"] in either order')
        return value


ValidatedQuestion = Union[MultipleChoiceQuestion, TrueFalseQuestion]

QUESTION_MODELS: Dict[str, Type[BaseModel]] = {
    "multiple_choice": MultipleChoiceQuestion,
    "true_false": TrueFalseQuestion,
}


def _preview(value: Any) -> str:
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    return text[:_RAW_PREVIEW_LIMIT]


def _json_type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return type(value).__name__


def _issues_from_error(error: ValidationError) -> List[FieldIssue]:
    issues = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "<question>"
        actual = item.get("input")
        issues.append(FieldIssue(
            field=field,
            message=item.get("msg", "invalid value"),
            actual=None if actual is None else _preview(actual),
        ))
    return issues


def parse_question(item: Any, quiz_type: QuizType) -> Union[ValidatedQuestion, List[FieldIssue]]:
    """
    Decode one raw element into the shape for quiz_type.

    Returns:
        ValidatedQuestion on success, or the list of per-field reasons.
    """
    if not isinstance(item, dict):
        return [FieldIssue(field="<question>", message="question must be a JSON object",
                           actual=_json_type_name(item))]

    model = QUESTION_MODELS[quiz_type]
    # Never let the payload pick its own variant
    payload = {k: v for k, v in item.items() if k != "quiz_type"}
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        return _issues_from_error(e)


def validate_generated_questions(
    sanitized_text: str,
    quiz_type: QuizType,
    expected_count: int
) -> Result[List[ValidatedQuestion]]:
    """
    Args:
        sanitized_text: ResponseSanitizer 결과
        quiz_type: 요청된 퀴즈 유형
        expected_count: 요청된 문항 수

    Returns:
        Success([ValidatedQuestion, ...]) 또는 Failure(MALFORMED_OUTPUT | COUNT_MISMATCH | SCHEMA_VIOLATION)
    """
    # 1. JSON 파싱 (strict=False: 문자열 안의 raw 개행 허용)
    try:
        payload = json.loads(sanitized_text, strict=False)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Failed to parse JSON from model output: {e}")
        return Failure(
            ErrorKind.MALFORMED_OUTPUT,
            "Invalid JSON format from AI. Please try again.",
            {"raw_text": _preview(sanitized_text or ""), "parse_error": str(e)},
        )

    # 2. 배열 + 문항 수
    if not isinstance(payload, list):
        logger.error(f"Expected a JSON array of {expected_count} questions, got {_json_type_name(payload)}")
        return Failure(
            ErrorKind.COUNT_MISMATCH,
            "AI did not return the expected number of questions.",
            {"expected": expected_count, "actual": None, "actual_type": _json_type_name(payload)},
        )
    if len(payload) != expected_count:
        logger.error(f"Expected {expected_count} questions but got {len(payload)}")
        return Failure(
            ErrorKind.COUNT_MISMATCH,
            "AI did not return the expected number of questions.",
            {"expected": expected_count, "actual": len(payload)},
        )

    # 3. 문항별 형태 검증 (하나라도 실패하면 전체 거부)
    validated: List[ValidatedQuestion] = []
    invalid: List[Dict[str, Any]] = []
    for index, item in enumerate(payload):
        parsed = parse_question(item, quiz_type)
        if isinstance(parsed, list):
            logger.error(
                f"Invalid question at index {index} for type {quiz_type}: "
                f"{[issue.model_dump() for issue in parsed]} payload={_preview(item)}"
            )
            invalid.append({
                "index": index,
                "payload": item,
                "issues": [issue.model_dump() for issue in parsed],
            })
        else:
            validated.append(parsed)

    if invalid:
        first = invalid[0]
        return Failure(
            ErrorKind.SCHEMA_VIOLATION,
            f"Some generated questions were invalid for type {quiz_type}.",
            {
                "quiz_type": quiz_type,
                "index": first["index"],
                "payload": first["payload"],
                "issues": first["issues"],
                "invalid_indexes": [entry["index"] for entry in invalid],
            },
        )

    return Success(validated)
