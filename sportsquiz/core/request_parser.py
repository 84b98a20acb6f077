# sportsquiz/core/request_parser.py

"""
Untrusted request payload → pydantic model, or INVALID_ARGUMENT failure.
"""
import logging
from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from sportsquiz.core.result import ErrorKind, Failure, Result, Success


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Field-specific caller messages (wire names)
FIELD_MESSAGES: Dict[str, str] = {
    "category": "Category is required and must be a non-empty string.",
    "numberOfQuestions": "Number of questions is required and must be an integer between 1 and 20.",
    "quizType": 'Quiz type is required and must be "multiple_choice" or "true_false".',
    "difficulty": 'Difficulty must be "easy", "medium" or "hard".',
    "visibility": 'Visibility must be "global" or "private".',
    "quizId": "quizId is required and must be a non-empty string.",
    "userAnswers": "userAnswers must be a non-empty array of {questionId, selectedOption}.",
    "quizStartTime": "quizStartTime is required and must be a positive epoch milliseconds value.",
}


def parse_payload(model: Type[ModelT], payload: Any) -> Result[ModelT]:
    """
    Validate a request payload. Unknown fields are ignored by the models.

    Returns:
        Success(model instance) or Failure(INVALID_ARGUMENT) naming the first bad field
    """
    if isinstance(payload, model):
        return Success(payload)
    if not isinstance(payload, Mapping):
        return Failure(ErrorKind.INVALID_ARGUMENT, "Request body must be a JSON object.")

    try:
        return Success(model.model_validate(dict(payload)))
    except ValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        loc = first.get("loc", ())
        field = str(loc[0]) if loc else ""
        message = FIELD_MESSAGES.get(field) or f"{field or 'request'}: {first.get('msg', 'invalid value')}"
        logger.info(f"Rejected {model.__name__} request: {message}")
        return Failure(
            ErrorKind.INVALID_ARGUMENT,
            message,
            {"errors": [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in errors]},
        )
