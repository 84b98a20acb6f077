# sportsquiz/core/result.py

"""
Explicit result types for core operations.

Core operations never raise for expected failures. They return either
``Success(value)`` or ``Failure(kind, message, details)``; the HTTP layer
(api/routes.py) is the only place that turns a Failure into an error response.
``details`` is diagnostic data for logs and tests and is never sent to callers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Stable machine-readable error codes"""
    UNAUTHENTICATED = "unauthenticated"
    INVALID_ARGUMENT = "invalid_argument"
    CREDENTIAL_UNAVAILABLE = "credential_unavailable"
    GENERATION_CALL_FAILED = "generation_call_failed"
    MALFORMED_OUTPUT = "malformed_output"
    COUNT_MISMATCH = "count_mismatch"
    SCHEMA_VIOLATION = "schema_violation"
    NOT_FOUND = "not_found"
    INVALID_QUIZ_STATE = "invalid_quiz_state"
    PERMISSION_DENIED = "permission_denied"


# Kinds produced by the schema validator ("invalid AI output")
INVALID_OUTPUT_KINDS = frozenset({
    ErrorKind.MALFORMED_OUTPUT,
    ErrorKind.COUNT_MISMATCH,
    ErrorKind.SCHEMA_VIOLATION,
})


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """
    Tagged error result

    Attributes:
        kind: error kind (also the public error code)
        message: short human-readable message safe to show to the caller
        details: diagnostics (raw model text, counts, indexes); log only
    """
    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> str:
        return self.kind.value

    def to_public_dict(self) -> Dict[str, str]:
        """Caller-facing payload (no diagnostics)"""
        return {"code": self.code, "message": self.message}


Result = Union[Success[T], Failure]
