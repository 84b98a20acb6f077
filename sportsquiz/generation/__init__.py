# sportsquiz/generation/__init__.py

"""
퀴즈 생성 파이프라인

PromptBuilder → LLM → sanitize → validate → normalize → assemble
"""

from .prompt_builder import build_quiz_prompt
from .sanitizer import sanitize_model_output
from .schema_validator import (
    MultipleChoiceQuestion,
    TrueFalseQuestion,
    ValidatedQuestion,
    validate_generated_questions,
)
from .normalizer import normalize_questions
from .assembler import assemble_quiz_document, resolve_visibility
from .credentials import CredentialCache

__all__ = [
    "build_quiz_prompt",
    "sanitize_model_output",
    "MultipleChoiceQuestion",
    "TrueFalseQuestion",
    "ValidatedQuestion",
    "validate_generated_questions",
    "normalize_questions",
    "assemble_quiz_document",
    "resolve_visibility",
    "CredentialCache",
]
