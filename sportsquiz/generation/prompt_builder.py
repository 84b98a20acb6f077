# sportsquiz/generation/prompt_builder.py

"""
퀴즈 생성 프롬프트 빌더 (순수 함수, I/O 없음)

같은 QuizConfig에는 항상 같은 문자열을 만든다.
"""
from typing import Dict

from sportsquiz.schemas.quiz import QuizConfig, QuizType


MULTIPLE_CHOICE_LABELS = ("A", "B", "C", "D")
TRUE_FALSE_OPTIONS = ("True", "False")

_QUESTION_KIND: Dict[str, str] = {
    "multiple_choice": "multiple-choice questions",
    "true_false": "True/False questions",
}

_QUESTION_RULE: Dict[str, str] = {
    "multiple_choice": "Each question must have exactly 4 options.",
    "true_false": "Each question must be a statement that is either definitively True or False.",
}

_RESPONSE_FORMAT: Dict[str, str] = {
    "multiple_choice": (
        'question (string), options (array of exactly 4 strings, e.g., '
        '["A. Option 1", "B. Option 2", "C. Option 3", "D. Option 4"]), '
        'and answer (string, one of "A", "B", "C", or "D").'
    ),
    "true_false": (
        'question (string), options (array containing ONLY "True" and "False"), '
        'and answer (string, either "True" or "False").'
    ),
}


def _build_focus(config: QuizConfig) -> str:
    parts = [f"about {config.category}"]
    if config.difficulty:
        parts.append(f"with {config.difficulty} difficulty")
    if config.team:
        parts.append(f"focused on {config.team}")
    if config.event:
        parts.append(f"about the {config.event}")
    if config.country:
        parts.append(f"in {config.country}")
    return " ".join(parts)


def response_format_for(quiz_type: QuizType) -> str:
    return _RESPONSE_FORMAT[quiz_type]


def build_quiz_prompt(config: QuizConfig) -> str:
    """
    QuizConfig → 생성 지시문

    지시문에는 (a) 정확한 문항 수, (b) 퀴즈 유형별 객체 형태,
    (c) JSON 외 텍스트 금지가 명시된다.
    """
    count = config.number_of_questions
    return (
        f"You are a professional sports quiz generator. "
        f"Generate exactly {count} {_QUESTION_KIND[config.quiz_type]} {_build_focus(config)}. "
        f"{_QUESTION_RULE[config.quiz_type]}\n\n"
        f"Return ONLY a JSON array of exactly {count} such objects, parsable by a strict JSON parser. "
        f"Each object must have these properties: {response_format_for(config.quiz_type)} "
        f"DO NOT add explanations, markdown, code fences, or any text before or after the JSON array."
    )
