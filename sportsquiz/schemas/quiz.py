# sportsquiz/schemas/quiz.py

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


QuizType = Literal["multiple_choice", "true_false"]
Difficulty = Literal["easy", "medium", "hard"]
Visibility = Literal["global", "private"]
QuizStatus = Literal["active", "deleted"]

MIN_QUESTIONS = 1
MAX_QUESTIONS = 20
DEFAULT_DIFFICULTY: Difficulty = "medium"
DEFAULT_VISIBILITY: Visibility = "private"


class CamelModel(BaseModel):
    """Wire format is camelCase; Python attributes stay snake_case"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Requester(BaseModel):
    """Authenticated caller identity (resolved outside the core)"""
    user_id: str = Field(..., min_length=1, description="Caller user id")
    is_admin: bool = Field(False, description="Administrative capability flag")


class QuizConfig(CamelModel):
    """GenerateQuiz request. Unknown fields are ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: Optional[str] = Field(None, description="Quiz title (default: 'Generated Quiz - <category>')")
    category: str = Field(..., description="Sports topic, non-empty after trim")
    difficulty: Optional[Difficulty] = Field(None, description="easy, medium, hard (default: medium)")
    number_of_questions: Annotated[int, Field(strict=True, ge=MIN_QUESTIONS, le=MAX_QUESTIONS)]
    quiz_type: QuizType = Field(..., description="multiple_choice or true_false")
    team: Optional[str] = None
    event: Optional[str] = None
    country: Optional[str] = None
    visibility: Optional[Visibility] = Field(None, description="Advisory; only admins may publish globally")

    @field_validator("category")
    @classmethod
    def _category_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category is required and must be a non-empty string.")
        return value

    @field_validator("title", "team", "event", "country")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def resolved_difficulty(self) -> Difficulty:
        return self.difficulty or DEFAULT_DIFFICULTY

    @property
    def requested_visibility(self) -> Visibility:
        return self.visibility or DEFAULT_VISIBILITY


class QuizQuestion(CamelModel):
    """Persisted question (answer key included)"""
    id: str
    text: str
    type: QuizType
    options: List[str] = Field(default_factory=list)
    correct_answer: str


class PlayerQuestion(CamelModel):
    """Question as shown to a player (no answer)"""
    id: str
    text: str
    type: QuizType
    options: List[str] = Field(default_factory=list)


class Quiz(CamelModel):
    """Persisted quiz aggregate (collection: quizzes)"""
    id: str
    title: str
    category: str
    difficulty: Difficulty
    quiz_type: QuizType
    team: str = ""
    event: str = ""
    country: str = ""
    questions: List[QuizQuestion]
    created_by: str
    visibility: Visibility
    status: QuizStatus = "active"
    created_at: Optional[int] = Field(None, description="Server timestamp (epoch millis)")


class PlayerQuiz(CamelModel):
    """GetQuiz response"""
    id: str
    title: str
    category: str
    difficulty: Difficulty
    quiz_type: QuizType
    team: str = ""
    event: str = ""
    country: str = ""
    questions: List[PlayerQuestion]
    created_by: str
    visibility: Visibility
    status: QuizStatus
    created_at: Optional[int] = None

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "PlayerQuiz":
        data = quiz.model_dump(exclude={"questions"})
        data["questions"] = [
            PlayerQuestion(id=q.id, text=q.text, type=q.type, options=q.options)
            for q in quiz.questions
        ]
        return cls(**data)


class QuizSummary(CamelModel):
    """ListQuizzes item"""
    id: str
    title: str
    category: str
    difficulty: Difficulty
    quiz_type: QuizType
    team: str = ""
    event: str = ""
    country: str = ""
    created_by: str
    visibility: Visibility
    status: QuizStatus
    created_at: Optional[int] = None
    question_count: int

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizSummary":
        data = quiz.model_dump(exclude={"questions"})
        return cls(**data, question_count=len(quiz.questions))


class QuizFilter(CamelModel):
    """Equality filters for ListQuizzes"""
    title: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    team: Optional[str] = None
    event: Optional[str] = None
    country: Optional[str] = None
    visibility: Optional[Visibility] = None
    created_by: Optional[str] = None
    status: Optional[QuizStatus] = None
    quiz_type: Optional[QuizType] = None

    def to_store_filters(self) -> dict:
        """camelCase document field -> value, unset filters dropped"""
        return self.model_dump(by_alias=True, exclude_none=True)


class VisibilityUpdateRequest(CamelModel):
    visibility: Visibility
