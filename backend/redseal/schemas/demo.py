from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


ANSWER_LETTERS = ("A", "B", "C", "D")

# error_code carried by 402 responses when a demo allowance is spent
LIMIT_EXCEEDED = "LIMIT_EXCEEDED"


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class DemoChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(min_length=1)
    trade: str | None = None


class DemoQuizRequest(BaseModel):
    messages: list[ChatMessage] = Field(min_length=1)
    trade: str | None = None


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question_text: str
    choice_a: str
    choice_b: str
    choice_c: str
    choice_d: str
    correct_answer: Literal["A", "B", "C", "D"]
    explanation: str | None = None
    topic: str | None = None
    block_name: str | None = None
    difficulty: Literal["foundation", "intermediate", "advanced"] | None = None

    def choices(self) -> dict[str, str]:
        return {"A": self.choice_a, "B": self.choice_b, "C": self.choice_c, "D": self.choice_d}


class DemoQuizResponse(BaseModel):
    success: bool
    questions: list[QuizQuestion]


class AnswerProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    answered: int
    total: int
    score: int


class AnswerFeedback(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_correct: bool
    explanation: str
    correct_answer: str
    progress: AnswerProgress


class InlineQuizGenerateRequest(BaseModel):
    conversation_id: str
    user_id: str | None = None
    message_ids: list[str] | None = None
    messages: list[ChatMessage] = Field(default_factory=list)
    question_count: int = Field(default=5, ge=1, le=10)
    difficulty: Literal["foundation", "intermediate", "advanced"] | None = None
    trade: str | None = None


class InlineQuizGenerateResponse(BaseModel):
    inline_quiz_session_id: str
    questions: list[QuizQuestion]
    context_summary: str | None = None


class InlineQuizAnswerRequest(BaseModel):
    question_id: str
    user_answer: str
    time_spent_seconds: int | None = None
    user_id: str | None = None


class InlineQuizAbandonResponse(BaseModel):
    ok: bool
    abandoned: bool
