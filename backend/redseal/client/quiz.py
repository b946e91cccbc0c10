"""Quiz state for the demo chat.

Two orchestrators share one interface: `LocalQuizOrchestrator` generates
through `/api/demo/quiz` and scores in-process, `SessionQuizOrchestrator`
keeps a server-side session under `/api/chat/inline-quiz` and is subject to
the quiz quota.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import enum
import logging
import math
import time
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from redseal.core.config import settings
from redseal.schemas.demo import LIMIT_EXCEEDED, AnswerFeedback, AnswerProgress, QuizQuestion


log = logging.getLogger(__name__)


class QuizStatus(str, enum.Enum):
    loading = "loading"
    in_progress = "in_progress"
    completed = "completed"
    error = "error"
    limit_exceeded = "limit_exceeded"


@dataclass
class RecordedAnswer:
    question_id: str
    answer: str
    is_correct: bool
    time_spent: int


@dataclass
class QuizSession:
    questions: list[QuizQuestion] = field(default_factory=list)
    current_question: int = 0
    status: QuizStatus = QuizStatus.loading
    score: int = 0
    id: str = ""
    user_id: str | None = None
    answers: list[RecordedAnswer] = field(default_factory=list)
    context_summary: str | None = None
    error: str | None = None

    @property
    def current(self) -> QuizQuestion | None:
        if 0 <= self.current_question < len(self.questions):
            return self.questions[self.current_question]
        return None


@dataclass(frozen=True)
class UpgradePrompt:
    limit_type: str
    current_usage: int
    limit: int
    suggested_plan: str
    message: str


class QuizOrchestrator(Protocol):
    quiz: QuizSession | None
    current_feedback: AnswerFeedback | None
    is_generating: bool

    def start(self, transcript: list[dict[str, str]], topic: str | None) -> QuizSession | None: ...

    def submit_answer(self, letter: str) -> AnswerFeedback | None: ...

    def next(self) -> None: ...

    def reset(self) -> None: ...


def round_half_up(value: float) -> int:
    # 0.5 always rounds up, unlike Python's banker's rounding
    return int(math.floor(value + 0.5))


def _explanation(question: QuizQuestion, is_correct: bool) -> str:
    if question.explanation:
        return question.explanation
    return "Correct! Great job." if is_correct else f"The correct answer was {question.correct_answer}."


def _parse_questions(raw: Any) -> list[QuizQuestion]:
    if not isinstance(raw, list) or not raw:
        return []
    try:
        return [QuizQuestion.model_validate(q) for q in raw]
    except ValidationError:
        return []


class _BaseOrchestrator:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport)
        self.quiz: QuizSession | None = None
        self.current_feedback: AnswerFeedback | None = None
        self.is_generating = False

    def close(self) -> None:
        self._client.close()

    def next(self) -> None:
        self.current_feedback = None
        quiz = self.quiz
        if quiz is None or quiz.status != QuizStatus.in_progress:
            return
        nxt = quiz.current_question + 1
        if nxt >= len(quiz.questions):
            quiz.status = QuizStatus.completed
        else:
            quiz.current_question = nxt

    def reset(self) -> None:
        self.quiz = None
        self.current_feedback = None
        self.is_generating = False

    def _answerable(self) -> QuizQuestion | None:
        quiz = self.quiz
        if quiz is None or quiz.status != QuizStatus.in_progress:
            return None
        return quiz.current


class LocalQuizOrchestrator(_BaseOrchestrator):
    def start(self, transcript: list[dict[str, str]], topic: str | None) -> QuizSession | None:
        if self.is_generating:
            return None

        self.is_generating = True
        self.current_feedback = None
        self.quiz = QuizSession(status=QuizStatus.loading)
        try:
            r = self._client.post("/api/demo/quiz", json={"messages": list(transcript), "trade": topic})
            r.raise_for_status()
            data = r.json()
            questions = _parse_questions(data.get("questions")) if data.get("success") else []
            if not questions:
                raise ValueError("invalid quiz response")
            self.quiz = QuizSession(questions=questions, status=QuizStatus.in_progress)
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            log.warning("demo quiz generation failed: %s", type(e).__name__)
            self.quiz = None
        finally:
            self.is_generating = False
        return self.quiz

    def submit_answer(self, letter: str) -> AnswerFeedback | None:
        question = self._answerable()
        if question is None:
            return None
        quiz = self.quiz

        is_correct = letter == question.correct_answer
        points = round_half_up(100 / len(quiz.questions))
        if is_correct:
            quiz.score += points

        self.current_feedback = AnswerFeedback(
            is_correct=is_correct,
            explanation=_explanation(question, is_correct),
            correct_answer=question.correct_answer,
            progress=AnswerProgress(
                answered=quiz.current_question + 1,
                total=len(quiz.questions),
                score=quiz.score,
            ),
        )
        return self.current_feedback


class SessionQuizOrchestrator(_BaseOrchestrator):
    def __init__(self, base_url: str, **kwargs):
        super().__init__(base_url, **kwargs)
        self.upgrade_prompt: UpgradePrompt | None = None
        self._question_started = time.monotonic()

    def dismiss_upgrade_prompt(self) -> None:
        self.upgrade_prompt = None

    def start(
        self,
        transcript: list[dict[str, str]],
        topic: str | None,
        *,
        conversation_id: str = "demo",
        user_id: str | None = None,
        question_count: int = 5,
        difficulty: str | None = None,
    ) -> QuizSession | None:
        if self.is_generating:
            return None

        self.is_generating = True
        self.current_feedback = None
        self.quiz = QuizSession(status=QuizStatus.loading)
        try:
            r = self._client.post(
                "/api/chat/inline-quiz/generate",
                json={
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "messages": list(transcript),
                    "question_count": question_count,
                    "difficulty": difficulty,
                    "trade": topic,
                },
            )
            if r.status_code >= 400:
                try:
                    err = r.json()
                except ValueError:
                    err = {}
                if r.status_code == 402 and err.get("error_code") == LIMIT_EXCEEDED:
                    message = err.get("error_message") or err.get("message") or "Quiz limit reached. Upgrade to continue!"
                    self.upgrade_prompt = UpgradePrompt(
                        limit_type="quiz",
                        current_usage=int(err.get("current_usage") or 0),
                        limit=int(err.get("limit") or 3),
                        suggested_plan=str(err.get("suggested_plan") or "basic"),
                        message=message,
                    )
                    self.quiz = QuizSession(status=QuizStatus.limit_exceeded, error=message)
                    return self.quiz
                raise ValueError(err.get("error_message") or f"Failed to generate quiz: {r.status_code}")

            data = r.json()
            questions = _parse_questions(data.get("questions"))
            if not questions:
                raise ValueError("Invalid quiz response")
            self.quiz = QuizSession(
                questions=questions,
                status=QuizStatus.in_progress,
                id=str(data.get("inline_quiz_session_id") or ""),
                user_id=user_id,
                context_summary=data.get("context_summary"),
            )
            self._question_started = time.monotonic()
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            log.warning("inline quiz generation failed: %s", e)
            self.quiz = QuizSession(status=QuizStatus.error, error=str(e) or "Failed to generate quiz")
        finally:
            self.is_generating = False
        return self.quiz

    def submit_answer(self, letter: str) -> AnswerFeedback | None:
        question = self._answerable()
        if question is None:
            return None
        quiz = self.quiz
        time_spent = round_half_up(time.monotonic() - self._question_started)

        feedback: AnswerFeedback | None = None
        try:
            r = self._client.post(
                f"/api/chat/inline-quiz/{quiz.id}/answer",
                json={
                    "question_id": question.id,
                    "user_answer": letter,
                    "time_spent_seconds": time_spent,
                    "user_id": quiz.user_id,
                },
            )
            r.raise_for_status()
            feedback = AnswerFeedback.model_validate(r.json())
        except (httpx.HTTPError, ValueError) as e:
            log.warning("inline quiz answer failed, grading locally: %s", type(e).__name__)

        if feedback is None:
            is_correct = letter == question.correct_answer
            feedback = AnswerFeedback(
                is_correct=is_correct,
                explanation=_explanation(question, is_correct),
                correct_answer=question.correct_answer,
                progress=AnswerProgress(answered=quiz.current_question + 1, total=len(quiz.questions), score=0),
            )

        quiz.answers.append(
            RecordedAnswer(question_id=question.id, answer=letter, is_correct=feedback.is_correct, time_spent=time_spent)
        )
        correct = sum(1 for a in quiz.answers if a.is_correct)
        quiz.score = round_half_up(correct / len(quiz.questions) * 100)

        self.current_feedback = feedback
        return feedback

    def next(self) -> None:
        self._question_started = time.monotonic()
        super().next()

    def abandon(self) -> None:
        quiz = self.quiz
        try:
            if quiz is not None and quiz.id:
                self._client.post(f"/api/chat/inline-quiz/{quiz.id}/abandon")
        except httpx.HTTPError as e:
            log.warning("inline quiz abandon failed: %s", type(e).__name__)
        finally:
            self.reset()


def build_orchestrator(
    base_url: str,
    *,
    mode: str | None = None,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> LocalQuizOrchestrator | SessionQuizOrchestrator:
    m = (mode if mode is not None else settings.demo_quiz_mode or "local").strip().lower()
    if m == "session":
        return SessionQuizOrchestrator(base_url, timeout=timeout, transport=transport)
    if m == "local":
        return LocalQuizOrchestrator(base_url, timeout=timeout, transport=transport)
    raise ValueError(f"unknown quiz mode: {m!r}")
