from __future__ import annotations

import json
import logging
import math
import re
import time
import uuid
from typing import Any

from fastapi import HTTPException
import redis

from redseal.core.config import settings
from redseal.schemas.demo import AnswerFeedback, AnswerProgress, QuizQuestion


log = logging.getLogger(__name__)


def _session_key(session_id: str) -> str:
    return f"inline_quiz:{session_id}"


def normalize_letter(answer: str) -> str:
    # "A", "a", "A)", "(b)", "answer: c" -> first option letter
    m = re.search(r"(?<![A-Za-z])([A-Da-d])(?![A-Za-z])", answer or "")
    return m.group(1).upper() if m else ""


def percent_score(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(math.floor(correct / total * 100 + 0.5))


def context_summary(messages: list[dict[str, str]], *, limit: int = 160) -> str | None:
    for m in messages:
        if m.get("role") == "user" and (m.get("content") or "").strip():
            text = re.sub(r"\s+", " ", m["content"]).strip()
            return text if len(text) <= limit else text[: limit - 1].rstrip() + "…"
    return None


class InlineQuizStore:
    """Redis-backed inline quiz sessions, one JSON document per session id."""

    def __init__(self, r: redis.Redis):
        self.r = r

    def create(
        self,
        *,
        questions: list[QuizQuestion],
        conversation_id: str,
        user_id: str | None,
        summary: str | None,
    ) -> str:
        session_id = str(uuid.uuid4())
        payload = {
            "id": session_id,
            "conversation_id": conversation_id,
            "user_id": user_id,
            "questions": [q.model_dump() for q in questions],
            "answers": [],
            "context_summary": summary,
            "started_at": int(time.time()),
        }
        self.r.set(_session_key(session_id), json.dumps(payload), ex=max(1, int(settings.demo_inline_quiz_ttl_seconds)))
        return session_id

    def load(self, session_id: str) -> dict[str, Any]:
        raw = self.r.get(_session_key(session_id))
        if raw is None:
            raise HTTPException(status_code=404, detail="quiz session not found or expired")
        try:
            return json.loads(raw)
        except ValueError as e:
            raise HTTPException(status_code=409, detail="quiz session corrupted") from e

    def save(self, session: dict[str, Any]) -> None:
        key = _session_key(str(session["id"]))
        ttl = self.r.ttl(key)
        ex = int(ttl) if isinstance(ttl, int) and ttl > 0 else max(1, int(settings.demo_inline_quiz_ttl_seconds))
        self.r.set(key, json.dumps(session), ex=ex)

    def delete(self, session_id: str) -> bool:
        return bool(self.r.delete(_session_key(session_id)))

    def answer(
        self,
        session_id: str,
        *,
        question_id: str,
        user_answer: str,
        time_spent_seconds: int | None = None,
    ) -> AnswerFeedback:
        session = self.load(session_id)
        questions = [QuizQuestion.model_validate(q) for q in session.get("questions") or []]
        question = next((q for q in questions if q.id == question_id), None)
        if question is None:
            raise HTTPException(status_code=404, detail="question not found")

        answers: list[dict[str, Any]] = list(session.get("answers") or [])
        if any(a.get("question_id") == question_id for a in answers):
            raise HTTPException(status_code=409, detail="question already answered")

        letter = normalize_letter(user_answer)
        if not letter:
            raise HTTPException(status_code=400, detail="answer must be one of A, B, C, D")

        is_correct = letter == question.correct_answer
        answers.append(
            {
                "question_id": question_id,
                "answer": letter,
                "is_correct": is_correct,
                "time_spent": max(0, int(time_spent_seconds or 0)),
            }
        )
        session["answers"] = answers
        self.save(session)

        correct = sum(1 for a in answers if a.get("is_correct"))
        explanation = question.explanation or (
            "Correct! Great job." if is_correct else f"The correct answer was {question.correct_answer}."
        )
        return AnswerFeedback(
            is_correct=is_correct,
            explanation=explanation,
            correct_answer=question.correct_answer,
            progress=AnswerProgress(
                answered=len(answers),
                total=len(questions),
                score=percent_score(correct, len(questions)),
            ),
        )
