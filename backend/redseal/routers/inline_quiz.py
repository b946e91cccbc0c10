from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException

from redseal.core.config import settings
from redseal.core.rate_limit import rate_limit
from redseal.core.redis_client import get_redis
from redseal.core.usage_limit import demo_usage_gate
from redseal.schemas.demo import (
    AnswerFeedback,
    InlineQuizAbandonResponse,
    InlineQuizAnswerRequest,
    InlineQuizGenerateRequest,
    InlineQuizGenerateResponse,
)
from redseal.services.inline_quiz import InlineQuizStore, context_summary
from redseal.services.quiz_generation import generate_quiz_questions

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat/inline-quiz", tags=["inline-quiz"])


@router.post("/generate", response_model=InlineQuizGenerateResponse)
def generate_inline_quiz(
    body: InlineQuizGenerateRequest,
    _rl: object = rate_limit(key_prefix="inline_quiz_generate", limit=10),
    _usage: object = demo_usage_gate(
        kind="inline_quiz",
        limit=lambda: settings.demo_inline_quiz_limit,
        message="Quiz limit reached. Upgrade to continue!",
    ),
):
    messages = [m.model_dump() for m in body.messages if m.content.strip()]
    if not messages:
        raise HTTPException(status_code=400, detail="messages are required")

    debug: dict = {}
    questions = generate_quiz_questions(
        messages=messages,
        trade=body.trade,
        n_questions=body.question_count,
        id_prefix=f"iq-{int(time.time() * 1000)}",
        debug_out=debug,
    )
    if not questions:
        log.warning("inline quiz generation failed conversation=%s debug=%s", body.conversation_id, debug)
        raise HTTPException(status_code=500, detail="Failed to generate quiz")

    summary = context_summary(messages)
    session_id = InlineQuizStore(get_redis()).create(
        questions=questions,
        conversation_id=body.conversation_id,
        user_id=body.user_id,
        summary=summary,
    )
    return {"inline_quiz_session_id": session_id, "questions": questions, "context_summary": summary}


@router.post("/{session_id}/answer", response_model=AnswerFeedback)
def answer_inline_quiz(
    session_id: str,
    body: InlineQuizAnswerRequest,
    _rl: object = rate_limit(key_prefix="inline_quiz_answer", limit=60),
):
    return InlineQuizStore(get_redis()).answer(
        session_id,
        question_id=body.question_id,
        user_answer=body.user_answer,
        time_spent_seconds=body.time_spent_seconds,
    )


@router.post("/{session_id}/abandon", response_model=InlineQuizAbandonResponse)
def abandon_inline_quiz(session_id: str):
    abandoned = InlineQuizStore(get_redis()).delete(session_id)
    return {"ok": True, "abandoned": abandoned}
