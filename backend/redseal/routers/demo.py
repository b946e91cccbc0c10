from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from redseal.core import data_stream
from redseal.core.config import settings
from redseal.core.rate_limit import rate_limit
from redseal.core.usage_limit import demo_usage_gate
from redseal.schemas.demo import DemoChatRequest, DemoQuizRequest, DemoQuizResponse
from redseal.services.llm import LlmError, LlmNotConfigured, stream_chat_completion
from redseal.services.quiz_generation import generate_quiz_questions

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/demo", tags=["demo"])


DEMO_PROMPT = """You are RED AI, an expert study partner for Red Seal trade certification.

You're giving a FREE DEMO to a potential student on the landing page. Your goals:
1. Give a REAL, helpful answer to show the value of the platform
2. Keep responses concise (2-3 paragraphs) but ALWAYS complete your thoughts
3. Be engaging and make them want to sign up
4. End with a brief call-to-action like "Want to dive deeper? Sign up to continue!"

## YOUR KNOWLEDGE
You have deep knowledge of all 54 Red Seal trades including:
- Heavy Equipment Technician (421A)
- Automotive Service Technician
- Electrician (Construction & Industrial)
- Plumber, Welder, Millwright, Tool and Die Maker, and all others

## RESPONSE STYLE
- Start with the answer right away (no fluff)
- Use practical, real-world examples
- Reference Red Seal exam structure when relevant
- Keep it conversational and encouraging
- IMPORTANT: Always finish your sentences - never leave a thought incomplete

Remember: This is their first taste of RED AI. Make it count!"""


def demo_system_prompt(trade: str | None) -> str:
    t = (trade or "").strip()
    return f"{DEMO_PROMPT}\n\nThe user is studying for: {t}" if t else DEMO_PROMPT


@router.post("/chat")
def demo_chat(
    body: DemoChatRequest,
    _rl: object = rate_limit(key_prefix="demo_chat", limit=30),
    _usage: object = demo_usage_gate(
        kind="chat",
        limit=lambda: settings.demo_max_interactions,
        message="Demo limit reached. Sign up to keep chatting!",
    ),
):
    messages = [m.model_dump() for m in body.messages]
    log.info("demo chat trade=%s query=%r", body.trade, messages[-1]["content"][:100])

    deltas = stream_chat_completion(messages=messages, system_prompt=demo_system_prompt(body.trade))

    # Pull the first fragment before answering so upstream failures become a 500.
    try:
        first = next(deltas, "")
    except LlmNotConfigured as e:
        raise HTTPException(status_code=503, detail="language model not configured") from e
    except LlmError as e:
        raise HTTPException(status_code=500, detail="Failed to generate response") from e

    def _frames():
        if first:
            yield data_stream.text_frame(first)
        try:
            for delta in deltas:
                yield data_stream.text_frame(delta)
        except LlmError:
            log.warning("demo chat stream interrupted trade=%s", body.trade)
            yield data_stream.error_frame("stream interrupted")
            return
        yield data_stream.finish_frame()

    return StreamingResponse(
        _frames(),
        media_type="text/plain; charset=utf-8",
        headers={"X-Vercel-AI-Data-Stream": "v1", "Cache-Control": "no-cache"},
    )


@router.post("/quiz", response_model=DemoQuizResponse)
def demo_quiz(
    body: DemoQuizRequest,
    _rl: object = rate_limit(key_prefix="demo_quiz", limit=10),
):
    n = max(1, int(settings.demo_quiz_question_count))
    log.info("demo quiz generating %s questions trade=%s", n, body.trade)

    debug: dict = {}
    questions = generate_quiz_questions(
        messages=[m.model_dump() for m in body.messages],
        trade=body.trade,
        n_questions=n,
        debug_out=debug,
    )
    if not questions:
        log.warning("demo quiz generation failed debug=%s", debug)
        raise HTTPException(status_code=500, detail="Failed to generate quiz questions")

    return {"success": True, "questions": questions}
