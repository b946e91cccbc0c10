from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

from pydantic import ValidationError

from redseal.schemas.demo import ANSWER_LETTERS, QuizQuestion
from redseal.services.llm import complete_chat


log = logging.getLogger(__name__)


DEMO_BLOCK_NAME = "Demo Quiz"


def _clean(s: object) -> str:
    return re.sub(r"\s+", " ", str(s or "").strip()).strip()


def _extract_json(text: str) -> dict[str, Any] | None:
    if not text:
        return None

    s = text.strip()
    if s.startswith("```"):
        s = re.sub(r"^```(?:json)?\s*", "", s)
        s = re.sub(r"\s*```$", "", s)

    if s.startswith("{") and s.endswith("}"):
        try:
            return json.loads(s)
        except ValueError:
            pass

    m = re.search(r"\{[\s\S]*\}", s)
    if not m:
        return None

    try:
        return json.loads(m.group(0))
    except ValueError:
        return None


def _correct_letter_from_index(idx: object) -> str:
    try:
        i = int(idx)
    except (TypeError, ValueError):
        return ""
    if 0 <= i < len(ANSWER_LETTERS):
        return ANSWER_LETTERS[i]
    return ""


def _strip_label(option: str) -> str:
    o = option.strip()
    for prefix in ("a)", "b)", "c)", "d)", "a.", "b.", "c.", "d."):
        if o.lower().startswith(prefix):
            return o[len(prefix) :].strip()
    return o


def _pick_correct_answer(*, correct_raw: object, correct_index: object, options: list[str]) -> str:
    # explicit index wins
    letter = _correct_letter_from_index(correct_index)
    if letter:
        return letter

    s = str(correct_raw or "").strip()
    if s:
        first = s[:1].upper()
        if first in ANSWER_LETTERS and (len(s) == 1 or not s[1].isalpha()):
            return first

    # answer given as the option text
    if s:
        norm = _clean(s).lower()
        for i, opt in enumerate(options[:4]):
            if _clean(_strip_label(opt)).lower() == norm:
                return ANSWER_LETTERS[i]

    return ""


def _options_of(item: dict[str, Any]) -> list[str]:
    direct = [item.get(f"choice_{x.lower()}") for x in ANSWER_LETTERS]
    if all(isinstance(x, str) and x.strip() for x in direct):
        return [str(x).strip() for x in direct]

    opts = None
    for k in ("options", "choices", "answers", "variants"):
        v = item.get(k)
        if isinstance(v, list):
            opts = v
            break
        if isinstance(v, dict):
            opts = [v.get(x) or v.get(x.lower()) for x in ANSWER_LETTERS]
            break
    if not opts:
        return []
    return [_strip_label(str(o or "")) for o in opts if str(o or "").strip()]


def normalize_question(item: object, *, qid: str, topic_fallback: str | None = None) -> QuizQuestion | None:
    """Map one model-produced question object onto `QuizQuestion`, or None if unusable."""
    if not isinstance(item, dict):
        return None

    text = _clean(item.get("question_text") or item.get("question") or item.get("prompt") or "")
    if len(text) < 8:
        return None

    options = _options_of(item)
    if len(options) != 4:
        return None
    if len({_clean(o).lower() for o in options}) != 4:
        return None

    correct = _pick_correct_answer(
        correct_raw=item.get("correct_answer") or item.get("answer") or item.get("correct"),
        correct_index=item.get("correct_index") if item.get("correct_index") is not None else item.get("answer_index"),
        options=options,
    )
    if correct not in ANSWER_LETTERS:
        return None

    explanation = _clean(item.get("explanation") or item.get("rationale") or "") or None
    topic = _clean(item.get("topic") or "") or topic_fallback

    try:
        return QuizQuestion(
            id=qid,
            question_text=text,
            choice_a=options[0],
            choice_b=options[1],
            choice_c=options[2],
            choice_d=options[3],
            correct_answer=correct,
            explanation=explanation,
            topic=topic,
            block_name=DEMO_BLOCK_NAME,
            difficulty=item.get("difficulty") if item.get("difficulty") in {"foundation", "intermediate", "advanced"} else None,
        )
    except ValidationError:
        return None


def parse_quiz_questions(
    raw: str,
    *,
    n_questions: int,
    id_prefix: str,
    topic_fallback: str | None = None,
    debug_out: dict[str, Any] | None = None,
) -> list[QuizQuestion]:
    def _set_debug(error: str) -> None:
        if debug_out is None:
            return
        debug_out["error"] = error

    obj = _extract_json(raw)
    if not obj:
        _set_debug("invalid_json")
        return []

    items = None
    for k in ("questions", "items", "data", "result"):
        v = obj.get(k)
        if isinstance(v, list):
            items = v
            break
    if items is None and any(x in obj for x in ("question_text", "question", "prompt")):
        items = [obj]
    if not items:
        _set_debug("schema_validation_failed")
        return []

    out: list[QuizQuestion] = []
    seen: set[str] = set()
    for it in items:
        q = normalize_question(it, qid=f"{id_prefix}-{len(out)}", topic_fallback=topic_fallback)
        if q is None:
            continue
        key = q.question_text.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(q)
        if len(out) >= int(n_questions):
            break

    if not out:
        _set_debug("no_valid_questions")
    return out


def conversation_context(messages: list[dict[str, str]]) -> str:
    return "\n".join(f"{m.get('role')}: {m.get('content')}" for m in messages)


def build_quiz_prompt(*, messages: list[dict[str, str]], trade: str | None, n_questions: int) -> str:
    n = int(n_questions)
    return (
        f"You are creating Red Seal certification exam questions for a {trade or 'trades'} student.\n\n"
        "Based on this conversation that just happened:\n"
        "---\n"
        f"{conversation_context(messages)[:12000]}\n"
        "---\n\n"
        f"Generate exactly {n} multiple-choice exam questions that:\n"
        "1. Test the knowledge discussed in the conversation above\n"
        "2. Are directly relevant to what was asked/answered\n"
        "3. Are at Red Seal exam difficulty level\n"
        "4. Each has 4 plausible answer choices (only one correct)\n"
        "5. Each has a clear, educational explanation\n"
        f"6. Progress from easier to harder (question 1 = foundational, question {n} = more challenging)\n\n"
        "The questions should feel like natural follow-up quizzes to test if the student understood what was just explained.\n\n"
        "IMPORTANT: Vary the correct answers - don't make them all the same letter. Distribute A, B, C, D across the questions.\n\n"
        'Return ONLY JSON, no Markdown: {"questions": [{"question_text": "...", "choice_a": "...", '
        '"choice_b": "...", "choice_c": "...", "choice_d": "...", "correct_answer": "A|B|C|D", '
        '"explanation": "...", "topic": "..."}]}'
    )


def generate_quiz_questions(
    *,
    messages: list[dict[str, str]],
    trade: str | None,
    n_questions: int = 3,
    id_prefix: str | None = None,
    debug_out: dict[str, Any] | None = None,
) -> list[QuizQuestion]:
    """Generate exactly `n_questions` questions from a chat transcript.

    Returns [] when the model output cannot supply that many valid questions.
    """

    prefix = id_prefix or f"demo-{int(time.time() * 1000)}"
    raw = complete_chat(
        messages=[{"role": "user", "content": build_quiz_prompt(messages=messages, trade=trade, n_questions=n_questions)}],
        debug_out=debug_out,
    )
    if not raw:
        return []

    questions = parse_quiz_questions(
        raw,
        n_questions=n_questions,
        id_prefix=prefix,
        topic_fallback=trade,
        debug_out=debug_out,
    )
    if len(questions) < int(n_questions):
        if debug_out is not None:
            debug_out.setdefault("error", "too_few_questions")
            debug_out["valid_questions"] = len(questions)
        log.info("quiz generation produced %s/%s valid questions", len(questions), n_questions)
        return []
    return questions
