from conftest import make_question

import redseal.routers.demo as demo_router
from redseal.core.config import settings
from redseal.schemas.demo import QuizQuestion
from redseal.services.llm import LlmError


def _chat_body(text: str = "What is Ohm's law?") -> dict:
    return {"messages": [{"role": "user", "content": text}], "trade": "Electrician"}


def _fake_stream(*chunks, fail_after: bool = False):
    def _stream(*, messages, system_prompt, **kwargs):
        assert "The user is studying for: Electrician" in system_prompt
        for c in chunks:
            yield c
        if fail_after:
            raise LlmError("request_failed:ReadTimeout")

    return _stream


def test_demo_chat_streams_data_frames(client, monkeypatch):
    monkeypatch.setattr(demo_router, "stream_chat_completion", _fake_stream("Ohm's law: ", 'V = "I" x R'))

    r = client.post("/api/demo/chat", json=_chat_body())
    assert r.status_code == 200
    assert r.headers["X-Vercel-AI-Data-Stream"] == "v1"
    assert r.headers["content-type"].startswith("text/plain")
    lines = r.text.splitlines()
    assert lines[0] == '0:"Ohm\'s law: "'
    assert lines[1] == '0:"V = \\"I\\" x R"'
    assert lines[-1] == 'd:{"finishReason":"stop"}'


def test_demo_chat_error_frame_mid_stream(client, monkeypatch):
    monkeypatch.setattr(demo_router, "stream_chat_completion", _fake_stream("partial", fail_after=True))

    r = client.post("/api/demo/chat", json=_chat_body())
    assert r.status_code == 200
    lines = r.text.splitlines()
    assert lines[0] == '0:"partial"'
    assert lines[-1].startswith("3:")


def test_demo_chat_upstream_failure_is_500(client, monkeypatch):
    def _stream(**kwargs):
        raise LlmError("request_failed:ConnectError")
        yield ""

    monkeypatch.setattr(demo_router, "stream_chat_completion", _stream)
    r = client.post("/api/demo/chat", json=_chat_body())
    assert r.status_code == 500
    assert r.json()["error_message"] == "Failed to generate response"


def test_demo_chat_without_llm_key_is_503(client, monkeypatch):
    monkeypatch.setattr(settings, "llm_api_key", None)
    r = client.post("/api/demo/chat", json=_chat_body())
    assert r.status_code == 503


def test_demo_chat_requires_messages(client):
    r = client.post("/api/demo/chat", json={"messages": [], "trade": "Electrician"})
    assert r.status_code == 422


def test_demo_chat_usage_gate_answers_402(client, monkeypatch):
    monkeypatch.setattr(settings, "demo_max_interactions", 2)
    monkeypatch.setattr(demo_router, "stream_chat_completion", _fake_stream("ok"))

    for _ in range(2):
        assert client.post("/api/demo/chat", json=_chat_body()).status_code == 200

    r = client.post("/api/demo/chat", json=_chat_body())
    assert r.status_code == 402
    body = r.json()
    assert body["ok"] is False
    assert body["error_code"] == "LIMIT_EXCEEDED"
    assert body["error_message"] == "Demo limit reached. Sign up to keep chatting!"
    assert body["limit"] == 2
    assert body["current_usage"] == 2
    assert body["suggested_plan"] == "basic"


def test_demo_usage_gate_fails_open_without_redis(client, monkeypatch):
    import redseal.core.usage_limit as usage_limit

    class _Down:
        def incr(self, key):
            raise ConnectionError("down")

    monkeypatch.setattr(settings, "demo_max_interactions", 0)
    monkeypatch.setattr(usage_limit, "get_redis", lambda: _Down())
    monkeypatch.setattr(demo_router, "stream_chat_completion", _fake_stream("ok"))

    r = client.post("/api/demo/chat", json=_chat_body())
    assert r.status_code == 200


def test_demo_quiz_returns_questions(client, monkeypatch):
    seen = {}

    def _generate(*, messages, trade, n_questions, **kwargs):
        seen.update(messages=messages, trade=trade, n=n_questions)
        return [QuizQuestion.model_validate(make_question(i, "B")) for i in range(n_questions)]

    monkeypatch.setattr(demo_router, "generate_quiz_questions", _generate)
    r = client.post(
        "/api/demo/quiz",
        json={
            "messages": [
                {"role": "user", "content": "Explain hydraulic cavitation"},
                {"role": "assistant", "content": "Cavitation happens when..."},
            ],
            "trade": "Heavy Equipment Technician",
        },
    )
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert len(body["questions"]) == settings.demo_quiz_question_count
    assert body["questions"][0]["correct_answer"] == "B"
    assert seen["trade"] == "Heavy Equipment Technician"
    assert len(seen["messages"]) == 2


def test_demo_quiz_generation_failure_is_500(client, monkeypatch):
    monkeypatch.setattr(demo_router, "generate_quiz_questions", lambda **kwargs: [])
    r = client.post("/api/demo/quiz", json=_chat_body())
    assert r.status_code == 500
    assert r.json()["error_message"] == "Failed to generate quiz questions"
