from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import enum
import logging
from urllib.parse import quote

from redseal.client.chat import FALLBACK_MESSAGE, ChatStreamError, DemoLimitReached, StreamingChatClient
from redseal.client.quiz import QuizOrchestrator, QuizSession, QuizStatus
from redseal.client.rotation import SuggestionCarousel
from redseal.schemas.demo import AnswerFeedback, ChatMessage


log = logging.getLogger(__name__)

SIGNUP_PATH = "/get-started/student"


class ViewState(str, enum.Enum):
    idle = "idle"
    chatting = "chatting"
    limit_reached = "limit_reached"


@dataclass(frozen=True)
class DemoView:
    state: ViewState
    transcript: tuple[ChatMessage, ...]
    streaming_text: str
    is_loading: bool
    input_enabled: bool
    can_start_quiz: bool
    is_generating_quiz: bool
    quiz_status: QuizStatus | None
    quiz_completed: bool
    score: int | None
    score_message: str | None
    signup_url: str


def score_message(score: int) -> str:
    return "Nice work!" if score >= 50 else "Keep practicing!"


class DemoSession:
    """Landing-page demo: one topic, one transcript, at most one quiz.

    Changing the topic is the only way to clear the transcript, the quiz and
    the interaction counter, and it clears all three together.
    """

    def __init__(
        self,
        chat_client: StreamingChatClient,
        orchestrator: QuizOrchestrator,
        *,
        max_interactions: int = 5,
        carousel_factory: Callable[[str], SuggestionCarousel | None] | None = None,
    ):
        self.chat_client = chat_client
        self.orchestrator = orchestrator
        self.max_interactions = int(max_interactions)
        self._carousel_factory = carousel_factory

        self.topic: str | None = None
        self.carousel: SuggestionCarousel | None = None
        self._transcript: list[ChatMessage] = []
        self.streaming_text = ""
        self.interactions = 0
        self.limit_reached = False
        self.is_loading = False

    @property
    def transcript(self) -> list[ChatMessage]:
        return list(self._transcript)

    @property
    def quiz(self) -> QuizSession | None:
        return self.orchestrator.quiz

    def select_topic(self, trade: str) -> None:
        self._transcript = []
        self.streaming_text = ""
        self.interactions = 0
        self.limit_reached = False
        self.orchestrator.reset()

        if self.carousel is not None:
            self.carousel.stop()
        self.carousel = self._carousel_factory(trade) if self._carousel_factory is not None else None
        if self.carousel is not None:
            self.carousel.start()

        self.topic = trade
        log.debug("demo topic selected trade=%s", trade)

    def _on_delta(self, callback: Callable[[str], None] | None) -> Callable[[str], None]:
        def _update(buffer: str) -> None:
            self.streaming_text = buffer
            if callback is not None:
                callback(buffer)

        return _update

    def send(self, text: str, on_delta: Callable[[str], None] | None = None) -> ChatMessage | None:
        """Send one user turn and return the assistant message appended for it, if any."""

        content = (text or "").strip()
        if not content or self.is_loading or self.limit_reached:
            return None

        user_message = ChatMessage(role="user", content=content)
        self._transcript.append(user_message)
        self.is_loading = True
        self.streaming_text = ""

        reply: ChatMessage | None = None
        try:
            full = self.chat_client.stream_reply(
                [m.model_dump() for m in self._transcript],
                self.topic,
                on_delta=self._on_delta(on_delta),
            )
            if full:
                reply = ChatMessage(role="assistant", content=full)
                self._transcript.append(reply)
                self.interactions += 1
                if self.interactions >= self.max_interactions:
                    self.limit_reached = True
        except DemoLimitReached:
            # the gated turn leaves no trace in the transcript
            if self._transcript and self._transcript[-1] is user_message:
                self._transcript.pop()
            self.limit_reached = True
        except ChatStreamError as e:
            log.warning("demo chat failed: %s", e)
            reply = ChatMessage(role="assistant", content=FALLBACK_MESSAGE)
            self._transcript.append(reply)
        finally:
            self.is_loading = False
            self.streaming_text = ""
        return reply

    @property
    def can_start_quiz(self) -> bool:
        quiz = self.orchestrator.quiz
        quiz_free = quiz is None or quiz.status == QuizStatus.error
        has_reply = any(m.role == "assistant" for m in self._transcript)
        return has_reply and quiz_free and not self.orchestrator.is_generating and not self.is_loading

    def start_quiz(self) -> QuizSession | None:
        if not self.can_start_quiz:
            return None
        snapshot = [m.model_dump() for m in self._transcript]
        return self.orchestrator.start(snapshot, self.topic)

    def submit_answer(self, letter: str) -> AnswerFeedback | None:
        # answer buttons are disabled while feedback is showing
        if self.orchestrator.current_feedback is not None:
            return None
        return self.orchestrator.submit_answer(letter)

    def next_question(self) -> None:
        self.orchestrator.next()

    @property
    def signup_url(self) -> str:
        if not self.topic:
            return SIGNUP_PATH
        return f"{SIGNUP_PATH}?trade={quote(self.topic, safe='')}"

    @property
    def view_state(self) -> DemoView:
        if self.limit_reached:
            state = ViewState.limit_reached
        elif self._transcript or self.is_loading:
            state = ViewState.chatting
        else:
            state = ViewState.idle

        quiz = self.orchestrator.quiz
        completed = quiz is not None and quiz.status == QuizStatus.completed
        return DemoView(
            state=state,
            transcript=tuple(self._transcript),
            streaming_text=self.streaming_text,
            is_loading=self.is_loading,
            input_enabled=not self.limit_reached and not self.is_loading,
            can_start_quiz=self.can_start_quiz,
            is_generating_quiz=self.orchestrator.is_generating,
            quiz_status=quiz.status if quiz is not None else None,
            quiz_completed=completed,
            score=quiz.score if quiz is not None else None,
            score_message=score_message(quiz.score) if completed else None,
            signup_url=self.signup_url,
        )

    def close(self) -> None:
        if self.carousel is not None:
            self.carousel.stop()
            self.carousel = None
