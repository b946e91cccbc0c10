from redseal.client.chat import FALLBACK_MESSAGE, ChatStreamError, DemoLimitReached, StreamingChatClient
from redseal.client.locations import LocationDataClient
from redseal.client.quiz import (
    LocalQuizOrchestrator,
    QuizOrchestrator,
    QuizSession,
    QuizStatus,
    SessionQuizOrchestrator,
    UpgradePrompt,
    build_orchestrator,
)
from redseal.client.session import DemoSession, DemoView, ViewState
from redseal.client.waitlist_form import WaitlistForm

__all__ = [
    "FALLBACK_MESSAGE",
    "ChatStreamError",
    "DemoLimitReached",
    "DemoSession",
    "DemoView",
    "LocalQuizOrchestrator",
    "LocationDataClient",
    "QuizOrchestrator",
    "QuizSession",
    "QuizStatus",
    "SessionQuizOrchestrator",
    "StreamingChatClient",
    "UpgradePrompt",
    "ViewState",
    "WaitlistForm",
    "build_orchestrator",
]
