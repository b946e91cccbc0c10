from redseal.routers import demo, emails, health, inline_quiz, integrations, locations, trades, waitlist

__all__ = [
    "demo",
    "emails",
    "health",
    "inline_quiz",
    "integrations",
    "locations",
    "trades",
    "waitlist",
]
