"""Sectors, trades and suggested starter questions for the landing-page demo."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
import json


SUGGESTIONS_PER_SET = 4


@dataclass(frozen=True)
class SuggestionSet:
    name: str
    suggestions: tuple[str, ...]


@dataclass(frozen=True)
class TradeTopic:
    name: str
    sector: str
    suggestion_sets: tuple[SuggestionSet, ...]


@dataclass(frozen=True)
class Sector:
    name: str
    trades: tuple[TradeTopic, ...]


def _parse_trade(raw: dict, *, sector: str) -> TradeTopic:
    sets = raw.get("suggestion_sets")
    if sets:
        parsed = tuple(SuggestionSet(name=str(s["name"]), suggestions=tuple(s["suggestions"])) for s in sets)
    else:
        parsed = (SuggestionSet(name="", suggestions=tuple(raw.get("suggestions") or ())),)
    return TradeTopic(name=str(raw["name"]), sector=sector, suggestion_sets=parsed)


@lru_cache(maxsize=1)
def load_sectors() -> tuple[Sector, ...]:
    raw = json.loads(resources.files("redseal.client").joinpath("data/trades.json").read_text(encoding="utf-8"))
    return tuple(
        Sector(name=str(s["name"]), trades=tuple(_parse_trade(t, sector=str(s["name"])) for t in s["trades"]))
        for s in raw["sectors"]
    )


def all_trades() -> list[TradeTopic]:
    return [t for s in load_sectors() for t in s.trades]


def find_trade(name: str) -> TradeTopic | None:
    n = (name or "").strip().lower()
    return next((t for t in all_trades() if t.name.lower() == n), None)
