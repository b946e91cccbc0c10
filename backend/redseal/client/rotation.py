"""Timed highlight rotations for the landing page.

Each rotation owns its timers; `stop()` cancels them and must be called when
the owner goes away.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import threading

from redseal.client.catalog import SUGGESTIONS_PER_SET, TradeTopic


log = logging.getLogger(__name__)

HEADLINE_ROLES = (
    "Study Partner",
    "Career Coach",
    "Job Matcher",
    "Talent Scout",
    "Client Connector",
    "Pathway Assistant",
)

SUGGESTION_INTERVAL_SECONDS = 3.0
SUGGESTION_SET_INTERVAL_SECONDS = 12.0
HEADLINE_INTERVAL_SECONDS = 3.0
SECTOR_INTERVAL_SECONDS = 2.0


class ScheduledRotation:
    """Calls `on_tick` every `interval` seconds on a daemon timer until stopped."""

    def __init__(self, interval: float, on_tick: Callable[[], None]):
        self.interval = float(interval)
        self.on_tick = on_tick
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._running = False
        # bumped by start/stop; a tick only re-arms for the generation that armed it
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._running

    def _arm(self, generation: int) -> None:
        t = threading.Timer(self.interval, self._tick, args=(generation,))
        t.daemon = True
        self._timer = t
        t.start()

    def _tick(self, generation: int) -> None:
        with self._lock:
            if not self._running or generation != self._generation:
                return
        try:
            self.on_tick()
        except Exception:
            log.exception("rotation tick failed")
        finally:
            with self._lock:
                if self._running and generation == self._generation:
                    self._arm(generation)

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._arm(self._generation)

    def stop(self) -> None:
        with self._lock:
            self._running = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class SuggestionCarousel:
    """Highlights one suggestion at a time and pages through suggestion sets."""

    def __init__(self, trade: TradeTopic, *, per_set: int = SUGGESTIONS_PER_SET):
        self.trade = trade
        self.per_set = int(per_set)
        self.active_set = 0
        self.active_suggestion = 0
        self.hovering = False
        self._rotations = [
            ScheduledRotation(SUGGESTION_INTERVAL_SECONDS, self.tick_suggestion),
            ScheduledRotation(SUGGESTION_SET_INTERVAL_SECONDS, self.tick_set),
        ]

    @property
    def total_sets(self) -> int:
        return max(1, len(self.trade.suggestion_sets))

    @property
    def suggestions(self) -> tuple[str, ...]:
        sets = self.trade.suggestion_sets
        return sets[self.active_set].suggestions if sets else ()

    @property
    def highlighted(self) -> str | None:
        s = self.suggestions
        return s[self.active_suggestion] if self.active_suggestion < len(s) else None

    def reset(self) -> None:
        self.active_set = 0
        self.active_suggestion = 0

    def set_hovering(self, hovering: bool) -> None:
        self.hovering = bool(hovering)

    def tick_suggestion(self) -> None:
        if self.hovering:
            return
        self.active_suggestion = (self.active_suggestion + 1) % self.per_set

    def tick_set(self) -> None:
        if self.hovering:
            return
        self.active_set = (self.active_set + 1) % self.total_sets
        self.active_suggestion = 0

    def prev(self) -> None:
        if self.active_suggestion > 0:
            self.active_suggestion -= 1
        elif self.total_sets > 1:
            self.active_set = (self.active_set - 1) % self.total_sets
            self.active_suggestion = self.per_set - 1
        else:
            self.active_suggestion = self.per_set - 1

    def next(self) -> None:
        if self.active_suggestion < self.per_set - 1:
            self.active_suggestion += 1
        elif self.total_sets > 1:
            self.active_set = (self.active_set + 1) % self.total_sets
            self.active_suggestion = 0
        else:
            self.active_suggestion = 0

    def start(self) -> None:
        for r in self._rotations:
            r.start()

    def stop(self) -> None:
        for r in self._rotations:
            r.stop()


class HeadlineRotation:
    def __init__(self, roles: Sequence[str] = HEADLINE_ROLES, *, interval: float = HEADLINE_INTERVAL_SECONDS):
        self.roles = tuple(roles)
        self.index = 0
        self._rotation = ScheduledRotation(interval, self.tick)

    @property
    def current(self) -> str:
        return self.roles[self.index]

    def tick(self) -> None:
        self.index = (self.index + 1) % len(self.roles)

    def start(self) -> None:
        self._rotation.start()

    def stop(self) -> None:
        self._rotation.stop()


class SectorHighlight:
    """Cycles the highlighted sector until the visitor picks one."""

    def __init__(self, sectors: Sequence[str], *, interval: float = SECTOR_INTERVAL_SECONDS):
        self.sectors = tuple(sectors)
        self.index = 0
        self.selected: str | None = None
        self._rotation = ScheduledRotation(interval, self.tick)

    @property
    def highlighted(self) -> str | None:
        return self.sectors[self.index] if self.sectors else None

    def tick(self) -> None:
        if self.selected is not None or not self.sectors:
            return
        self.index = (self.index + 1) % len(self.sectors)

    def select(self, sector: str | None) -> None:
        self.selected = sector
        if sector is None:
            self.start()
        else:
            self.stop()

    def start(self) -> None:
        self._rotation.start()

    def stop(self) -> None:
        self._rotation.stop()
