from __future__ import annotations

import math
import random
from typing import Sequence

from .card import Card
from .clock import Scheduler, TimerHandle
from .deck import build_deck
from .types import CategoryEntry, Phase, RoundConfig

Event = dict[str, object]


class RoundObserver:
    """Presentation hooks fired by a Round. Every hook is optional."""

    def on_card_revealed(self, card: Card) -> None:
        pass

    def on_card_concealed(self, card: Card) -> None:
        pass

    def on_group_locked(self, cards: Sequence[Card]) -> None:
        pass

    def on_media_replay(self, card: Card) -> None:
        pass

    def on_win_presentation(self, active: bool) -> None:
        pass

    def on_round_complete(self, total_clicks: int, efficiency: int) -> None:
        pass


def efficiency_percent(deck_size: int, total_clicks: int) -> int:
    """Share of clicks that were strictly needed, as a whole percentage.

    Halves round up (8 cards in 10 clicks -> 80).
    """
    if total_clicks <= 0:
        return 0
    return int(math.floor(deck_size * 100 / total_clicks + 0.5))


class Round:
    """One play-through from a freshly shuffled deck to the win.

    Phases go active -> resolving_win -> complete. While active, a pending
    mismatch sets `input_locked` until its re-conceal timer fires.
    """

    def __init__(
        self,
        entries: Sequence[CategoryEntry],
        config: RoundConfig,
        scheduler: Scheduler,
        observer: RoundObserver | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config
        self.deck: list[Card] = build_deck(entries, config, rng)
        self.scheduler = scheduler
        self.observer = observer or RoundObserver()

        self.open_selection: list[Card] = []
        self.matched_groups = 0
        self.total_clicks = 0
        self.input_locked = False
        self.phase: Phase = "active"
        self.disposed = False
        self.event_log: list[Event] = []
        self._timers: list[TimerHandle] = []

    @property
    def group_count(self) -> int:
        return self.config.group_count

    @property
    def deck_size(self) -> int:
        return len(self.deck)

    @property
    def is_complete(self) -> bool:
        return self.phase == "complete"

    @property
    def pending_timers(self) -> list[TimerHandle]:
        return [t for t in self._timers if t.active]

    def position_of(self, card: Card) -> int:
        for i, c in enumerate(self.deck):
            if c is card:
                return i
        return -1

    def _in_selection(self, card: Card) -> bool:
        return any(c is card for c in self.open_selection)

    def _schedule(self, delay_ms: int, callback) -> TimerHandle:
        handle = self.scheduler.call_later(delay_ms, callback)
        self._timers = [t for t in self._timers if t.active]
        self._timers.append(handle)
        return handle

    def _reveal(self, card: Card) -> None:
        if not card.reveal():
            return
        self.total_clicks += 1
        self.event_log.append(
            {"type": "CARD_REVEALED", "position": self.position_of(card), "pair_key": card.pair_key}
        )
        self.observer.on_card_revealed(card)

    def _lock_group(self) -> None:
        group = list(self.open_selection)
        for c in group:
            c.lock()
        self.matched_groups += 1
        self.open_selection = []
        self.event_log.append(
            {"type": "GROUP_LOCKED", "pair_key": group[0].pair_key, "matched_groups": self.matched_groups}
        )
        self.observer.on_group_locked(group)

    def _start_mismatch(self, card: Card) -> None:
        self.input_locked = True
        multiplier = self.config.video_delay_multiplier if card.is_video else 1
        delay = self.config.mismatch_delay_ms * multiplier
        captured = tuple(self.open_selection) + (card,)

        def conceal_all() -> None:
            if self.disposed:
                return
            for c in captured:
                if c.conceal():
                    self.observer.on_card_concealed(c)
            self.open_selection = []
            self.input_locked = False
            self.event_log.append({"type": "MISMATCH_RESOLVED"})

        self.event_log.append(
            {"type": "MISMATCH", "positions": [self.position_of(c) for c in captured], "delay_ms": delay}
        )
        self._schedule(delay, conceal_all)

    def _check_win(self) -> None:
        if self.phase != "active" or self.matched_groups != self.group_count:
            return
        self.phase = "resolving_win"
        self.event_log.append({"type": "WIN_PRESENTATION"})
        self.observer.on_win_presentation(True)

        def finish() -> None:
            if self.disposed:
                return
            self.phase = "complete"
            efficiency = efficiency_percent(self.deck_size, self.total_clicks)
            self.event_log.append(
                {"type": "ROUND_COMPLETE", "total_clicks": self.total_clicks, "efficiency": efficiency}
            )
            self.observer.on_round_complete(self.total_clicks, efficiency)
            self.observer.on_win_presentation(False)

        self._schedule(self.config.win_delay_ms, finish)

    def select(self, position: int) -> None:
        """Apply a click on a board position. Invalid clicks are ignored."""
        if self.disposed or self.phase != "active" or self.input_locked:
            return
        if position < 0 or position >= len(self.deck):
            return
        card = self.deck[position]
        if card.locked:
            return

        if card.is_video:
            self.observer.on_media_replay(card)

        if not self.open_selection:
            self.open_selection.append(card)
        elif not self._in_selection(card) and len(self.open_selection) < self.config.group_size:
            if card.pair_key == self.open_selection[0].pair_key:
                self.open_selection.append(card)
                if len(self.open_selection) == self.config.group_size:
                    self._reveal(card)
                    self._lock_group()
            else:
                self._start_mismatch(card)

        if card.face == "hidden":
            self._reveal(card)

        self._check_win()

    def dispose(self) -> None:
        """Drop the round; pending re-conceal and win timers never fire."""
        self.disposed = True
        for t in self._timers:
            t.cancel()
        self._timers = []
