from __future__ import annotations

import random
from typing import Sequence

import pytest

from memorygame.engine.card import Card
from memorygame.engine.clock import VirtualClock
from memorygame.engine.round import Round, RoundObserver, efficiency_percent
from memorygame.engine.serialize import snapshot
from memorygame.engine.types import CategoryEntry, InsufficientContentError, RoundConfig


class Recorder(RoundObserver):
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []
        self.completed: list[tuple[int, int]] = []

    def on_card_revealed(self, card: Card) -> None:
        self.events.append(("revealed", card.pair_key))

    def on_card_concealed(self, card: Card) -> None:
        self.events.append(("concealed", card.pair_key))

    def on_group_locked(self, cards: Sequence[Card]) -> None:
        self.events.append(("locked", len(cards)))

    def on_media_replay(self, card: Card) -> None:
        self.events.append(("replay", card.pair_key))

    def on_win_presentation(self, active: bool) -> None:
        self.events.append(("win", active))

    def on_round_complete(self, total_clicks: int, efficiency: int) -> None:
        self.completed.append((total_clicks, efficiency))


def _entries(n: int, video: bool = False) -> list[CategoryEntry]:
    if video:
        return [CategoryEntry(text=f"e{i}", video=f"assets/c/videos/{i}.mp4") for i in range(n)]
    return [CategoryEntry(text=f"e{i}") for i in range(n)]


def _new_round(
    group_size: int = 2,
    group_count: int = 2,
    entries: list[CategoryEntry] | None = None,
    seed: int = 5,
) -> tuple[Round, VirtualClock, Recorder]:
    clock = VirtualClock()
    rec = Recorder()
    cfg = RoundConfig(group_size=group_size, group_count=group_count)
    rnd = Round(entries or _entries(group_count), cfg, scheduler=clock, observer=rec, rng=random.Random(seed))
    return rnd, clock, rec


def _positions(rnd: Round) -> dict[int, list[int]]:
    out: dict[int, list[int]] = {}
    for i, c in enumerate(rnd.deck):
        out.setdefault(c.pair_key, []).append(i)
    return out


def _mismatch_pair(rnd: Round) -> tuple[int, int]:
    groups = _positions(rnd)
    return groups[0][0], groups[1][0]


def test_first_select_reveals_and_counts() -> None:
    rnd, _clock, rec = _new_round()
    rnd.select(0)
    card = rnd.deck[0]
    assert card.face == "revealed"
    assert card.reveal_clicks == 1
    assert rnd.total_clicks == 1
    assert rnd.open_selection == [card]
    assert rec.events == [("revealed", card.pair_key)]


def test_matching_group_in_any_order_locks() -> None:
    rnd, _clock, rec = _new_round(group_size=3, group_count=2)
    a = list(reversed(_positions(rnd)[1]))
    for pos in a:
        rnd.select(pos)

    assert rnd.matched_groups == 1
    assert rnd.open_selection == []
    assert all(rnd.deck[p].locked and rnd.deck[p].face == "revealed" for p in a)
    assert ("locked", 3) in rec.events
    assert rnd.total_clicks == 3
    assert not rnd.input_locked


def test_mismatch_locks_input_until_timer_fires() -> None:
    rnd, clock, rec = _new_round()
    p0, p1 = _mismatch_pair(rnd)
    rnd.select(p0)
    rnd.select(p1)

    assert rnd.input_locked
    assert rnd.deck[p0].face == "revealed"
    assert rnd.deck[p1].face == "revealed"
    assert [t.delay_ms for t in clock.pending] == [1000]

    clock.advance(999)
    assert rnd.input_locked
    assert rnd.deck[p1].face == "revealed"

    clock.advance(1)
    assert not rnd.input_locked
    assert rnd.deck[p0].face == "hidden"
    assert rnd.deck[p1].face == "hidden"
    assert rnd.open_selection == []
    assert rec.events.count(("concealed", rnd.deck[p0].pair_key)) == 1
    assert rnd.total_clicks == 2


def test_video_mismatch_uses_longer_delay() -> None:
    rnd, clock, _rec = _new_round(entries=_entries(2, video=True))
    groups = _positions(rnd)
    # mismatch on a video card
    text0 = next(p for p in groups[0] if not rnd.deck[p].is_video)
    video1 = next(p for p in groups[1] if rnd.deck[p].is_video)
    rnd.select(text0)
    rnd.select(video1)
    assert [t.delay_ms for t in clock.pending] == [4000]


def test_text_mismatch_on_video_deck_uses_base_delay() -> None:
    rnd, clock, _rec = _new_round(entries=_entries(2, video=True))
    groups = _positions(rnd)
    video0 = next(p for p in groups[0] if rnd.deck[p].is_video)
    text1 = next(p for p in groups[1] if not rnd.deck[p].is_video)
    rnd.select(video0)
    rnd.select(text1)
    assert [t.delay_ms for t in clock.pending] == [1000]


def test_select_while_input_locked_is_ignored() -> None:
    rnd, _clock, _rec = _new_round(group_count=3, entries=_entries(3))
    p0, p1 = _mismatch_pair(rnd)
    rnd.select(p0)
    rnd.select(p1)
    before = snapshot(rnd)

    other = _positions(rnd)[2][0]
    rnd.select(other)
    assert snapshot(rnd) == before


def test_select_locked_card_is_ignored() -> None:
    rnd, _clock, _rec = _new_round(group_count=3, entries=_entries(3))
    a = _positions(rnd)[0]
    for p in a:
        rnd.select(p)
    before = snapshot(rnd)
    rnd.select(a[0])
    assert snapshot(rnd) == before


def test_reselecting_open_card_does_not_count() -> None:
    rnd, _clock, _rec = _new_round()
    rnd.select(3)
    before = snapshot(rnd)
    rnd.select(3)
    assert snapshot(rnd) == before
    assert rnd.total_clicks == 1


def test_reselecting_open_video_card_only_replays() -> None:
    rnd, _clock, rec = _new_round(entries=_entries(2, video=True))
    video = next(i for i, c in enumerate(rnd.deck) if c.is_video)
    rnd.select(video)
    rnd.select(video)
    assert rec.events.count(("replay", rnd.deck[video].pair_key)) == 2
    assert rnd.total_clicks == 1


def test_out_of_range_select_is_ignored() -> None:
    rnd, _clock, _rec = _new_round()
    before = snapshot(rnd)
    rnd.select(-1)
    rnd.select(len(rnd.deck))
    assert snapshot(rnd) == before


def test_end_to_end_two_groups() -> None:
    rnd, clock, rec = _new_round(group_size=2, group_count=2)
    groups = _positions(rnd)
    for p in groups[0]:
        rnd.select(p)
    assert rnd.matched_groups == 1
    for p in groups[1]:
        rnd.select(p)
    assert rnd.matched_groups == 2
    assert rnd.phase == "resolving_win"
    assert ("win", True) in rec.events
    assert rec.completed == []
    assert [t.delay_ms for t in clock.pending] == [1500]

    clock.advance(1500)
    assert rnd.is_complete
    assert rec.completed == [(4, 100)]
    assert rec.events[-1] == ("win", False)

    # no further input after completion
    rnd.select(0)
    assert rnd.total_clicks == 4


def test_efficiency_after_mismatches() -> None:
    rnd, clock, rec = _new_round(group_size=2, group_count=4, entries=_entries(4))
    groups = _positions(rnd)
    rnd.select(groups[0][0])
    rnd.select(groups[1][0])
    clock.advance(1000)
    for key in range(4):
        for p in groups[key]:
            rnd.select(p)
    clock.run_all()
    assert rec.completed == [(10, 80)]


def test_efficiency_percent_rounding() -> None:
    assert efficiency_percent(8, 10) == 80
    assert efficiency_percent(4, 8) == 50
    assert efficiency_percent(6, 8) == 75
    assert efficiency_percent(2, 8) == 25
    assert efficiency_percent(1, 8) == 13  # 12.5 rounds up
    assert efficiency_percent(4, 0) == 0


def test_dispose_cancels_pending_mismatch() -> None:
    rnd, clock, _rec = _new_round()
    p0, p1 = _mismatch_pair(rnd)
    rnd.select(p0)
    rnd.select(p1)
    rnd.dispose()
    assert clock.pending == []
    clock.advance(5000)
    assert rnd.deck[p0].face == "revealed"
    rnd.select(p0)
    assert rnd.total_clicks == 2


def test_round_construction_fails_without_enough_content() -> None:
    with pytest.raises(InsufficientContentError):
        Round(_entries(4), RoundConfig(group_size=2, group_count=5), scheduler=VirtualClock())
