from __future__ import annotations

import random
from pathlib import Path

import pytest

from memorygame.engine.clock import VirtualClock
from memorygame.engine.round import RoundObserver
from memorygame.engine.session import RoundResult, Session
from memorygame.engine.types import (
    Category,
    CategoryCatalog,
    CategoryEntry,
    InsufficientContentError,
    InvalidConfigurationError,
)
from memorygame.services.telemetry import TelemetryService


class CompletionSpy(RoundObserver):
    def __init__(self) -> None:
        self.results: list[tuple[int, int]] = []

    def on_round_complete(self, total_clicks: int, efficiency: int) -> None:
        self.results.append((total_clicks, efficiency))


def _catalog() -> CategoryCatalog:
    small = tuple(CategoryEntry(text=f"s{i}") for i in range(4))
    large = tuple(CategoryEntry(text=f"l{i}", image=f"assets/large/images/{i}.png") for i in range(10))
    return CategoryCatalog(
        categories={
            "small": Category(name="small", entries=small),
            "large": Category(name="large", entries=large),
        }
    )


def _session(tmp_path: Path | None = None, **kwargs: object) -> tuple[Session, VirtualClock, CompletionSpy]:
    clock = VirtualClock()
    spy = CompletionSpy()
    telemetry = TelemetryService(tmp_path / "telemetry.jsonl") if tmp_path is not None else None
    session = Session(_catalog(), clock, observer=spy, rng=random.Random(9), telemetry=telemetry, **kwargs)  # type: ignore[arg-type]
    return session, clock, spy


def _solve(session: Session) -> None:
    rnd = session.round
    assert rnd is not None
    groups: dict[int, list[int]] = {}
    for i, c in enumerate(rnd.deck):
        groups.setdefault(c.pair_key, []).append(i)
    for positions in groups.values():
        for p in positions:
            session.select(p)


def test_defaults_to_first_category() -> None:
    session, _clock, _spy = _session()
    assert session.category == "small"
    assert session.round is not None
    assert session.round.deck_size == 4
    assert session.status_message == "Click the cards to reveal groups of 2."


def test_unknown_starting_category_is_rejected() -> None:
    with pytest.raises(InvalidConfigurationError):
        _session(category="nope")


def test_completion_is_forwarded_once() -> None:
    session, clock, spy = _session()
    _solve(session)
    assert spy.results == []
    clock.run_all()
    assert spy.results == [(4, 100)]
    assert session.last_result == RoundResult(total_clicks=4, efficiency=100)
    assert "4 clicks" in session.status_message
    assert "100%" in session.status_message


def test_reconfigure_builds_fresh_round() -> None:
    session, _clock, _spy = _session()
    first = session.round
    session.select(0)
    second = session.set_level(3)
    assert second is not first
    assert second.deck_size == 6
    assert second.total_clicks == 0
    assert first is not None and first.disposed


def test_failed_reconfigure_keeps_previous_round() -> None:
    session, _clock, _spy = _session()
    current = session.round
    with pytest.raises(InsufficientContentError):
        session.set_level(5)
    assert session.round is current
    assert session.config.group_count == 2
    assert current is not None and not current.disposed

    with pytest.raises(InvalidConfigurationError):
        session.set_category("missing")
    assert session.category == "small"

    with pytest.raises(InvalidConfigurationError):
        session.set_group_size(1)
    assert session.round is current


def test_category_and_group_size_change() -> None:
    session, _clock, _spy = _session()
    rnd = session.set_category("large")
    assert session.category == "large"
    assert rnd.deck_size == 4
    rnd = session.set_group_size(3)
    assert rnd.deck_size == 6
    assert session.status_message == "Click the cards to reveal groups of 3."


def test_reconfigure_during_mismatch_cancels_timer() -> None:
    session, clock, _spy = _session()
    rnd = session.round
    assert rnd is not None
    a = next(i for i, c in enumerate(rnd.deck) if c.pair_key == 0)
    b = next(i for i, c in enumerate(rnd.deck) if c.pair_key == 1)
    session.select(a)
    session.select(b)
    assert rnd.input_locked
    session.restart()
    assert clock.pending == []
    assert session.round is not rnd
    assert session.round is not None and not session.round.input_locked


def test_telemetry_records_round_lifecycle(tmp_path: Path) -> None:
    session, clock, _spy = _session(tmp_path)
    with pytest.raises(InsufficientContentError):
        session.set_level(9)
    _solve(session)
    clock.run_all()

    assert session.telemetry is not None
    types = [e["type"] for e in session.telemetry.read_events()]
    assert types == ["round_started", "configuration_rejected", "round_completed"]
    done = session.telemetry.read_events("round_completed")[0]["payload"]
    assert done == {
        "category": "small",
        "group_size": 2,
        "group_count": 2,
        "total_clicks": 4,
        "efficiency": 100,
    }
