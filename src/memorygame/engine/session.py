from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Sequence

from .card import Card
from .clock import Scheduler
from .round import Round, RoundObserver
from .types import CategoryCatalog, InvalidConfigurationError, MemoryGameError, RoundConfig

if TYPE_CHECKING:
    from memorygame.services.telemetry import TelemetryService


@dataclass(frozen=True)
class RoundResult:
    total_clicks: int
    efficiency: int


class Session(RoundObserver):
    """Owns the active Round and the settings it was built from.

    Every configuration change builds a brand new Round. A rejected change
    leaves the previous Round and settings untouched.
    """

    def __init__(
        self,
        catalog: CategoryCatalog,
        scheduler: Scheduler,
        observer: RoundObserver | None = None,
        rng: random.Random | None = None,
        telemetry: TelemetryService | None = None,
        group_size: int = 2,
        group_count: int = 2,
        category: str | None = None,
        base_config: RoundConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.scheduler = scheduler
        self.observer = observer or RoundObserver()
        self.rng = rng or random.Random()
        self.telemetry = telemetry

        names = catalog.names()
        if category is None:
            if not names:
                raise InvalidConfigurationError("The catalog has no categories.")
            category = names[0]

        self.config: RoundConfig = replace(
            base_config or RoundConfig(), group_size=group_size, group_count=group_count
        )
        self.category: str = category
        self.round: Round | None = None
        self.last_result: RoundResult | None = None
        self.status_message = ""
        self.configure()

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)

    def configure(
        self,
        group_size: int | None = None,
        group_count: int | None = None,
        category: str | None = None,
    ) -> Round:
        config = replace(
            self.config,
            group_size=self.config.group_size if group_size is None else group_size,
            group_count=self.config.group_count if group_count is None else group_count,
        )
        name = self.category if category is None else category
        try:
            if name not in self.catalog.categories:
                raise InvalidConfigurationError(f"Unknown category: {name}")
            new_round = Round(
                self.catalog.get(name).entries,
                config,
                scheduler=self.scheduler,
                observer=self,
                rng=self.rng,
            )
        except MemoryGameError as e:
            self._log(
                "configuration_rejected",
                {
                    "category": name,
                    "group_size": config.group_size,
                    "group_count": config.group_count,
                    "error": str(e),
                },
            )
            raise

        old = self.round
        self.round = new_round
        self.config = config
        self.category = name
        self.last_result = None
        if old is not None:
            old.dispose()

        self.status_message = f"Click the cards to reveal groups of {config.group_size}."
        self._log(
            "round_started",
            {"category": name, "group_size": config.group_size, "group_count": config.group_count},
        )
        return new_round

    def restart(self) -> Round:
        return self.configure()

    def set_level(self, pairs: int) -> Round:
        return self.configure(group_count=pairs)

    def set_group_size(self, group_size: int) -> Round:
        return self.configure(group_size=group_size)

    def set_category(self, category: str) -> Round:
        return self.configure(category=category)

    def select(self, position: int) -> None:
        if self.round is not None:
            self.round.select(position)

    # RoundObserver: forward visual intents, keep the result for ourselves.

    def on_card_revealed(self, card: Card) -> None:
        self.observer.on_card_revealed(card)

    def on_card_concealed(self, card: Card) -> None:
        self.observer.on_card_concealed(card)

    def on_group_locked(self, cards: Sequence[Card]) -> None:
        self.observer.on_group_locked(cards)

    def on_media_replay(self, card: Card) -> None:
        self.observer.on_media_replay(card)

    def on_win_presentation(self, active: bool) -> None:
        self.observer.on_win_presentation(active)

    def on_round_complete(self, total_clicks: int, efficiency: int) -> None:
        self.last_result = RoundResult(total_clicks=total_clicks, efficiency=efficiency)
        self.status_message = (
            f"You found all groups with only {total_clicks} clicks. "
            f"That is an efficiency of {efficiency}%."
        )
        self._log(
            "round_completed",
            {
                "category": self.category,
                "group_size": self.config.group_size,
                "group_count": self.config.group_count,
                "total_clicks": total_clicks,
                "efficiency": efficiency,
            },
        )
        self.observer.on_round_complete(total_clicks, efficiency)
