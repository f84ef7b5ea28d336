from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

ContentKind = Literal["image", "text", "video"]
Face = Literal["hidden", "revealed"]
Phase = Literal["active", "resolving_win", "complete"]


class MemoryGameError(RuntimeError):
    pass


class InsufficientContentError(MemoryGameError):
    """The category holds fewer entries than the requested number of groups."""


class InvalidConfigurationError(MemoryGameError):
    """Group size / group count / deck size do not describe a playable round."""


@dataclass(frozen=True)
class ImageContent:
    kind: Literal["image"]
    ref: str


@dataclass(frozen=True)
class TextContent:
    kind: Literal["text"]
    text: str


@dataclass(frozen=True)
class VideoContent:
    kind: Literal["video"]
    ref: str


CardContent = ImageContent | TextContent | VideoContent


@dataclass(frozen=True)
class CategoryEntry:
    text: str
    image: str | None = None
    video: str | None = None


@dataclass(frozen=True)
class Category:
    name: str
    entries: tuple[CategoryEntry, ...]


@dataclass(frozen=True)
class CategoryCatalog:
    """Immutable set of categories the player can pick from."""

    categories: dict[str, Category]

    def get(self, name: str) -> Category:
        return self.categories[name]

    def names(self) -> Sequence[str]:
        return list(self.categories.keys())


@dataclass(frozen=True)
class RoundConfig:
    group_size: int = 2
    group_count: int = 2
    mismatch_delay_ms: int = 1000
    video_delay_multiplier: int = 4
    win_delay_ms: int = 1500

    @property
    def deck_size(self) -> int:
        return self.group_size * self.group_count

    def validate(self) -> None:
        if self.group_size < 2:
            raise InvalidConfigurationError(f"Groups need at least 2 cards, got {self.group_size}.")
        if self.group_count < 1:
            raise InvalidConfigurationError(f"A round needs at least 1 group, got {self.group_count}.")

    @staticmethod
    def from_deck_size(deck_size: int, group_size: int) -> "RoundConfig":
        if group_size < 2 or deck_size % group_size != 0:
            raise InvalidConfigurationError(
                f"The number of cards {deck_size} cannot contain only groups of {group_size} cards."
            )
        return RoundConfig(group_size=group_size, group_count=deck_size // group_size)
