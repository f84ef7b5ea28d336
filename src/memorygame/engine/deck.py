from __future__ import annotations

import random
from typing import Sequence

from .card import Card
from .types import (
    CardContent,
    CategoryEntry,
    ImageContent,
    InsufficientContentError,
    RoundConfig,
    TextContent,
    VideoContent,
)


def _shuffle(rng: random.Random, items: list) -> None:
    # random.Random.shuffle is an in-place Fisher-Yates
    rng.shuffle(items)


def _group_contents(entry: CategoryEntry, group_size: int) -> list[CardContent]:
    """Pick the content kind for each card of one group.

    Slot 0 shows the image and slot 1 the video when the entry has them;
    everything else (and any missing media) falls back to the entry's text.
    """
    text = TextContent(kind="text", text=entry.text)
    contents: list[CardContent] = []
    contents.append(ImageContent(kind="image", ref=entry.image) if entry.image else text)
    contents.append(VideoContent(kind="video", ref=entry.video) if entry.video else text)
    while len(contents) < group_size:
        contents.append(text)
    return contents[:group_size]


def build_deck(
    entries: Sequence[CategoryEntry],
    config: RoundConfig,
    rng: random.Random | None = None,
) -> list[Card]:
    config.validate()
    if len(entries) < config.group_count:
        raise InsufficientContentError(
            f"There are not enough cards to display the playing field "
            f"({len(entries)} entries for {config.group_count} groups)."
        )

    rng = rng or random.Random()
    pool = list(entries)
    _shuffle(rng, pool)

    cards: list[Card] = []
    for pair_key, entry in enumerate(pool[: config.group_count]):
        for content in _group_contents(entry, config.group_size):
            cards.append(Card(content=content, pair_key=pair_key))

    _shuffle(rng, cards)
    return cards
