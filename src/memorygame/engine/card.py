from __future__ import annotations

from dataclasses import dataclass

from .types import CardContent, Face


@dataclass
class Card:
    content: CardContent
    pair_key: int
    face: Face = "hidden"
    locked: bool = False
    reveal_clicks: int = 0  # display only

    @property
    def is_video(self) -> bool:
        return self.content.kind == "video"

    @property
    def is_media(self) -> bool:
        return self.content.kind in ("image", "video")

    @property
    def revealed(self) -> bool:
        return self.face == "revealed"

    def reveal(self) -> bool:
        """Turn the card face up.

        Returns False without counting a click when the card is locked or
        already face up within the current selection cycle.
        """
        if self.locked or self.face == "revealed":
            return False
        self.face = "revealed"
        self.reveal_clicks += 1
        return True

    def conceal(self) -> bool:
        if self.locked or self.face == "hidden":
            return False
        self.face = "hidden"
        return True

    def lock(self) -> None:
        self.locked = True
