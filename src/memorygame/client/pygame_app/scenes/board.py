from __future__ import annotations

import random
from typing import Sequence

import pygame  # type: ignore[import-not-found]

from memorygame.engine.card import Card
from memorygame.engine.clock import VirtualClock
from memorygame.engine.round import RoundObserver
from memorygame.engine.session import Session
from memorygame.engine.types import MemoryGameError

from ..app import GameContext, SceneTransition
from ..ui import Button, draw_text, draw_text_centered, grid_shape

PULSE_MS = 1000
FADED_ALPHA = 77  # ~30% opacity for solved cards

BOARD_TOP = 150
BOARD_MARGIN = 20
CARD_GAP = 10


class BoardScene(RoundObserver):
    """Playfield: category/level pickers on top, the card grid below."""

    def __init__(self, ctx: GameContext) -> None:
        assert ctx.catalog is not None and ctx.levels is not None
        self.ctx = ctx
        self.clock = VirtualClock()
        rng = random.Random(ctx.seed) if ctx.seed is not None else random.Random()

        self._pulsing: set[int] = set()
        self._faded: set[int] = set()
        self._win_active = False
        self._error: str | None = None

        self.session = Session(
            ctx.catalog,
            self.clock,
            observer=self,
            rng=rng,
            telemetry=ctx.telemetry,
            group_size=ctx.levels.group_size,
            group_count=ctx.start_pairs or ctx.levels.default_pairs,
            category=ctx.start_category or ctx.levels.default_category,
        )
        self._category_buttons: list[tuple[str, Button]] = []
        self._level_buttons: list[tuple[int, Button]] = []
        self._build_controls()

    def _build_controls(self) -> None:
        assert self.ctx.catalog is not None and self.ctx.levels is not None
        x = 20
        for name in self.ctx.catalog.names():
            b = Button(
                rect=pygame.Rect(x, 20, 130, 36),
                text=name,
                on_click=lambda n=name: self._reconfigure(category=n),
            )
            self._category_buttons.append((name, b))
            x += 140
        x = 20
        for pairs in self.ctx.levels.pairs:
            b = Button(
                rect=pygame.Rect(x, 66, 60, 36),
                text=str(pairs),
                on_click=lambda p=pairs: self._reconfigure(pairs=p),
            )
            self._level_buttons.append((pairs, b))
            x += 70
        self._refresh_selection()

    def _refresh_selection(self) -> None:
        for name, b in self._category_buttons:
            b.selected = name == self.session.category
        for pairs, b in self._level_buttons:
            b.selected = pairs == self.session.config.group_count

    def _reconfigure(self, category: str | None = None, pairs: int | None = None) -> None:
        try:
            self.session.configure(group_count=pairs, category=category)
        except MemoryGameError as e:
            self._error = str(e)
            return
        self._error = None
        self._pulsing.clear()
        self._faded.clear()
        self._win_active = False
        self._refresh_selection()

    # RoundObserver

    def on_group_locked(self, cards: Sequence[Card]) -> None:
        rnd = self.session.round
        if rnd is None:
            return
        positions = [rnd.position_of(c) for c in cards]
        self._pulsing.update(positions)

        def fade() -> None:
            if self.session.round is not rnd:
                return
            self._pulsing.difference_update(positions)
            self._faded.update(positions)

        self.clock.call_later(PULSE_MS, fade)

    def on_win_presentation(self, active: bool) -> None:
        self._win_active = active

    # Scene

    def _card_rects(self) -> list[pygame.Rect]:
        rnd = self.session.round
        if rnd is None:
            return []
        w, h = self.ctx.screen.get_size()
        rows, cols = grid_shape(rnd.deck_size)
        avail_w = w - 2 * BOARD_MARGIN
        avail_h = h - BOARD_TOP - BOARD_MARGIN - 40
        size = min((avail_w - (cols - 1) * CARD_GAP) // cols, (avail_h - (rows - 1) * CARD_GAP) // rows)
        x0 = (w - (cols * size + (cols - 1) * CARD_GAP)) // 2
        rects = []
        for i in range(rnd.deck_size):
            r, c = divmod(i, cols)
            rects.append(pygame.Rect(x0 + c * (size + CARD_GAP), BOARD_TOP + r * (size + CARD_GAP), size, size))
        return rects

    def handle_event(self, event: pygame.event.Event) -> None:
        for _, b in self._category_buttons + self._level_buttons:
            if b.handle_event(event):
                return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i, rect in enumerate(self._card_rects()):
                if rect.collidepoint(event.pos):
                    self.session.select(i)
                    return

    def update(self, dt: float) -> SceneTransition | None:
        self.clock.advance(dt * 1000.0)
        return None

    def _card_face(self, card: Card, size: tuple[int, int]) -> pygame.Surface:
        surf = pygame.Surface(size, pygame.SRCALPHA)
        rect = surf.get_rect()
        if not card.revealed:
            pygame.draw.rect(surf, (50, 70, 110), rect, border_radius=10)
            return surf
        pygame.draw.rect(surf, (235, 235, 225), rect, border_radius=10)
        inner = (size[0] - 12, size[1] - 12)
        content = card.content
        if content.kind == "image":
            surf.blit(self.ctx.assets.get_image(content.ref, inner), (6, 6))
        elif content.kind == "video":
            surf.blit(self.ctx.assets.get_video_poster(content.ref, inner), (6, 6))
        else:
            draw_text_centered(surf, self.ctx.assets.fonts.card, content.text, rect, color=(20, 20, 20))
        if card.reveal_clicks:
            draw_text(surf, self.ctx.assets.fonts.small, str(card.reveal_clicks), (8, size[1] - 18), color=(160, 40, 40))
        return surf

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((14, 18, 24) if not self._win_active else (30, 60, 30))
        fonts = self.ctx.assets.fonts
        for _, b in self._category_buttons + self._level_buttons:
            b.draw(screen, fonts.ui)

        rnd = self.session.round
        if rnd is not None:
            for i, rect in enumerate(self._card_rects()):
                face = self._card_face(rnd.deck[i], rect.size)
                if i in self._faded:
                    face.set_alpha(FADED_ALPHA)
                screen.blit(face, rect.topleft)
                if i in self._pulsing:
                    pygame.draw.rect(screen, (250, 210, 90), rect, width=4, border_radius=10)

        message = self._error or self.session.status_message
        color = (240, 90, 90) if self._error else (240, 240, 240)
        draw_text(screen, fonts.ui, message, (20, 115), color=color)
        if self._win_active:
            draw_text(screen, fonts.big, "All groups found!", (20, screen.get_height() - 40))
