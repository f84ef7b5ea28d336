from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pygame  # type: ignore[import-not-found]


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font
    card: pygame.font.Font


class AssetManager:
    def __init__(self, repo_root: Path, assets_dir: Path) -> None:
        self.repo_root = repo_root
        self.assets_dir = assets_dir
        self._cache: dict[tuple[str, int, int], pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 34),
            card=pygame.font.SysFont(None, 28),
        )

    def _resolve(self, ref: str) -> Path:
        p = Path(ref)
        if p.is_absolute():
            return p
        # Catalog references look like "assets/<category>/images/<file>"
        if ref.startswith("assets/"):
            return self.repo_root / ref
        return self.assets_dir / ref

    def _placeholder(self, size: tuple[int, int], color: tuple[int, int, int]) -> pygame.Surface:
        surf = pygame.Surface(size)
        surf.fill(color)
        return surf

    def get_image(self, ref: str, size: tuple[int, int]) -> pygame.Surface:
        key = (ref, size[0], size[1])
        if key in self._cache:
            return self._cache[key]

        path = self._resolve(ref)
        img: pygame.Surface | None = None
        if path.exists():
            try:
                img = pygame.transform.smoothscale(pygame.image.load(path.as_posix()).convert_alpha(), size)
            except pygame.error:
                img = None
        if img is None:
            img = self._placeholder(size, (200, 40, 200))
        self._cache[key] = img
        return img

    def get_video_poster(self, ref: str, size: tuple[int, int]) -> pygame.Surface:
        """Still frame for a video card; pygame cannot decode the clip itself."""
        key = (f"poster:{ref}", size[0], size[1])
        if key in self._cache:
            return self._cache[key]
        surf = self._placeholder(size, (30, 30, 60))
        w, h = size
        tri = [(w * 0.38, h * 0.3), (w * 0.38, h * 0.7), (w * 0.68, h * 0.5)]
        pygame.draw.polygon(surf, (230, 230, 230), tri)
        label = self.fonts.small.render(Path(ref).stem, True, (230, 230, 230))
        surf.blit(label, label.get_rect(midbottom=(w // 2, h - 6)).topleft)
        self._cache[key] = surf
        return surf
