from __future__ import annotations

import json
import os
from pathlib import Path

# Allow headless generation (CI, terminals without a display)
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # type: ignore[import-not-found]


def _repo_root() -> Path:
    # tools/generate_placeholder_assets.py -> parents: [tools, repo_root]
    return Path(__file__).resolve().parents[1]


PALETTE: list[tuple[int, int, int]] = [
    (170, 70, 60),
    (60, 120, 170),
    (90, 150, 80),
    (160, 120, 50),
    (120, 80, 160),
    (60, 150, 150),
]

SIZE = (256, 256)


def generate_all() -> int:
    root = _repo_root()
    data_dir = root / "src" / "memorygame" / "data"
    categories = json.loads((data_dir / "categories.json").read_text(encoding="utf-8"))["categories"]

    pygame.init()
    pygame.font.init()
    font = pygame.font.SysFont(None, 40)

    written = 0
    for category, entries in categories.items():
        images_dir = root / "assets" / category / "images"
        images_dir.mkdir(parents=True, exist_ok=True)
        for i, entry in enumerate(entries):
            image = entry.get("image")
            if not image:
                continue
            surf = pygame.Surface(SIZE)
            surf.fill((20, 20, 20))
            color = PALETTE[i % len(PALETTE)]
            pygame.draw.rect(surf, color, pygame.Rect(8, 8, SIZE[0] - 16, SIZE[1] - 16), border_radius=16)
            label = font.render(entry["text"], True, (245, 245, 245))
            surf.blit(label, label.get_rect(center=(SIZE[0] // 2, SIZE[1] // 2)).topleft)
            pygame.image.save(surf, (images_dir / image).as_posix())
            written += 1

    pygame.quit()
    return written


if __name__ == "__main__":
    count = generate_all()
    print(f"Wrote {count} placeholder images.")
