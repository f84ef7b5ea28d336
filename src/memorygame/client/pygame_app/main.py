from __future__ import annotations

import argparse

import pygame  # type: ignore[import-not-found]

from memorygame.paths import get_paths
from memorygame.services.content import ContentService
from memorygame.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="memorygame")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--seed", type=int, default=None, help="fix the shuffle for reproducible decks")
    parser.add_argument("--category", default=None)
    parser.add_argument("--pairs", type=int, default=None, help="number of groups to start with")
    args = parser.parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Memory")

    paths = get_paths()
    ctx = GameContext(
        screen=screen,
        clock=pygame.time.Clock(),
        paths=paths,
        assets=AssetManager(repo_root=paths.repo_root, assets_dir=paths.assets_dir),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_path),
        seed=args.seed,
        start_category=args.category,
        start_pairs=args.pairs,
    )

    app = App(ctx, BootScene(ctx))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
