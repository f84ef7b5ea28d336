from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    repo_root: Path
    data_dir: Path
    schema_dir: Path
    assets_dir: Path
    userdata_dir: Path

    @property
    def telemetry_path(self) -> Path:
        return self.userdata_dir / "telemetry.jsonl"


def get_paths(repo_root: Path | None = None) -> Paths:
    # data ships inside the package; assets and userdata live next to src/
    package_dir = Path(__file__).resolve().parent
    if repo_root is None:
        # src/memorygame/paths.py -> parents: [memorygame, src, repo_root]
        repo_root = Path(__file__).resolve().parents[2]
    data_dir = package_dir / "data"
    return Paths(
        repo_root=repo_root,
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        assets_dir=repo_root / "assets",
        userdata_dir=repo_root / "userdata",
    )
