from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from memorygame.engine.types import Category, CategoryCatalog, CategoryEntry


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _optional_str(obj: Mapping[str, object], key: str) -> str | None:
    v = obj.get(key)
    if v is None or v == "":
        return None
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def media_ref(category: str, kind: str, filename: str) -> str:
    """Asset path for a media file: assets/<category>/<images|videos>/<file>."""
    folder = "images" if kind == "image" else "videos"
    return f"assets/{category}/{folder}/{filename}"


def parse_entry(category: str, raw: Mapping[str, object]) -> CategoryEntry:
    image = _optional_str(raw, "image")
    video = _optional_str(raw, "video")
    return CategoryEntry(
        text=_require_str(raw, "text"),
        image=media_ref(category, "image", image) if image else None,
        video=media_ref(category, "video", video) if video else None,
    )


@dataclass(frozen=True)
class LevelSettings:
    group_size: int
    pairs: tuple[int, ...]
    default_pairs: int
    default_category: str | None = None


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> object:
        path = self._data_dir / f"{name}.json"
        schema = _load_json(self._schema_dir / f"{name}.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_categories(self) -> CategoryCatalog:
        raw = self._load_validated("categories")
        assert isinstance(raw, dict)
        raw_map = raw.get("categories")
        if not isinstance(raw_map, dict):
            raise ContentError("categories.json.categories must be an object")

        categories: dict[str, Category] = {}
        for name, items in raw_map.items():
            if not isinstance(name, str) or not isinstance(items, list):
                continue
            entries = tuple(parse_entry(name, item) for item in items if isinstance(item, dict))
            categories[name] = Category(name=name, entries=entries)
        return CategoryCatalog(categories=categories)

    def load_levels(self) -> LevelSettings:
        raw = self._load_validated("levels")
        assert isinstance(raw, dict)
        pairs_raw = raw.get("pairs")
        if not isinstance(pairs_raw, list):
            raise ContentError("levels.json.pairs must be a list")
        pairs = tuple(p for p in pairs_raw if isinstance(p, int))
        group_size = raw.get("group_size", 2)
        default_pairs = raw.get("default_pairs", pairs[0] if pairs else 2)
        if not isinstance(group_size, int) or not isinstance(default_pairs, int):
            raise ContentError("group_size and default_pairs must be integers")
        return LevelSettings(
            group_size=group_size,
            pairs=pairs,
            default_pairs=default_pairs,
            default_category=_optional_str(raw, "default_category"),
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        catalog = self.load_categories()
        levels = self.load_levels()
        if levels.default_category is not None and levels.default_category not in catalog.categories:
            raise ContentError(f"Unknown default_category: {levels.default_category}")
