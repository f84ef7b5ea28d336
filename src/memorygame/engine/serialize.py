from __future__ import annotations


from .card import Card
from .round import Round
from .types import CardContent, RoundConfig


def content_to_dict(content: CardContent) -> dict[str, object]:
    if content.kind == "text":
        return {"kind": "text", "text": content.text}
    return {"kind": content.kind, "ref": content.ref}


def _card_to_dict(c: Card) -> dict[str, object]:
    return {
        "content": content_to_dict(c.content),
        "pair_key": c.pair_key,
        "face": c.face,
        "locked": c.locked,
        "reveal_clicks": c.reveal_clicks,
    }


def _config_to_dict(cfg: RoundConfig) -> dict[str, object]:
    return {
        "group_size": cfg.group_size,
        "group_count": cfg.group_count,
        "mismatch_delay_ms": cfg.mismatch_delay_ms,
        "video_delay_multiplier": cfg.video_delay_multiplier,
        "win_delay_ms": cfg.win_delay_ms,
    }


def snapshot(rnd: Round) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current round state."""
    return {
        "config": _config_to_dict(rnd.config),
        "phase": rnd.phase,
        "matched_groups": rnd.matched_groups,
        "total_clicks": rnd.total_clicks,
        "input_locked": rnd.input_locked,
        "deck": [_card_to_dict(c) for c in rnd.deck],
        "open_selection": [rnd.position_of(c) for c in rnd.open_selection],
    }
